"""
The catalogue of ready-made stages.

Each stage is constructed from the parameters of its transformation only, e.g., a
function, a predicate, a batch size, or a count. Invalid parameters are rejected
at construction time.

Stateless stages:

- :class:`.Map`, :class:`.MapCat`: transform elements
- :class:`.Filter`, :class:`.Remove`: select elements
- :class:`.Replace`: substitute elements

Stateful stages:

- :class:`.Partition`, :class:`.PartitionAll`: batch elements
- :class:`.Take`, :class:`.TakeWhile`: end the stream early
- :class:`.Drop`, :class:`.DropWhile`: skip leading elements
"""

from ._counting import *
from ._partition import *
from ._stateless import *
