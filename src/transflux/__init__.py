# -----------------------------------------------------------------------------
# © 2024 Boston Consulting Group. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# -----------------------------------------------------------------------------


"""
Composable transformation stages, applied unchanged to lists, iterators, and
channels between threads.

A stage describes *what* transformation to perform, independently of the structure
that carries the data. Stages are combined once into a pipeline, and the pipeline
is then applied to a carrier of data:

- :func:`.transduce`
    applies a pipeline to an iterable and returns a list of the outputs
- :func:`.iter_transduce` and :func:`.atransduce`
    apply a pipeline lazily to a synchronous or asynchronous iterable
- :func:`.transducing_channel`
    applies a pipeline to the sending side of a channel, so that every element sent
    by a producer thread is transformed before it reaches the consumer thread

Stages are combined with the ``>>`` operator, or with functions :func:`.compose`
and :func:`.chain`. The stage to the left of ``>>`` processes each element first:

.. code-block:: python

    from transflux import transduce
    from transflux.stages import Filter, Map, PartitionAll

    pipeline = Map(lambda x: x * 3) >> Filter(lambda x: x % 2 == 0) >> PartitionAll(2)
    transduce(pipeline, range(6))  # [[0, 6], [12]]

Every stage follows the same step protocol (see :class:`.Stage`): it is offered one
element at a time and answers with a single :class:`.Signal`, which is either one
output value, no output, or termination. When the input is exhausted, the stage is
flushed until it terminates, so that stateful stages such as
:class:`.PartitionAll` can emit the elements they are still holding.

Custom stages are implemented by subclassing :class:`.AtomicStage`.
"""

from ._apply import *
from ._compose import *

__version__ = "1.0.0"
