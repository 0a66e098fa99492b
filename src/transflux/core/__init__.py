"""
Core classes of *transflux*: step signals and the stage protocol.

These classes are needed when implementing custom stages; pipelines built from
the stages in :mod:`transflux.stages` only need :class:`.Stage` and the
composition functions.
"""

from ._signal import *
from ._stage import *
from ._chained import *
