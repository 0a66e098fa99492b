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
Implementation of partitioning stages.

Both stages collect elements into batches of a fixed size, and emit each batch as a
single list once it is complete. They differ in how they treat an incomplete batch
left over when the input is exhausted:

- :class:`.Partition` drops it
- :class:`.PartitionAll` emits it as a final, shorter batch
"""

from __future__ import annotations

import logging
from abc import ABCMeta
from typing import Generic, TypeVar

from pytools.api import inheritdoc

from ..core import EMPTY, TERMINATE, AtomicStage, Produced, Signal
from ..util import validate_count

log = logging.getLogger(__name__)

__all__ = [
    "Partition",
    "PartitionAll",
]

#
# Type variables
#

T = TypeVar("T")


#
# Classes
#


@inheritdoc(match="[see superclass]")
class _BasePartition(AtomicStage[T, list[T]], Generic[T], metaclass=ABCMeta):
    """
    Collects elements into batches of a fixed size.
    """

    #: If ``True``, emit an incomplete trailing batch on flush; if ``False``, drop
    #: it.
    _emit_incomplete: bool

    #: The number of elements per batch.
    size: int

    #: The elements of the current, incomplete batch.
    _batch: list[T]

    def __init__(self, size: int) -> None:
        """
        :param size: the number of elements per batch; must be at least 1
        :raises TypeError: if the size is not an integer
        :raises ValueError: if the size is less than 1
        """
        self.size = validate_count(size, arg_name="size", minimum=1)
        self._batch = []

    def _step(self, element: T) -> Signal[list[T]]:
        """[see superclass]"""
        batch = self._batch
        batch.append(element)
        if len(batch) < self.size:
            return EMPTY
        self._batch = []
        return Produced(batch)

    def _flush(self) -> Signal[list[T]]:
        """[see superclass]"""
        batch = self._batch
        if not batch:
            return TERMINATE
        self._batch = []
        if self._emit_incomplete:
            return Produced(batch)
        log.debug(
            f"{self.name} dropped incomplete batch of {len(batch)} of {self.size} "
            "elements"
        )
        return TERMINATE


class Partition(_BasePartition[T], Generic[T]):
    """
    Collects elements into batches of a fixed size; an incomplete batch remaining at
    the end of the input is dropped.

    For example, partitioning elements ``1`` to ``7`` with size 2 produces batches
    ``[1, 2]``, ``[3, 4]``, and ``[5, 6]``.
    """

    _emit_incomplete = False


class PartitionAll(_BasePartition[T], Generic[T]):
    """
    Collects elements into batches of a fixed size; an incomplete batch remaining at
    the end of the input is emitted as a final, shorter batch.

    For example, partitioning elements ``1`` to ``7`` with size 2 produces batches
    ``[1, 2]``, ``[3, 4]``, ``[5, 6]``, and ``[7]``.
    """

    _emit_incomplete = True
