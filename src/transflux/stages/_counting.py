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
Implementation of stages that end or start passing on elements depending on their
position in the input.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from pytools.api import inheritdoc

from ..core import EMPTY, TERMINATE, AtomicStage, Produced, Signal
from ..util import validate_callable, validate_count

log = logging.getLogger(__name__)

__all__ = [
    "Drop",
    "DropWhile",
    "Take",
    "TakeWhile",
]

#
# Type variables
#

T = TypeVar("T")


#
# Classes
#


@inheritdoc(match="[see superclass]")
class Take(AtomicStage[T, T], Generic[T]):
    """
    Passes on the first elements up to a given count, then terminates.

    The step passing on the last permitted element produces that element; the
    next step or flush terminates. A pipeline containing this stage therefore
    ends early, and stages downstream of it are flushed when it terminates.
    """

    #: The number of elements to pass on.
    count: int

    #: The number of elements passed on so far.
    _taken: int

    def __init__(self, count: int) -> None:
        """
        :param count: the number of elements to pass on
        :raises TypeError: if the count is not an integer
        :raises ValueError: if the count is negative
        """
        self.count = validate_count(count, arg_name="count")
        self._taken = 0

    def _step(self, element: T) -> Signal[T]:
        """[see superclass]"""
        if self._taken >= self.count:
            return TERMINATE
        self._taken += 1
        return Produced(element)


@inheritdoc(match="[see superclass]")
class TakeWhile(AtomicStage[T, T], Generic[T]):
    """
    Passes on elements as long as a predicate holds, and terminates at the first
    element for which it does not.
    """

    #: The predicate that elements must satisfy to be passed on.
    predicate: Callable[[T], bool]

    def __init__(self, predicate: Callable[[T], bool]) -> None:
        """
        :param predicate: the predicate that elements must satisfy to be passed on
        :raises TypeError: if the predicate is not callable
        """
        self.predicate = validate_callable(predicate, arg_name="predicate")

    def _step(self, element: T) -> Signal[T]:
        """[see superclass]"""
        if self.predicate(element):
            return Produced(element)
        else:
            return TERMINATE


@inheritdoc(match="[see superclass]")
class Drop(AtomicStage[T, T], Generic[T]):
    """
    Drops the first elements up to a given count, and passes on all remaining
    elements.
    """

    #: The number of elements to drop.
    count: int

    #: The number of elements dropped so far.
    _dropped: int

    def __init__(self, count: int) -> None:
        """
        :param count: the number of elements to drop
        :raises TypeError: if the count is not an integer
        :raises ValueError: if the count is negative
        """
        self.count = validate_count(count, arg_name="count")
        self._dropped = 0

    def _step(self, element: T) -> Signal[T]:
        """[see superclass]"""
        if self._dropped < self.count:
            self._dropped += 1
            return EMPTY
        return Produced(element)


@inheritdoc(match="[see superclass]")
class DropWhile(AtomicStage[T, T], Generic[T]):
    """
    Drops elements as long as a predicate holds; from the first element for which it
    does not, passes on all elements.
    """

    #: The predicate identifying leading elements to drop.
    predicate: Callable[[T], bool]

    #: ``True`` once the predicate has failed for an element.
    _passing: bool

    def __init__(self, predicate: Callable[[T], bool]) -> None:
        """
        :param predicate: the predicate identifying leading elements to drop
        :raises TypeError: if the predicate is not callable
        """
        self.predicate = validate_callable(predicate, arg_name="predicate")
        self._passing = False

    def _step(self, element: T) -> Signal[T]:
        """[see superclass]"""
        if not self._passing:
            if self.predicate(element):
                return EMPTY
            self._passing = True
        return Produced(element)
