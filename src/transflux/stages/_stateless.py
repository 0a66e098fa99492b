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
Implementation of stages that transform or select elements one by one.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from typing import Generic, TypeVar

from pytools.api import inheritdoc

from ..core import EMPTY, TERMINATE, AtomicStage, Produced, Signal
from ..util import validate_callable

log = logging.getLogger(__name__)

__all__ = [
    "Filter",
    "Map",
    "MapCat",
    "Remove",
    "Replace",
]

#
# Type variables
#
# Naming convention used here:
# _ret for covariant type variables used in return positions
# _arg for contravariant type variables used in argument positions
#

T = TypeVar("T")
T_Input_arg = TypeVar("T_Input_arg", contravariant=True)
T_Output_ret = TypeVar("T_Output_ret", covariant=True)


#
# Classes
#


@inheritdoc(match="[see superclass]")
class Map(AtomicStage[T_Input_arg, T_Output_ret], Generic[T_Input_arg, T_Output_ret]):
    """
    Applies a function to every element.

    Every step produces the result of the function; flushing terminates
    immediately.
    """

    #: The function applied to each element.
    function: Callable[[T_Input_arg], T_Output_ret]

    def __init__(self, function: Callable[[T_Input_arg], T_Output_ret]) -> None:
        """
        :param function: the function to apply to each element
        :raises TypeError: if the function is not callable
        """
        self.function = validate_callable(function, arg_name="function")

    def _step(self, element: T_Input_arg) -> Signal[T_Output_ret]:
        """[see superclass]"""
        return Produced(self.function(element))


@inheritdoc(match="[see superclass]")
class MapCat(
    AtomicStage[T_Input_arg, T_Output_ret], Generic[T_Input_arg, T_Output_ret]
):
    """
    Applies a function returning an iterable to every element, and emits the values
    of each iterable in order.

    Only one value can be emitted per step, so the values of each iterable are
    buffered; each step emits the oldest buffered value, and flushing emits the
    remaining values one by one before terminating.
    """

    #: The function applied to each element.
    function: Callable[[T_Input_arg], Iterable[T_Output_ret]]

    #: Values waiting to be emitted.
    _buffer: deque[T_Output_ret]

    def __init__(
        self, function: Callable[[T_Input_arg], Iterable[T_Output_ret]]
    ) -> None:
        """
        :param function: the function to apply to each element, returning an
            iterable of output values
        :raises TypeError: if the function is not callable
        """
        self.function = validate_callable(function, arg_name="function")
        self._buffer = deque()

    def _step(self, element: T_Input_arg) -> Signal[T_Output_ret]:
        """[see superclass]"""
        self._buffer.extend(self.function(element))
        return self._flush_one()

    def _flush(self) -> Signal[T_Output_ret]:
        """[see superclass]"""
        if self._buffer:
            return self._flush_one()
        return TERMINATE

    def _flush_one(self) -> Signal[T_Output_ret]:
        if self._buffer:
            return Produced(self._buffer.popleft())
        else:
            return EMPTY


@inheritdoc(match="[see superclass]")
class Filter(AtomicStage[T, T], Generic[T]):
    """
    Passes on the elements for which a predicate holds, and drops all others.
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
            return EMPTY


@inheritdoc(match="[see superclass]")
class Remove(AtomicStage[T, T], Generic[T]):
    """
    Drops the elements for which a predicate holds, and passes on all others.

    This is the inverse of :class:`.Filter`.
    """

    #: The predicate identifying elements to drop.
    predicate: Callable[[T], bool]

    def __init__(self, predicate: Callable[[T], bool]) -> None:
        """
        :param predicate: the predicate identifying elements to drop
        :raises TypeError: if the predicate is not callable
        """
        self.predicate = validate_callable(predicate, arg_name="predicate")

    def _step(self, element: T) -> Signal[T]:
        """[see superclass]"""
        if self.predicate(element):
            return EMPTY
        else:
            return Produced(element)


@inheritdoc(match="[see superclass]")
class Replace(AtomicStage[T, T], Generic[T]):
    """
    Replaces elements that are keys of a mapping with the associated value, and
    passes on all other elements unchanged.

    Elements must be hashable.
    """

    #: Maps elements to their replacements.
    replacements: Mapping[T, T]

    def __init__(self, replacements: Mapping[T, T]) -> None:
        """
        :param replacements: maps elements to their replacements
        :raises TypeError: if the replacements are not a mapping
        """
        if not isinstance(replacements, Mapping):
            raise TypeError(
                "arg replacements must be a mapping, but got a "
                f"{type(replacements).__name__}"
            )
        self.replacements = replacements

    def _step(self, element: T) -> Signal[T]:
        """[see superclass]"""
        return Produced(self.replacements.get(element, element))
