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
Implementation of step signals.

Every call to :meth:`.Stage.step` or :meth:`.Stage.flush` returns exactly one
signal:

- :data:`.TERMINATE`: the stage will not produce further output, and must not be
  offered further input
- :data:`.EMPTY`: the call consumed its input, or a flush request, without producing
  output
- :class:`.Produced`: the call produced exactly one output value
"""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from typing import Any, Generic, TypeVar, final

from typing_extensions import Never

from pytools.api import inheritdoc
from pytools.expression import (
    Expression,
    HasExpressionRepr,
    expression_from_init_params,
)
from pytools.expression.atomic import Id
from pytools.meta import SingletonABCMeta

log = logging.getLogger(__name__)

__all__ = [
    "EMPTY",
    "Empty",
    "Produced",
    "Signal",
    "TERMINATE",
    "Terminate",
]

#
# Type variables
#
# Naming convention used here:
# _ret for covariant type variables used in return positions
# _arg for contravariant type variables used in argument positions
#

T_Value_ret = TypeVar("T_Value_ret", covariant=True)


#
# Classes
#


class Signal(HasExpressionRepr, Generic[T_Value_ret], metaclass=ABCMeta):
    """
    The result of a single step of a stage.
    """

    @property
    def is_terminate(self) -> bool:
        """
        ``True`` if this signal ends the stream, ``False`` otherwise.
        """
        return False

    @property
    def is_empty(self) -> bool:
        """
        ``True`` if this signal carries no output value, ``False`` otherwise.
        """
        return False

    @property
    def is_produced(self) -> bool:
        """
        ``True`` if this signal carries an output value, ``False`` otherwise.
        """
        return False

    @abstractmethod
    def to_expression(self) -> Expression:
        """[see superclass]"""


@final
@inheritdoc(match="[see superclass]")
class Terminate(Signal[Never], metaclass=SingletonABCMeta):
    """
    Signals that a stage has reached its terminal state.

    A stage that returned this signal once returns it for every subsequent step or
    flush.
    """

    @property
    def is_terminate(self) -> bool:
        """``True``."""
        return True

    def to_expression(self) -> Expression:
        """[see superclass]"""
        return Id(type(self))()


@final
@inheritdoc(match="[see superclass]")
class Empty(Signal[Never], metaclass=SingletonABCMeta):
    """
    Signals that a step produced no output; the caller should keep driving the
    stage.
    """

    @property
    def is_empty(self) -> bool:
        """``True``."""
        return True

    def to_expression(self) -> Expression:
        """[see superclass]"""
        return Id(type(self))()


@final
@inheritdoc(match="[see superclass]")
class Produced(Signal[T_Value_ret], Generic[T_Value_ret]):
    """
    Signals that a step produced exactly one output value.

    Signals compare equal if their values are equal. Like a tuple, a signal is
    hashable only if its value is hashable; signals carrying batches (lists) are
    not.
    """

    #: The output value.
    value: T_Value_ret

    def __init__(self, value: T_Value_ret) -> None:
        """
        :param value: the output value
        """
        self.value = value

    @property
    def is_produced(self) -> bool:
        """``True``."""
        return True

    def to_expression(self) -> Expression:
        """[see superclass]"""
        return expression_from_init_params(self)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Produced) and self.value == other.value

    def __hash__(self) -> int:
        return hash((Produced, self.value))


#
# Constants
#

#: The terminate signal singleton.
TERMINATE = Terminate()

#: The empty signal singleton.
EMPTY = Empty()
