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
Implementation of stage base classes.
"""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from typing import Generic, TypeVar, final

from pytools.api import inheritdoc
from pytools.expression import (
    Expression,
    HasExpressionRepr,
    expression_from_init_params,
)

from ._signal import TERMINATE, Signal

log = logging.getLogger(__name__)

__all__ = [
    "AtomicStage",
    "Stage",
]

#
# Type variables
#
# Naming convention used here:
# _ret for covariant type variables used in return positions
# _arg for contravariant type variables used in argument positions
#

T_Input_arg = TypeVar("T_Input_arg", contravariant=True)
T_Output_ret = TypeVar("T_Output_ret", covariant=True)
T_Product_ret = TypeVar("T_Product_ret", covariant=True)


#
# Classes
#


class Stage(HasExpressionRepr, Generic[T_Input_arg, T_Output_ret], metaclass=ABCMeta):
    """
    A transformation unit that is driven one element at a time.

    A stage is offered each input element via :meth:`.step`, in arrival order. Once
    the input is exhausted, :meth:`.flush` is called repeatedly until it returns
    :data:`.TERMINATE`, giving stateful stages the opportunity to emit buffered
    output.

    Each call returns exactly one :class:`.Signal`, and therefore at most one output
    value. Once a stage has returned :data:`.TERMINATE`, it returns
    :data:`.TERMINATE` for all further calls.

    Stages are composed using the ``>>`` operator, where the left stage processes
    each element before the right stage:

    .. code-block:: python

        pipeline = Filter(is_even) >> PartitionAll(3)

    A stage is owned by at most one pipeline or application, since it carries the
    state of a single stream.
    """

    #: The pipeline or application that has claimed this stage, if any.
    _owner: object | None = None

    @property
    def name(self) -> str:
        """
        The name of this stage.
        """
        return type(self).__name__

    @property
    @abstractmethod
    def is_terminated(self) -> bool:
        """
        ``True`` if this stage has reached its terminal state, ``False`` otherwise.
        """

    @abstractmethod
    def step(self, element: T_Input_arg) -> Signal[T_Output_ret]:
        """
        Offer the next input element to this stage.

        The element is consumed and will never be offered again.

        :param element: the input element
        :return: the effect of the element: a single output value, no output, or
            termination
        """

    @abstractmethod
    def flush(self) -> Signal[T_Output_ret]:
        """
        Request buffered output after the input has been exhausted.

        Must be called repeatedly until it returns :data:`.TERMINATE`.

        :return: the next buffered output value, no output (ask again), or
            termination
        """

    @abstractmethod
    def to_expression(self) -> Expression:
        """[see superclass]"""

    def _claim(self, owner: object) -> None:
        """
        Register the given pipeline or application as the exclusive owner of this
        stage.

        :param owner: the new owner
        :raises ValueError: if this stage is already owned
        """
        self._check_unowned()
        self._owner = owner

    def _check_unowned(self) -> None:
        # raises ValueError if this stage is already owned
        if self._owner is not None:
            raise ValueError(
                f"Stage {self.name} is already in use by {type(self._owner).__name__} "
                "and cannot be shared; create a new stage instead"
            )

    def __rshift__(
        self, other: Stage[T_Output_ret, T_Product_ret]
    ) -> Stage[T_Input_arg, T_Product_ret]:
        if isinstance(other, Stage):
            from .._compose import compose

            return compose(self, other)
        else:
            return NotImplemented

    def __str__(self) -> str:
        """[see superclass]"""
        return str(self.to_expression())


@inheritdoc(match="[see superclass]")
class AtomicStage(
    Stage[T_Input_arg, T_Output_ret],
    Generic[T_Input_arg, T_Output_ret],
    metaclass=ABCMeta,
):
    """
    A stage that is not a composition of other stages.

    Subclasses implement :meth:`._step` and :meth:`._flush`; this class ensures that
    neither is called again once either of them has returned :data:`.TERMINATE`.

    The representation of an atomic stage is derived from its ``__init__``
    parameters, so subclasses should store each parameter in an attribute of the
    same name.
    """

    #: ``True`` once this stage has returned :data:`.TERMINATE`.
    _terminated: bool = False

    @property
    @final
    def is_terminated(self) -> bool:
        """[see superclass]"""
        return self._terminated

    @final
    def step(self, element: T_Input_arg) -> Signal[T_Output_ret]:
        """[see superclass]"""
        if self._terminated:
            return TERMINATE
        return self._record(self._step(element))

    @final
    def flush(self) -> Signal[T_Output_ret]:
        """[see superclass]"""
        if self._terminated:
            return TERMINATE
        return self._record(self._flush())

    @abstractmethod
    def _step(self, element: T_Input_arg) -> Signal[T_Output_ret]:
        """
        Process the next input element; only called while this stage is not
        terminated.

        :param element: the input element
        :return: the resulting signal
        """

    def _flush(self) -> Signal[T_Output_ret]:
        """
        Emit buffered output; only called while this stage is not terminated.

        Stateless stages have nothing to flush and terminate immediately.

        :return: the resulting signal
        """
        return TERMINATE

    def to_expression(self) -> Expression:
        """[see superclass]"""
        return expression_from_init_params(self)

    def _record(self, signal: Signal[T_Output_ret]) -> Signal[T_Output_ret]:
        if signal.is_terminate:
            log.debug(f"Stage {self.name} terminated")
            self._terminated = True
        return signal

