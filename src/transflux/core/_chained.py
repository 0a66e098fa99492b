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
Implementation of the chained stage, a sequential composition of two stages.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Generic, TypeVar

from pytools.api import inheritdoc
from pytools.expression import Expression

from ._signal import EMPTY, TERMINATE, Produced, Signal
from ._stage import Stage

log = logging.getLogger(__name__)

__all__ = [
    "ChainedStage",
]

#
# Type variables
#
# Naming convention used here:
# _ret for covariant type variables used in return positions
# _arg for contravariant type variables used in argument positions
#

T_Input_arg = TypeVar("T_Input_arg", contravariant=True)
T_Intermediate = TypeVar("T_Intermediate")
T_Output_ret = TypeVar("T_Output_ret", covariant=True)


#
# Classes
#


@inheritdoc(match="[see superclass]")
class ChainedStage(
    Stage[T_Input_arg, T_Output_ret],
    Generic[T_Input_arg, T_Intermediate, T_Output_ret],
):
    """
    A sequential composition of two stages, with each output of the upstream stage
    serving as input to the downstream stage.

    When the upstream stage terminates, whether at the end of the input or early
    (e.g., a :class:`.Take` stage reaching its count), the downstream stage is
    flushed to completion. Since every call can only return a single value, any
    further values obtained from the downstream flush are queued and returned by
    subsequent calls, before the chained stage reports termination.
    """

    #: The stage that processes each input element first.
    upstream: Stage[T_Input_arg, T_Intermediate]

    #: The stage that processes the outputs of the upstream stage.
    downstream: Stage[T_Intermediate, T_Output_ret]

    #: Outputs of the downstream stage not yet returned to the caller.
    _pending: deque[T_Output_ret]

    #: ``True`` once the downstream stage has terminated.
    _terminated: bool

    def __init__(
        self,
        upstream: Stage[T_Input_arg, T_Intermediate],
        downstream: Stage[T_Intermediate, T_Output_ret],
    ) -> None:
        """
        :param upstream: the stage that processes each input element first
        :param downstream: the stage that processes the outputs of the upstream stage
        :raises TypeError: if either argument is not a stage
        :raises ValueError: if either stage is already in use by another pipeline or
            application
        """
        for arg_name, arg in (("upstream", upstream), ("downstream", downstream)):
            if not isinstance(arg, Stage):
                raise TypeError(
                    f"arg {arg_name} must be a Stage, but got a {type(arg).__name__}"
                )
        if upstream is downstream:
            raise ValueError(f"Cannot chain stage {upstream.name} with itself")

        # neither stage is claimed unless both are available
        upstream._check_unowned()
        downstream._check_unowned()
        upstream._claim(self)
        downstream._claim(self)

        self.upstream = upstream
        self.downstream = downstream
        self._pending = deque()
        self._terminated = False

    @property
    def is_terminated(self) -> bool:
        """[see superclass]"""
        return self._terminated and not self._pending

    def step(self, element: T_Input_arg) -> Signal[T_Output_ret]:
        """[see superclass]"""
        if self._pending:
            return Produced(self._pending.popleft())
        elif self._terminated:
            return TERMINATE
        return self._forward(self.upstream.step(element))

    def flush(self) -> Signal[T_Output_ret]:
        """[see superclass]"""
        if self._pending:
            return Produced(self._pending.popleft())
        elif self._terminated:
            return TERMINATE
        return self._forward(self.upstream.flush())

    def to_expression(self) -> Expression:
        """[see superclass]"""
        return self.upstream.to_expression() >> self.downstream.to_expression()

    def _forward(self, signal: Signal[T_Intermediate]) -> Signal[T_Output_ret]:
        # pass the result of the upstream stage on to the downstream stage
        if isinstance(signal, Produced):
            result = self.downstream.step(signal.value)
            if result.is_terminate:
                self._terminated = True
            return result
        elif signal.is_terminate:
            return self._drain()
        else:
            return EMPTY

    def _drain(self) -> Signal[T_Output_ret]:
        # the upstream stage is exhausted: flush the downstream stage as if it had
        # reached the end of its input
        log.debug(
            f"Upstream stage {self.upstream.name} terminated, flushing downstream "
            f"stage {self.downstream.name}"
        )
        pending = self._pending
        while True:
            signal = self.downstream.flush()
            if isinstance(signal, Produced):
                pending.append(signal.value)
            elif signal.is_terminate:
                break
        self._terminated = True
        if pending:
            return Produced(pending.popleft())
        else:
            return TERMINATE
