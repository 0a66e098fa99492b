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
Application of stages to the sending side of a channel.
"""

from __future__ import annotations

import logging
import threading
from types import TracebackType
from typing import Generic, TypeVar, final

from ..core import Produced, Stage
from ._channel import Receiver, Sender, channel
from ._errors import ChannelClosedError, DisconnectedError

log = logging.getLogger(__name__)

__all__ = [
    "TransducingSender",
    "transducing_channel",
]

#
# Type variables
#
# Naming convention used here:
# _ret for covariant type variables used in return positions
# _arg for contravariant type variables used in argument positions
#

T_Input_arg = TypeVar("T_Input_arg", contravariant=True)
T_Output = TypeVar("T_Output")


#
# Classes
#


@final
class TransducingSender(Generic[T_Input_arg, T_Output]):
    """
    The sending side of a channel that passes every sent element through a stage
    before it reaches the receiver.

    Each output of the stage is sent to the receiver as soon as it is produced.
    Closing the transducing sender flushes the stage, sends all remaining outputs to
    the receiver, and then closes the underlying channel; the receiver therefore
    sees every output before it sees the end of the stream.

    The flush runs exactly once. Once the stage has terminated, either during a
    :meth:`.send` or through :meth:`.close`, the sender is inert: further calls to
    :meth:`.send` raise a :class:`.ChannelClosedError` without touching the stage,
    and further calls to :meth:`.close` have no effect.

    Transducing senders are context managers, closing the sender on exit
    regardless of how the ``with`` block is left:

    .. code-block:: python

        sender, receiver = transducing_channel(Filter(is_even) >> PartitionAll(6))

        def produce() -> None:
            with sender:
                for i in range(10):
                    sender.send(i)

        threading.Thread(target=produce).start()
        assert list(receiver) == [[0, 2, 4, 6, 8]]

    Calls to :meth:`.send` and :meth:`.close` are serialized, but elements are
    expected to come from a single producer thread to have a well-defined order.
    """

    #: The stage applied to every sent element.
    stage: Stage[T_Input_arg, T_Output]

    #: The sending side of the underlying channel.
    _sender: Sender[T_Output]

    #: ``True`` once the stage has terminated or the sender has been closed.
    _terminated: bool

    #: ``True`` once an output could not be sent because the receiver was closed.
    _disconnected: bool

    #: Serializes access to the stage.
    _lock: threading.Lock

    def __init__(
        self, stage: Stage[T_Input_arg, T_Output], sender: Sender[T_Output]
    ) -> None:
        """
        :param stage: the stage or pipeline to apply to every sent element; it must
            not be in use elsewhere
        :param sender: the sending side of the underlying channel
        :raises TypeError: if the stage is not a :class:`.Stage`
        :raises ValueError: if the stage is already in use
        """
        if not isinstance(stage, Stage):
            raise TypeError(
                f"arg stage must be a Stage, but got a {type(stage).__name__}"
            )
        stage._claim(self)
        self.stage = stage
        self._sender = sender
        self._terminated = False
        self._disconnected = False
        self._lock = threading.Lock()

    @property
    def is_terminated(self) -> bool:
        """
        ``True`` if the stage has terminated or this sender has been closed,
        ``False`` otherwise.
        """
        return self._terminated

    def send(self, element: T_Input_arg) -> None:
        """
        Pass an element through the stage, and send the resulting output, if any, to
        the receiver.

        If the stage terminates as a result, this sender becomes inert and the
        underlying channel is closed.

        Once an output could not be delivered because the receiver was closed, every
        further element is rejected with a :class:`.DisconnectedError` without
        passing it through the stage.

        :param element: the element to send
        :raises ChannelClosedError: if the stage has terminated or this sender has
            been closed
        :raises DisconnectedError: if the receiver has been closed; the stage has
            processed the element nevertheless if this is the first output that
            could not be delivered
        """
        with self._lock:
            if self._terminated:
                raise ChannelClosedError("cannot send to a closed transducing channel")
            if self._disconnected:
                raise DisconnectedError(element)
            signal = self.stage.step(element)
            if isinstance(signal, Produced):
                try:
                    self._sender.send(signal.value)
                except DisconnectedError:
                    self._disconnected = True
                    raise
            elif signal.is_terminate:
                log.debug(f"Stage {self.stage.name} terminated, closing channel")
                self._terminated = True
                self._sender.close()

    def close(self) -> None:
        """
        Flush the stage, send all remaining outputs to the receiver, then close the
        underlying channel.

        Has no effect if the stage has already terminated or this sender has already
        been closed. If an earlier output could not be delivered because the receiver
        was closed, the stage is not flushed and only the channel is closed.

        :raises DisconnectedError: if the receiver was closed before all outputs
            could be sent; the underlying channel is closed nevertheless
        """
        with self._lock:
            if self._terminated:
                return
            self._terminated = True
            if self._disconnected:
                log.debug(f"Receiver closed, not flushing stage {self.stage.name}")
                self._sender.close()
                return
            log.debug(f"Flushing stage {self.stage.name}")
            try:
                stage = self.stage
                sender = self._sender
                while True:
                    signal = stage.flush()
                    if isinstance(signal, Produced):
                        sender.send(signal.value)
                    elif signal.is_terminate:
                        break
            finally:
                self._sender.close()

    def __enter__(self) -> TransducingSender[T_Input_arg, T_Output]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


#
# Functions
#


def transducing_channel(
    stage: Stage[T_Input_arg, T_Output], maxsize: int = 0
) -> tuple[TransducingSender[T_Input_arg, T_Output], Receiver[T_Output]]:
    """
    Create a channel that passes every sent element through the given stage.

    Only the sending side is transducing; the receiving side is a plain
    :class:`.Receiver`.

    :param stage: the stage or pipeline to apply to every sent element; it must
        not be in use elsewhere
    :param maxsize: the maximum number of outputs in transit; sending blocks while
        the channel is full. If ``0``, the channel is unbounded.
    :return: the transducing sending side and the receiving side of the new
        channel
    :raises ValueError: if the stage is already in use, or if the maximum size is
        negative
    """
    sender: Sender[T_Output]
    receiver: Receiver[T_Output]
    sender, receiver = channel(maxsize)
    return TransducingSender(stage, sender), receiver
