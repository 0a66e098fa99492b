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
Implementation of a closable channel for passing values between threads.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterator
from types import TracebackType
from typing import Generic, TypeVar, final

from ._errors import ChannelClosedError, DisconnectedError

log = logging.getLogger(__name__)

__all__ = [
    "Receiver",
    "Sender",
    "channel",
]

#
# Type variables
#

T = TypeVar("T")


#
# Constants
#

# Marks the end of the values in the queue, once the sender has been closed.
_END_OF_CHANNEL = object()

# Interval, in seconds, at which a sender blocked on a full queue checks whether the
# receiver has been closed.
_POLL_INTERVAL = 0.05


#
# Classes
#


class _ChannelState:
    """
    State shared by the two sides of a channel.
    """

    #: The values in transit.
    values: queue.Queue[object]

    #: ``True`` once the receiving side has been closed.
    disconnected: bool

    #: Guards :attr:`disconnected`.
    lock: threading.Lock

    def __init__(self, maxsize: int) -> None:
        self.values = queue.Queue(maxsize=maxsize)
        self.disconnected = False
        self.lock = threading.Lock()


@final
class Sender(Generic[T]):
    """
    The sending side of a channel.

    A sender is intended to be used by a single producer thread. Closing the sender
    signals the end of the stream to the receiver, once the receiver has received
    all values sent before.

    Senders can be used as context managers, closing the sender on exit.
    """

    #: ``True`` once this sender has been closed.
    _closed: bool

    def __init__(self, state: _ChannelState) -> None:
        """
        :param state: the state shared with the receiver; senders are created by
            function :func:`.channel`
        """
        self._state = state
        self._closed = False

    @property
    def is_closed(self) -> bool:
        """
        ``True`` if this sender has been closed, ``False`` otherwise.
        """
        return self._closed

    def send(self, value: T) -> None:
        """
        Send a value to the receiver.

        Blocks while the channel is at capacity.

        :param value: the value to send
        :raises ChannelClosedError: if this sender has been closed
        :raises DisconnectedError: if the receiver has been closed
        """
        if self._closed:
            raise ChannelClosedError("cannot send to a closed channel")
        if not self._put(value):
            raise DisconnectedError(value)

    def close(self) -> None:
        """
        Close this sender.

        Closing a sender more than once has no effect.
        """
        if self._closed:
            return
        self._closed = True
        # has no effect if the receiver has been closed
        self._put(_END_OF_CHANNEL)
        log.debug("Channel closed by sender")

    def _put(self, item: object) -> bool:
        # returns False if the receiver has been closed
        state = self._state
        while True:
            if state.disconnected:
                return False
            try:
                state.values.put(item, timeout=_POLL_INTERVAL)
                return True
            except queue.Full:
                continue

    def __enter__(self) -> Sender[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


@final
class Receiver(Generic[T]):
    """
    The receiving side of a channel.

    Iterating over a receiver yields the received values until the sender has been
    closed and all values have been received.
    """

    def __init__(self, state: _ChannelState) -> None:
        """
        :param state: the state shared with the sender; receivers are created by
            function :func:`.channel`
        """
        self._state = state

    def recv(self, timeout: float | None = None) -> T:
        """
        Receive the next value, blocking until one is available.

        :param timeout: the maximum number of seconds to wait for a value; wait
            indefinitely if ``None``
        :return: the next value
        :raises ChannelClosedError: if the sender has been closed and all values have
            been received, or if this receiver has been closed
        :raises TimeoutError: if no value arrived within the timeout
        """
        state = self._state
        if state.disconnected:
            raise ChannelClosedError("cannot receive from a closed receiver")
        try:
            item = state.values.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError(f"no value received within {timeout} seconds") from None
        if item is _END_OF_CHANNEL:
            # put the marker back for any other thread waiting on this receiver
            state.values.put(item)
            if state.disconnected:
                raise ChannelClosedError("the receiver has been closed")
            raise ChannelClosedError("the channel has been closed by the sender")
        # noinspection PyTypeChecker
        return item  # type: ignore[return-value]

    def close(self) -> None:
        """
        Close this receiver; subsequent sends fail with a :class:`.DisconnectedError`.

        Values still in transit are discarded, and threads blocked in :meth:`.recv`
        raise a :class:`.ChannelClosedError`. Closing a receiver more than once has
        no effect.
        """
        state = self._state
        with state.lock:
            if state.disconnected:
                return
            state.disconnected = True
        values = state.values
        # unblock a sender waiting on a full queue, then wake up blocked receivers
        while True:
            _discard_all(values)
            try:
                values.put_nowait(_END_OF_CHANNEL)
                break
            except queue.Full:
                continue
        log.debug("Channel closed by receiver")

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.recv()
            except ChannelClosedError:
                return


#
# Functions
#


def channel(maxsize: int = 0) -> tuple[Sender[T], Receiver[T]]:
    """
    Create a channel for passing values from a producer thread to a consumer thread.

    :param maxsize: the maximum number of values in transit; ``send`` blocks while
        the channel is full. If ``0``, the channel is unbounded.
    :return: the sending and the receiving side of the new channel
    :raises ValueError: if the maximum size is negative
    """
    if maxsize < 0:
        raise ValueError(f"arg maxsize must not be negative, but got {maxsize}")
    state = _ChannelState(maxsize)
    return Sender(state), Receiver(state)


#
# Auxiliary functions
#


def _discard_all(values: queue.Queue[object]) -> None:
    while True:
        try:
            values.get_nowait()
        except queue.Empty:
            return
