"""
Exceptions raised by channels.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ChannelClosedError",
    "ChannelError",
    "DisconnectedError",
]


class ChannelError(Exception):
    """
    Base class for errors raised by channels.
    """


class ChannelClosedError(ChannelError):
    """
    Raised when sending to a channel whose sending side has been closed or has
    terminated, or when receiving from a channel that has been closed and has no
    values left.
    """


class DisconnectedError(ChannelError):
    """
    Raised when sending to a channel whose receiving side has been closed.

    The value that could not be delivered is available as attribute :attr:`value`.
    """

    #: The value that could not be delivered.
    value: Any

    def __init__(self, value: Any) -> None:
        """
        :param value: the value that could not be delivered
        """
        super().__init__("the receiving side of the channel has been closed")
        self.value = value
