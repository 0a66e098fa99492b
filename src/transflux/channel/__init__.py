"""
Channels for passing values between a producer thread and a consumer thread, and
the application of stages to the sending side of a channel.

Function :func:`.channel` creates a plain channel; function
:func:`.transducing_channel` creates a channel whose sending side passes every
element through a stage or pipeline before it reaches the receiver.
"""

from ._channel import *
from ._errors import *
from ._transducing import *
