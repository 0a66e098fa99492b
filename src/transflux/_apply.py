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
Application of stages to in-memory and iterable inputs.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import TypeVar

from pytools.asyncio import iter_sync_to_async

from .core import Produced, Stage

log = logging.getLogger(__name__)

__all__ = [
    "atransduce",
    "iter_transduce",
    "transduce",
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


#
# Functions
#


def transduce(
    stage: Stage[T_Input_arg, T_Output_ret], input: Iterable[T_Input_arg]
) -> list[T_Output_ret]:
    """
    Apply a stage to all elements of an iterable, and collect the outputs in a list.

    :param stage: the stage or pipeline to apply; it must not be in use elsewhere
    :param input: the input elements
    :return: the outputs of the stage, in the order they were produced
    :raises ValueError: if the stage is already in use
    """
    return list(iter_transduce(stage, input))


def iter_transduce(
    stage: Stage[T_Input_arg, T_Output_ret], input: Iterable[T_Input_arg]
) -> Iterator[T_Output_ret]:
    """
    Apply a stage lazily to the elements of an iterable.

    Elements are pulled from the input only as outputs are requested. Once the
    stage terminates, no further elements are pulled from the input.

    :param stage: the stage or pipeline to apply; it must not be in use elsewhere
    :param input: the input elements
    :return: an iterator over the outputs of the stage
    :raises ValueError: if the stage is already in use
    """
    stage._claim(iter_transduce)
    return _iter_outputs(stage, input)


def atransduce(
    stage: Stage[T_Input_arg, T_Output_ret],
    input: Iterable[T_Input_arg] | AsyncIterable[T_Input_arg],
) -> AsyncIterator[T_Output_ret]:
    """
    Apply a stage lazily to the elements of a synchronous or asynchronous iterable,
    generating the outputs asynchronously.

    The stage itself runs synchronously within the event loop; only the retrieval of
    input elements is asynchronous.

    :param stage: the stage or pipeline to apply; it must not be in use elsewhere
    :param input: the input elements
    :return: an asynchronous iterator over the outputs of the stage
    :raises ValueError: if the stage is already in use
    """
    stage._claim(atransduce)
    if not isinstance(input, AsyncIterable):
        input = iter_sync_to_async(input)
    return _aiter_outputs(stage, input)


#
# Auxiliary functions
#


def _iter_outputs(
    stage: Stage[T_Input_arg, T_Output_ret], input: Iterable[T_Input_arg]
) -> Iterator[T_Output_ret]:
    for element in input:
        signal = stage.step(element)
        if isinstance(signal, Produced):
            yield signal.value
        elif signal.is_terminate:
            return

    log.debug(f"Input exhausted, flushing stage {stage.name}")
    while True:
        signal = stage.flush()
        if isinstance(signal, Produced):
            yield signal.value
        elif signal.is_terminate:
            return


async def _aiter_outputs(
    stage: Stage[T_Input_arg, T_Output_ret], input: AsyncIterable[T_Input_arg]
) -> AsyncIterator[T_Output_ret]:
    async for element in input:
        signal = stage.step(element)
        if isinstance(signal, Produced):
            yield signal.value
        elif signal.is_terminate:
            return

    log.debug(f"Input exhausted, flushing stage {stage.name}")
    while True:
        signal = stage.flush()
        if isinstance(signal, Produced):
            yield signal.value
        elif signal.is_terminate:
            return
