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
Functions for composing stages into pipelines.
"""

from __future__ import annotations

import functools
import logging
import operator
from typing import Any, TypeVar

from pytools.api import as_tuple

from .core import ChainedStage, Stage

log = logging.getLogger(__name__)

__all__ = [
    "chain",
    "compose",
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
# Functions
#


def compose(
    upstream: Stage[T_Input_arg, T_Intermediate],
    downstream: Stage[T_Intermediate, T_Output_ret],
) -> Stage[T_Input_arg, T_Output_ret]:
    """
    Compose two stages into a pipeline that behaves as a single stage.

    Each input element is processed by the upstream stage first, and every output
    of the upstream stage is passed on to the downstream stage.

    Composition is associative: ``compose(compose(a, b), c)`` behaves identically
    to ``compose(a, compose(b, c))``. ``compose(a, b)`` is equivalent to ``a >> b``.

    Both stages become owned by the new pipeline and must not be used elsewhere.

    :param upstream: the stage processing input elements first
    :param downstream: the stage processing the outputs of the upstream stage
    :return: the composed pipeline
    :raises TypeError: if either argument is not a stage
    :raises ValueError: if either stage is already in use
    """
    return ChainedStage(upstream, downstream)


def chain(*stages: Stage[Any, Any]) -> Stage[Any, Any]:
    """
    Compose one or more stages sequentially, from left to right.

    For example, ``chain(a, b, c)`` is equivalent to ``a >> b >> c``.

    A single stage is returned unchanged.

    :param stages: the stages to compose, in the order in which they process
        elements
    :return: the composed pipeline
    :raises TypeError: if any of the arguments is not a stage
    :raises ValueError: if no stages are given
    """
    if not stages:
        raise ValueError("chain requires at least one stage")
    return functools.reduce(
        operator.rshift, as_tuple(stages, element_type=Stage, arg_name="stages")
    )
