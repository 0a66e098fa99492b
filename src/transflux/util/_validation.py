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
Validation of stage construction parameters.

Invalid parameters are rejected when a stage is constructed, never when it is
stepped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

log = logging.getLogger(__name__)

__all__ = [
    "validate_callable",
    "validate_count",
]

#
# Type variables
#

T_Callable = TypeVar("T_Callable", bound=Callable[..., Any])


#
# Functions
#


def validate_callable(function: T_Callable, *, arg_name: str) -> T_Callable:
    """
    Validate that the given argument is callable.

    :param function: the argument to validate
    :param arg_name: the name of the argument, for error messages
    :return: the validated argument
    :raises TypeError: if the argument is not callable
    """
    if not callable(function):
        raise TypeError(
            f"arg {arg_name} must be callable, but got a {type(function).__name__}"
        )
    return function


def validate_count(count: int, *, arg_name: str, minimum: int = 0) -> int:
    """
    Validate that the given argument is an integer of at least the given minimum.

    :param count: the argument to validate
    :param arg_name: the name of the argument, for error messages
    :param minimum: the smallest permitted value
    :return: the validated argument
    :raises TypeError: if the argument is not an integer
    :raises ValueError: if the argument is less than the minimum
    """
    # bool is a subclass of int, but never a meaningful count
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError(
            f"arg {arg_name} must be an integer, but got a {type(count).__name__}"
        )
    if count < minimum:
        raise ValueError(f"arg {arg_name} must be at least {minimum}, but got {count}")
    return count
