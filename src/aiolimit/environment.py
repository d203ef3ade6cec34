# Copyright 2025 Google LLC
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
#
# SPDX-License-Identifier: Apache-2.0

"""Queue defaults read from the process environment."""

import os
import sys

if sys.version_info < (3, 11):
    from strenum import StrEnum
else:
    from enum import StrEnum

DEFAULT_LIMIT = 0
DEFAULT_HALT_ON_FAILURE = True

_TRUTHY = frozenset({'1', 'true', 'yes', 'y', 'on'})
_FALSY = frozenset({'0', 'false', 'no', 'n', 'off'})


class EnvVar(StrEnum):
    """Enumerates all the environment variables used by aiolimit."""

    AIOLIMIT_LIMIT = 'AIOLIMIT_LIMIT'
    AIOLIMIT_HALT_ON_FAILURE = 'AIOLIMIT_HALT_ON_FAILURE'


def get_default_limit() -> int:
    """Returns the default concurrency limit.

    Returns:
        The value of AIOLIMIT_LIMIT, or 0 (unlimited) when it is unset,
        not an integer, or negative.
    """
    raw = os.getenv(EnvVar.AIOLIMIT_LIMIT)
    if raw is None or not raw.strip():
        return DEFAULT_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        return DEFAULT_LIMIT
    return limit if limit >= 0 else DEFAULT_LIMIT


def get_halt_on_failure() -> bool:
    """Returns whether admission halts after a task failure by default.

    Returns:
        The parsed value of AIOLIMIT_HALT_ON_FAILURE, or True when it is
        unset or unrecognized.
    """
    raw = os.getenv(EnvVar.AIOLIMIT_HALT_ON_FAILURE)
    if raw is None:
        return DEFAULT_HALT_ON_FAILURE
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return DEFAULT_HALT_ON_FAILURE
