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

"""Option and status models for the async queue."""

import sys

from pydantic import BaseModel, ConfigDict, Field

from aiolimit.environment import get_default_limit, get_halt_on_failure

if sys.version_info < (3, 11):
    from strenum import StrEnum
else:
    from enum import StrEnum


class CheckpointName(StrEnum):
    """The two checkpoints a queue exposes."""

    START = 'start'
    STOP = 'stop'


class CheckpointState(StrEnum):
    """Lifecycle of a single checkpoint.

    A checkpoint moves from NOT_REQUESTED to PENDING when it is requested,
    then to exactly one of RESOLVED or REJECTED.
    """

    NOT_REQUESTED = 'not_requested'
    PENDING = 'pending'
    RESOLVED = 'resolved'
    REJECTED = 'rejected'


class QueueOptions(BaseModel):
    """Configuration for an AsyncQueue.

    Attributes:
        limit: Maximum number of operations in flight. 0 means unlimited.
        halt_on_failure: When True, a failed task does not pull the next
            pending task into the freed slot.
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    limit: int = Field(default_factory=get_default_limit, ge=0)
    halt_on_failure: bool = Field(default_factory=get_halt_on_failure)


class QueueStats(BaseModel):
    """Point-in-time view of a queue, for polling and diagnostics."""

    model_config = ConfigDict(frozen=True)

    length: int
    pending: int
    running: int
    limit: int
    start: CheckpointState
    stop: CheckpointState
