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

"""Result bookkeeping for queue checkpoints."""

from __future__ import annotations

import asyncio
from typing import Any, Generic, TypeVar

from aiolimit.types import CheckpointName, CheckpointState

T = TypeVar('T')


class Checkpoint(Generic[T]):
    """A snapshot over the tasks enrolled when the checkpoint was requested.

    A checkpoint covers task indices `[0, captured_length)`. Each settlement
    of a covered task is reported through `record()` or `fail()`; the
    checkpoint future resolves with the results in index order once every
    covered task succeeded, or rejects with the first failure. The future is
    settled at most once; later reports only move the counters.
    """

    def __init__(self, name: CheckpointName) -> None:
        self.name = name
        self.captured_length = 0
        self.resolved = 0
        self.rejected = 0
        self._results: list[Any] = []
        self._future: asyncio.Future[list[T]] | None = None

    @property
    def future(self) -> asyncio.Future[list[T]] | None:
        return self._future

    @property
    def requested(self) -> bool:
        return self._future is not None

    @property
    def state(self) -> CheckpointState:
        if self._future is None:
            return CheckpointState.NOT_REQUESTED
        if self.rejected > 0:
            return CheckpointState.REJECTED
        if self.resolved == self.captured_length:
            return CheckpointState.RESOLVED
        return CheckpointState.PENDING

    @property
    def settled(self) -> bool:
        return self.state in (CheckpointState.RESOLVED, CheckpointState.REJECTED)

    def covers(self, index: int) -> bool:
        """Returns True if the task at `index` belongs to this checkpoint."""
        return self._future is not None and index < self.captured_length

    def request(self, length: int, loop: asyncio.AbstractEventLoop) -> asyncio.Future[list[T]]:
        """Snapshots `length` and creates the checkpoint future.

        Repeated calls return the existing future without re-snapshotting.

        Args:
            length: Number of tasks enrolled at request time.
            loop: Loop the future is bound to.

        Returns:
            The checkpoint future.
        """
        if self._future is not None:
            return self._future

        self.captured_length = length
        self._results = [None] * length
        self._future = loop.create_future()
        if length == 0:
            self._future.set_result([])
        return self._future

    def record(self, index: int, result: T) -> None:
        """Stores the result of a covered task."""
        self._results[index] = result
        self.resolved += 1
        if self.rejected == 0 and self.resolved == self.captured_length:
            self._settle(result=list(self._results))

    def fail(self, error: BaseException) -> None:
        """Registers the failure of a covered task.

        Only the first failure rejects the future.
        """
        self.rejected += 1
        if self.rejected == 1:
            self._settle(error=error)

    def _settle(self, *, result: list[T] | None = None, error: BaseException | None = None) -> None:
        # A caller may have cancelled the shared future; leave it as is.
        if self._future is None or self._future.done():
            return
        if error is not None:
            self._future.set_exception(error)
        else:
            self._future.set_result(result if result is not None else [])
