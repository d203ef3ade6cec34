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

"""Bounded-concurrency queue of asynchronous operations."""

from __future__ import annotations

import asyncio
import functools
from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from aiolimit._checkpoint import Checkpoint
from aiolimit._util import ensure_async
from aiolimit.error import QueueTerminatedError
from aiolimit.logging import get_logger
from aiolimit.types import CheckpointName, QueueOptions, QueueStats

logger = get_logger(__name__)

T = TypeVar('T')

Operation = Callable[[], Awaitable[T]]


@dataclass(slots=True)
class _Task(Generic[T]):
    index: int
    operation: Operation[T]
    future: asyncio.Future[T] | None = None


@dataclass(slots=True, frozen=True)
class _Outcome:
    result: Any = None
    error: BaseException | None = None


class AsyncQueue(Generic[T]):
    """An asynchronous task queue with a shared concurrency limit.

    Operations are zero-argument callables returning awaitables. They are
    admitted in enrollment order, never more than `limit` at a time (0 means
    no limit), once the queue has been started.

    Two checkpoints observe the same tasks:

    - `start()` covers every task enrolled when it is first called.
    - `stop()` covers every task enrolled when it is first called and seals
      the queue so that `add()` raises `QueueTerminatedError`.

    Each checkpoint returns a future that resolves with the results of its
    tasks in enrollment order, or rejects with the first failure among them.

    Typical usage:
        ```python
        queue = AsyncQueue([fetch_a, fetch_b], limit=2)
        first = queue.start()
        extra = queue.add(fetch_c)

        assert await first == [a, b]
        assert await extra == c
        assert await queue.stop() == [a, b, c]
        ```

    All methods must be called from the event loop thread; `start()`,
    `stop()` and `add()` require a running loop.
    """

    def __init__(
        self,
        operations: Iterable[Operation[T]] = (),
        *,
        limit: int | None = None,
        halt_on_failure: bool | None = None,
    ) -> None:
        """Initializes a new AsyncQueue.

        Args:
            operations: Operations enrolled up front, without their own
                futures; their results are only observable via checkpoints.
            limit: Maximum number of operations in flight. Defaults to the
                environment-configured limit, or 0 (unlimited).
            halt_on_failure: Whether a failed task stops pulling the next
                pending task into its slot. Defaults to True.

        Raises:
            pydantic.ValidationError: If the limit is negative.
        """
        overrides = {'limit': limit, 'halt_on_failure': halt_on_failure}
        self._options = QueueOptions(**{k: v for k, v in overrides.items() if v is not None})

        self._pending: deque[_Task[T]] = deque()
        self._length = 0
        self._running = 0
        self._inflight: set[asyncio.Task[Any]] = set()
        self._settled: dict[int, _Outcome] = {}
        self._start: Checkpoint[T] = Checkpoint(CheckpointName.START)
        self._stop: Checkpoint[T] = Checkpoint(CheckpointName.STOP)

        for operation in operations:
            self._enqueue(operation)

    @property
    def options(self) -> QueueOptions:
        return self._options

    @property
    def length(self) -> int:
        """Total number of tasks ever enrolled."""
        return self._length

    @property
    def limit(self) -> int:
        return self._options.limit

    @property
    def running(self) -> int:
        """Number of operations currently in flight."""
        return self._running

    @property
    def pending(self) -> int:
        """Number of enrolled tasks not yet admitted."""
        return len(self._pending)

    @property
    def started(self) -> bool:
        return self._start.requested or self._stop.requested

    @property
    def stopped(self) -> bool:
        return self._stop.requested

    @property
    def start_settled(self) -> bool:
        return self._start.settled

    @property
    def stop_settled(self) -> bool:
        return self._stop.settled

    def stats(self) -> QueueStats:
        """Returns a snapshot of the queue counters and checkpoint states."""
        return QueueStats(
            length=self._length,
            pending=len(self._pending),
            running=self._running,
            limit=self.limit,
            start=self._start.state,
            stop=self._stop.state,
        )

    def add(self, operation: Operation[T]) -> asyncio.Future[T]:
        """Enrolls an operation and returns a future for its own outcome.

        If the queue has started and nothing is in flight, the operation is
        admitted right away; otherwise it is picked up when a running task
        succeeds.

        Args:
            operation: A zero-argument callable returning an awaitable.

        Returns:
            A future resolved or rejected with the operation's outcome.

        Raises:
            QueueTerminatedError: If `stop()` has been called.
            RuntimeError: If there is no running event loop.
        """
        if self._stop.requested:
            raise QueueTerminatedError(self._length)

        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        task = self._enqueue(operation, future)
        logger.debug('task added', index=task.index, started=self.started)

        if self.started and self._running == 0:
            self._step()
        return future

    def start(self) -> asyncio.Future[list[T]]:
        """Starts admitting tasks.

        The first call snapshots the number of enrolled tasks; later calls
        return the same future.

        Returns:
            A future resolved with the results of the snapshotted tasks in
            enrollment order, or rejected with the first failure among them.
        """
        return self._request(self._start)

    def stop(self) -> asyncio.Future[list[T]]:
        """Seals the queue and returns a future over every enrolled task.

        The first call snapshots the number of enrolled tasks and admits
        tasks like `start()`; later calls return the same future.

        Returns:
            A future resolved with the results of all enrolled tasks in
            enrollment order, or rejected with the first failure among them.
        """
        return self._request(self._stop)

    def _enqueue(self, operation: Operation[T], future: asyncio.Future[T] | None = None) -> _Task[T]:
        task = _Task(index=self._length, operation=operation, future=future)
        self._length += 1
        self._pending.append(task)
        return task

    def _request(self, checkpoint: Checkpoint[T]) -> asyncio.Future[list[T]]:
        loop = asyncio.get_running_loop()
        if checkpoint.requested:
            return checkpoint.request(self._length, loop)

        future = checkpoint.request(self._length, loop)
        logger.debug(
            'checkpoint requested',
            checkpoint=checkpoint.name.value,
            captured_length=checkpoint.captured_length,
        )

        # Replay tasks that settled before this checkpoint existed.
        for index, outcome in self._settled.items():
            if checkpoint.covers(index):
                self._notify(checkpoint, index, outcome)
        if self._start.requested and self._stop.requested:
            self._settled.clear()

        self._step()
        return future

    def _step(self) -> None:
        """Admits pending tasks while the concurrency limit allows."""
        limit = self.limit
        while self._pending and (limit == 0 or self._running < limit):
            task = self._pending.popleft()
            self._running += 1
            logger.debug('task admitted', index=task.index, running=self._running)

            runner = asyncio.ensure_future(ensure_async(task.operation)())
            self._inflight.add(runner)
            runner.add_done_callback(functools.partial(self._on_done, task))

    def _on_done(self, task: _Task[T], runner: asyncio.Future[Any]) -> None:
        self._inflight.discard(runner)
        self._running -= 1

        if runner.cancelled():
            outcome = _Outcome(error=asyncio.CancelledError())
        elif runner.exception() is not None:
            outcome = _Outcome(error=runner.exception())
        else:
            outcome = _Outcome(result=runner.result())

        if task.future is not None and not task.future.done():
            if outcome.error is not None:
                task.future.set_exception(outcome.error)
            else:
                task.future.set_result(outcome.result)

        for checkpoint in (self._start, self._stop):
            if checkpoint.covers(task.index):
                self._notify(checkpoint, task.index, outcome)
        if not (self._start.requested and self._stop.requested):
            self._settled[task.index] = outcome

        if outcome.error is None:
            logger.debug('task resolved', index=task.index, running=self._running)
            self._step()
            return

        logger.debug('task failed', index=task.index, error=repr(outcome.error))
        if self._options.halt_on_failure:
            if self._pending:
                logger.warning(
                    'admission halted after task failure',
                    index=task.index,
                    pending=len(self._pending),
                )
            return
        self._step()

    @staticmethod
    def _notify(checkpoint: Checkpoint[T], index: int, outcome: _Outcome) -> None:
        if outcome.error is not None:
            checkpoint.fail(outcome.error)
        else:
            checkpoint.record(index, outcome.result)


async def async_limit(operations: Iterable[Operation[T]], limit: int = 0) -> list[T]:
    """Runs operations with at most `limit` in flight at a time.

    Args:
        operations: Zero-argument callables returning awaitables.
        limit: Maximum number of concurrent operations; 0 means no limit.

    Returns:
        The results in the order the operations were given.

    Raises:
        Exception: The first failure raised by any operation.
    """
    queue: AsyncQueue[T] = AsyncQueue(operations, limit=limit)
    return await queue.start()
