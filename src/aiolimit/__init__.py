# Copyright 2025 Google LLC
# SPDX-License-Identifier: Apache-2.0

"""Bounded-concurrency async task queue."""

from .error import AsyncQueueError, QueueTerminatedError
from .queue import AsyncQueue, Operation, async_limit
from .types import CheckpointName, CheckpointState, QueueOptions, QueueStats

__all__ = [
    'AsyncQueue',
    'AsyncQueueError',
    'CheckpointName',
    'CheckpointState',
    'Operation',
    'QueueOptions',
    'QueueStats',
    'QueueTerminatedError',
    'async_limit',
]
