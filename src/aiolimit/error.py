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

"""Base error classes for aiolimit.

Failures raised by queued operations are never wrapped: they reach the
task's own future and the covering checkpoint futures unchanged. The
classes here describe misuse of the queue itself.
"""

from typing import Any, Literal

StatusName = Literal['FAILED_PRECONDITION', 'INTERNAL']


class AsyncQueueError(Exception):
    """Base error class for aiolimit errors."""

    def __init__(
        self,
        *,
        message: str,
        status: StatusName | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize an AsyncQueueError.

        Args:
            message: The error message.
            status: The status name for this error. Defaults to INTERNAL.
            details: Optional structured detail information.
        """
        self.status: StatusName = status or 'INTERNAL'
        super().__init__(f'{self.status}: {message}')
        self.original_message = message
        self.details = details or {}


class QueueTerminatedError(AsyncQueueError):
    """Raised when a task is added to a queue that has been stopped."""

    def __init__(self, length: int) -> None:
        """Initialize a QueueTerminatedError.

        Args:
            length: Number of tasks enrolled when the queue was sealed.
        """
        super().__init__(
            status='FAILED_PRECONDITION',
            message='queue has been stopped; no new tasks can be added',
            details={'length': length},
        )
        self.length = length
