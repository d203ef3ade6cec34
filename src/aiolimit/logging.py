# Copyright 2025 Google LLC
# SPDX-License-Identifier: Apache-2.0

"""Typed logging for aiolimit.

The queue reports its lifecycle as structlog events with key/value context:

- `task added`, `task admitted`, `task resolved`, `task failed` (debug),
  each carrying the task `index`;
- `checkpoint requested` (debug), carrying `checkpoint` and
  `captured_length`;
- `admission halted after task failure` (warning), carrying `index` and the
  number of `pending` tasks left behind.

The package never configures structlog itself; rendering and filtering are
left to the application.
"""

from typing import Protocol

import structlog


class Logger(Protocol):
    """The structlog methods the queue relies on."""

    def debug(self, event: str | None = None, **kw: object) -> None:
        """Log a debug message."""
        ...

    def warning(self, event: str | None = None, **kw: object) -> None:
        """Log a warning message."""
        ...


def get_logger(name: str | None = None) -> Logger:
    """Get a typed logger instance.

    Args:
        name: Optional logger name (typically __name__).

    Returns:
        A typed logger instance.
    """
    return structlog.get_logger(name)
