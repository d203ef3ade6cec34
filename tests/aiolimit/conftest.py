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

"""Shared fixtures for aiolimit tests."""

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from typing import Any

import pytest
import structlog

from aiolimit.environment import EnvVar


class Tracker:
    """Counts operations in flight and remembers the peak."""

    def __init__(self) -> None:
        self.active = 0
        self.peak = 0
        self.calls = 0
        self.completed: list[Any] = []

    def operation(
        self,
        result: Any,
        delay: float = 0.0,
        error: BaseException | None = None,
    ) -> Callable[[], Awaitable[Any]]:
        """Builds an operation that sleeps for `delay` then returns or raises."""

        async def run() -> Any:
            self.calls += 1
            self.active += 1
            self.peak = max(self.peak, self.active)
            try:
                await asyncio.sleep(delay)
                if error is not None:
                    raise error
                self.completed.append(result)
                return result
            finally:
                self.active -= 1

        return run


@pytest.fixture
def tracker() -> Tracker:
    return Tracker()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in EnvVar:
        monkeypatch.delenv(var.value, raising=False)


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
