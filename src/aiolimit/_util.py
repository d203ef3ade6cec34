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

"""Helpers for adapting queue operations."""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any


def ensure_async(fn: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
    """Ensure the function is async.

    Coroutine functions are returned unchanged. Anything else is wrapped so
    that calling it yields a coroutine; if the wrapped function itself
    returns an awaitable (e.g. a lambda returning a coroutine), the wrapper
    awaits it.

    Args:
        fn: The function to ensure is async.

    Returns:
        The async function.
    """
    if inspect.iscoroutinefunction(fn):
        return fn

    async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
        result = fn(*args, **kwargs)
        if inspect.isawaitable(result):
            return await result
        return result

    return async_wrapper
