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


"""Tests for environment-driven queue defaults."""

import pytest

from aiolimit.environment import EnvVar, get_default_limit, get_halt_on_failure
from aiolimit.types import QueueOptions


def test_defaults_without_environment():
    """Unset variables fall back to built-in defaults."""
    assert get_default_limit() == 0
    assert get_halt_on_failure() is True


@pytest.mark.parametrize(
    'raw, expected',
    [
        ('3', 3),
        (' 8 ', 8),
        ('', 0),
        ('many', 0),
        ('-2', 0),
    ],
)
def test_default_limit(monkeypatch, raw, expected):
    """AIOLIMIT_LIMIT is parsed leniently."""
    monkeypatch.setenv(EnvVar.AIOLIMIT_LIMIT, raw)
    assert get_default_limit() == expected


@pytest.mark.parametrize(
    'raw, expected',
    [
        ('0', False),
        ('off', False),
        ('No', False),
        ('1', True),
        ('TRUE', True),
        ('maybe', True),
    ],
)
def test_halt_on_failure(monkeypatch, raw, expected):
    """AIOLIMIT_HALT_ON_FAILURE accepts common boolean spellings."""
    monkeypatch.setenv(EnvVar.AIOLIMIT_HALT_ON_FAILURE, raw)
    assert get_halt_on_failure() is expected


def test_options_read_environment(monkeypatch):
    """QueueOptions defaults come from the environment."""
    monkeypatch.setenv(EnvVar.AIOLIMIT_LIMIT, '5')
    monkeypatch.setenv(EnvVar.AIOLIMIT_HALT_ON_FAILURE, 'false')
    options = QueueOptions()
    assert options.limit == 5
    assert options.halt_on_failure is False


def test_explicit_options_override_environment(monkeypatch):
    """Explicit values win over the environment."""
    monkeypatch.setenv(EnvVar.AIOLIMIT_LIMIT, '5')
    assert QueueOptions(limit=1).limit == 1


def test_options_forbid_unknown_fields():
    """Unknown option names are rejected."""
    with pytest.raises(ValueError):
        QueueOptions(infinity=True)
