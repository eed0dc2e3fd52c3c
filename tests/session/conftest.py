# Copyright 2026 Firefly Software Solutions Inc.
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
"""Shared doubles for the session store tests."""

from __future__ import annotations

import time
from typing import Any

import pytest

from redisstore.session.adapters.memory import InMemoryBackend
from redisstore.session.store import RedisStore

HASH_KEY = bytes(range(32))
BLOCK_KEY = bytes(range(32, 64))
SESSION_NAME = "mysession"


class FakeClock:
    """Manually advanced clock, starting at the current Unix time."""

    def __init__(self) -> None:
        self.now = time.time()

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRequest:
    def __init__(self, cookies: dict[str, str] | None = None) -> None:
        self.cookies = dict(cookies or {})


class FakeResponse:
    """Records ``set_cookie`` calls the way Starlette's Response receives them."""

    def __init__(self) -> None:
        self.cookies: list[dict[str, Any]] = []

    def set_cookie(self, key: str, value: str = "", **kwargs: Any) -> None:
        self.cookies.append({"key": key, "value": value, **kwargs})

    @property
    def last(self) -> dict[str, Any]:
        return self.cookies[-1]


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(backend: InMemoryBackend) -> RedisStore:
    return RedisStore(backend, HASH_KEY, BLOCK_KEY)
