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
"""Outbound ports of the session store: key-value backend, payload codec, cookie codec."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from redisstore.session.session import Session


@runtime_checkable
class KeyValueBackend(Protocol):
    """Single-key GET / SET-with-TTL / DELETE over a shared key-value store.

    Implementations must be safe for concurrent use by in-flight requests and
    raise :class:`BackendUnavailableException` on transport failures. A miss
    is ``None``, not an error.
    """

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes, ttl: int) -> None: ...

    async def delete(self, key: str) -> None: ...


@runtime_checkable
class SessionSerializer(Protocol):
    """Converts a session's values to and from bytes for storage."""

    def serialize(self, session: Session) -> bytes: ...

    def deserialize(self, data: bytes, session: Session) -> None: ...


@runtime_checkable
class CookieCodec(Protocol):
    """Seals a value into a cookie string bound to a cookie name, and opens it again."""

    def encode(self, name: str, value: str, max_age: int | None = None) -> str: ...

    def decode(self, name: str, value: str) -> str: ...


@runtime_checkable
class SupportsMaxAge(Protocol):
    """A cookie codec that enforces its own expiry window."""

    def set_max_age(self, max_age: int) -> None: ...


class CookieRequest(Protocol):
    """The slice of an HTTP request the store reads."""

    @property
    def cookies(self) -> Mapping[str, str]: ...


class CookieResponse(Protocol):
    """The slice of an HTTP response the store writes (Starlette's signature)."""

    def set_cookie(self, key: str, value: str = "", **kwargs: Any) -> None: ...
