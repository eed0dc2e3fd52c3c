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
"""Redis-backed key-value backend for the session store."""

from __future__ import annotations

from typing import Any

import structlog
from redis.exceptions import RedisError

from redisstore.kernel.exceptions import BackendUnavailableException

logger = structlog.get_logger("redisstore.session.redis")


class RedisBackend:
    """Key-value backend over a ``redis.asyncio`` client (single node or cluster).

    The client's connection pool makes the backend safe for concurrent requests.
    Commands are not retried; failures surface as
    :class:`BackendUnavailableException`.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    async def get(self, key: str) -> bytes | None:
        try:
            raw = await self._client.get(key)
        except (RedisError, OSError) as exc:
            raise self._unavailable("GET", key, exc) from exc
        if raw is None:
            return None
        return raw if isinstance(raw, bytes) else str(raw).encode()

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store *value* under *key*, expiring after *ttl* seconds."""
        try:
            await self._client.set(key, value, ex=ttl)
        except (RedisError, OSError) as exc:
            raise self._unavailable("SET", key, exc) from exc

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except (RedisError, OSError) as exc:
            raise self._unavailable("DEL", key, exc) from exc

    async def aclose(self) -> None:
        """Close the underlying client's connections."""
        await self._client.aclose()

    @staticmethod
    def _unavailable(command: str, key: str, exc: Exception) -> BackendUnavailableException:
        logger.error("backend_error", command=command, error=str(exc), error_type=type(exc).__name__)
        return BackendUnavailableException(
            f"Redis {command} failed: {exc}",
            code="BACKEND_UNAVAILABLE",
            context={"command": command, "key": key},
        )
