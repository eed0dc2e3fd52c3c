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
"""Session — the per-request view of one stored session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from redisstore.kernel.exceptions import RedisStoreException
from redisstore.session.options import Options

if TYPE_CHECKING:
    from redisstore.session.ports.outbound import CookieResponse
    from redisstore.session.store import RedisStore


class Session:
    """Holds a session's id, values and cookie options for a single request.

    Attributes:
        name: The cookie name, and the logical session channel.
        options: Cookie options for this session only (a copy of the store defaults).
        is_new: ``True`` unless the session was loaded from the backend on this request.
    """

    def __init__(
        self,
        store: RedisStore,
        name: str,
        options: Options | None = None,
        *,
        is_new: bool = True,
    ) -> None:
        self._store = store
        self._name = name
        self._id = ""
        self._values: dict[Any, Any] = {}
        self.options = options if options is not None else Options()
        self.is_new = is_new
        self._modified = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def id(self) -> str:
        """Storage key suffix; empty until the session is first saved."""
        return self._id

    @property
    def store(self) -> RedisStore:
        return self._store

    @property
    def values(self) -> dict[Any, Any]:
        """The raw values dict. Mutating it directly does not mark the session modified."""
        return self._values

    @property
    def modified(self) -> bool:
        return self._modified

    def assign_id(self, session_id: str) -> None:
        """Set the session id. An id can be assigned only once."""
        if self._id:
            raise RedisStoreException(
                f"Session '{self._name}' already has an id",
                code="SESSION_ID_IMMUTABLE",
            )
        self._id = session_id

    def get(self, key: Any, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: Any, value: Any) -> None:
        self._values[key] = value
        self._modified = True

    def delete(self, key: Any) -> None:
        """Remove a value if it exists."""
        if key in self._values:
            del self._values[key]
            self._modified = True

    def clear(self) -> None:
        self._values.clear()
        self._modified = True

    def mark_modified(self) -> None:
        """Flag the session for saving after an in-place change to a value."""
        self._modified = True

    def invalidate(self) -> None:
        """Mark the session for deletion on the next save."""
        self.options.max_age = -1
        self._modified = True

    async def save(self, response: CookieResponse) -> None:
        """Persist through the owning store and set the cookie on *response*."""
        await self._store.save(self, response)
        self._modified = False

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return f"Session(name={self._name!r}, id={self._id[:8]!r}, is_new={self.is_new})"
