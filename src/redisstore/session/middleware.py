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
"""Starlette integration: one session per cookie name, saved after the handler."""

from __future__ import annotations

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from redisstore.kernel.exceptions import ConfigurationException
from redisstore.session.session import Session
from redisstore.session.store import RedisStore

logger = structlog.get_logger("redisstore.session.middleware")

_STATE_ATTR = "sessions"


class SessionMiddleware(BaseHTTPMiddleware):
    """Loads session *name* into ``request.state.sessions`` and saves it afterwards.

    A session is saved after the handler only if it was modified (``set``,
    ``delete``, ``clear``, ``invalidate`` or ``mark_modified``); handlers that
    call ``await session.save(response)`` themselves are not saved twice.
    Load errors are logged and the handler receives a fresh session; save
    errors propagate.
    """

    def __init__(self, app: ASGIApp, store: RedisStore, name: str = "session") -> None:
        super().__init__(app)
        self._store = store
        self._name = name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session, error = await self._store.get(request, self._name)
        if error is not None:
            logger.info("session_discarded", name=self._name, code=error.code, error_type=type(error).__name__)

        sessions = getattr(request.state, _STATE_ATTR, None)
        if sessions is None:
            sessions = {}
            setattr(request.state, _STATE_ATTR, sessions)
        sessions[self._name] = session

        response = await call_next(request)

        if session.modified:
            await session.save(response)
        return response


def get_session(request: Request, name: str = "session") -> Session:
    """Return the session loaded by :class:`SessionMiddleware` for *name*."""
    sessions = getattr(request.state, _STATE_ATTR, None) or {}
    try:
        return sessions[name]
    except KeyError:
        raise ConfigurationException(
            f"No session '{name}' on this request; is SessionMiddleware installed for it?",
            code="SESSION_MIDDLEWARE_MISSING",
        ) from None
