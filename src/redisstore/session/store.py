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
"""RedisStore — server-side sessions referenced by an authenticated cookie.

Request side: :meth:`RedisStore.get` opens the cookie, loads the record from
the backend and deserializes it. Response side: :meth:`RedisStore.save`
serializes and writes the record with a TTL (or deletes it), seals the id and
sets the cookie. The cookie is only set after the backend write succeeds.
"""

from __future__ import annotations

import base64
import secrets
import threading
from collections.abc import Sequence

import structlog

from redisstore.kernel.exceptions import (
    BackendUnavailableException,
    ConfigurationException,
    CookieAuthenticationException,
    PayloadTooLargeException,
    RedisStoreException,
    SerializationException,
    SessionNotFoundException,
)
from redisstore.session.options import Options, cookie_params
from redisstore.session.ports.outbound import (
    CookieCodec,
    CookieRequest,
    CookieResponse,
    KeyValueBackend,
    SessionSerializer,
    SupportsMaxAge,
)
from redisstore.session.securecookie import codecs_from_pairs, decode_multi, encode_multi
from redisstore.session.serializers import PickleSerializer
from redisstore.session.session import Session

logger = structlog.get_logger("redisstore.session.store")

SESSION_EXPIRE = 86400 * 30
DEFAULT_MAX_AGE = 60 * 20
DEFAULT_MAX_LENGTH = 4096
_ID_BYTES = 32


def generate_session_id() -> str:
    """Return a random base32 id (52 chars, ``A-Z2-7``) safe for keys and cookies."""
    return base64.b32encode(secrets.token_bytes(_ID_BYTES)).decode("ascii").rstrip("=")


def _short(session_id: str) -> str:
    return session_id[:8]


class RedisStore:
    """Session store over a key-value backend with authenticated cookies.

    Args:
        backend: GET / SET-with-TTL / DELETE capability, e.g. :class:`RedisBackend`.
        *key_pairs: Flat credential pairs, newest first: ``hash1, block1, hash2, ...``.
        codecs: Prebuilt cookie codecs, used instead of *key_pairs*.
        options: Default cookie options; each session gets its own copy.
        serializer: Payload codec, :class:`PickleSerializer` by default.
        max_length: Largest encoded payload accepted by :meth:`save`; 0 disables the check.
        default_max_age: Backend TTL for sessions whose ``max_age`` is 0.
        key_prefix: Prepended to every session id to form the backend key.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        *key_pairs: bytes | None,
        codecs: Sequence[CookieCodec] | None = None,
        options: Options | None = None,
        serializer: SessionSerializer | None = None,
        max_length: int = DEFAULT_MAX_LENGTH,
        default_max_age: int = DEFAULT_MAX_AGE,
        key_prefix: str = "",
    ) -> None:
        if codecs is None:
            codecs = codecs_from_pairs(*key_pairs)
        if not codecs:
            raise ConfigurationException("RedisStore needs at least one credential pair", code="NO_CODECS")
        self._backend = backend
        self._codecs: tuple[CookieCodec, ...] = tuple(codecs)
        self._options = options.copy() if options is not None else Options(path="/", max_age=SESSION_EXPIRE)
        self._serializer: SessionSerializer = serializer if serializer is not None else PickleSerializer()
        self._max_length = max_length
        self._default_max_age = default_max_age
        self._key_prefix = key_prefix
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    @property
    def codecs(self) -> tuple[CookieCodec, ...]:
        return self._codecs

    @property
    def options(self) -> Options:
        """A copy of the default options."""
        with self._lock:
            return self._options.copy()

    @property
    def serializer(self) -> SessionSerializer:
        return self._serializer

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def default_max_age(self) -> int:
        return self._default_max_age

    @property
    def key_prefix(self) -> str:
        return self._key_prefix

    def set_options(self, options: Options) -> None:
        """Replace the default options for sessions created from now on."""
        with self._lock:
            self._options = options.copy()

    def set_max_age(self, max_age: int) -> None:
        """Set the default cookie max age and every codec's expiry window.

        Codecs without their own window are skipped with a warning.
        """
        with self._lock:
            self._options.max_age = max_age
            for codec in self._codecs:
                if isinstance(codec, SupportsMaxAge):
                    codec.set_max_age(max_age)
                else:
                    logger.warning("codec_max_age_unsupported", codec=type(codec).__name__)

    def set_serializer(self, serializer: SessionSerializer) -> None:
        with self._lock:
            self._serializer = serializer

    def set_max_length(self, max_length: int) -> None:
        """Set the payload size limit in bytes; 0 means unlimited."""
        with self._lock:
            self._max_length = max_length

    def set_default_max_age(self, default_max_age: int) -> None:
        with self._lock:
            self._default_max_age = default_max_age

    def set_key_prefix(self, key_prefix: str) -> None:
        with self._lock:
            self._key_prefix = key_prefix

    def key_for(self, session: Session) -> str:
        return self._key_prefix + session.id

    # ------------------------------------------------------------------
    # Request side
    # ------------------------------------------------------------------

    async def get(self, request: CookieRequest, name: str) -> tuple[Session, RedisStoreException | None]:
        """Return the session for *name*; a new one if the request carries none."""
        return await self.new(request, name)

    async def new(self, request: CookieRequest, name: str) -> tuple[Session, RedisStoreException | None]:
        """Build the session for *name* from the request cookie.

        Never raises for a bad cookie or a failed load: the error is returned
        next to a usable session with ``is_new`` set, so the caller can carry
        on with a fresh session. The error is ``None`` when there was no
        cookie or the session loaded cleanly.
        """
        session = Session(self, name, self.options, is_new=True)
        cookie = request.cookies.get(name)
        if not cookie:
            return session, None

        try:
            session_id = decode_multi(name, cookie, self._codecs)
        except CookieAuthenticationException as exc:
            logger.info("cookie_rejected", name=name, code=exc.code)
            return session, exc
        session.assign_id(session_id)

        try:
            await self.load(session)
        except SessionNotFoundException as exc:
            logger.debug("session_not_found", name=name, id=_short(session_id))
            return session, exc
        except (SerializationException, BackendUnavailableException) as exc:
            logger.warning("session_load_failed", name=name, id=_short(session_id), code=exc.code)
            return session, exc

        session.is_new = False
        logger.debug("session_loaded", name=name, id=_short(session_id))
        return session, None

    async def load(self, session: Session) -> None:
        """Read the session's record from the backend into ``session.values``.

        Raises:
            SessionNotFoundException: The key is absent or has expired.
            SerializationException: The stored bytes cannot be decoded.
            BackendUnavailableException: The backend GET failed.
        """
        data = await self._backend.get(self.key_for(session))
        if data is None:
            raise SessionNotFoundException(
                f"No stored data for session '{session.name}'",
                code="SESSION_NOT_FOUND",
                context={"name": session.name},
            )
        self._serializer.deserialize(data, session)

    # ------------------------------------------------------------------
    # Response side
    # ------------------------------------------------------------------

    async def save(self, session: Session, response: CookieResponse) -> None:
        """Persist *session* and set its cookie on *response*.

        A negative ``options.max_age`` deletes the record and expires the
        cookie. Otherwise the record is written with a TTL and a freshly
        sealed cookie is set. Nothing is set on the response if the backend
        call fails.
        """
        if session.options.max_age < 0:
            await self.delete(session)
            response.set_cookie(**cookie_params(session.name, "", session.options))
            logger.debug("session_deleted", name=session.name, id=_short(session.id))
            return

        if not session.id:
            session.assign_id(generate_session_id())
        ttl = await self._save(session)
        encoded = encode_multi(session.name, session.id, self._codecs, max_age=ttl)
        response.set_cookie(**cookie_params(session.name, encoded, session.options))
        logger.debug("session_saved", name=session.name, id=_short(session.id), ttl=ttl)

    async def delete(self, session: Session) -> None:
        """Remove the session's record. Sessions that were never saved have none."""
        if not session.id:
            return
        await self._backend.delete(self.key_for(session))

    async def _save(self, session: Session) -> int:
        with self._lock:
            serializer = self._serializer
            max_length = self._max_length
            default_max_age = self._default_max_age

        data = serializer.serialize(session)
        if max_length and len(data) > max_length:
            raise PayloadTooLargeException(
                "SessionStore: the value to store is too big",
                code="PAYLOAD_TOO_LARGE",
                context={"name": session.name, "size": len(data), "max_length": max_length},
            )

        ttl = session.options.max_age or default_max_age
        await self._backend.set(self.key_for(session), data, ttl)
        return ttl
