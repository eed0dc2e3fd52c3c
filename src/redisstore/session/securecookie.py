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
"""Authenticated, optionally encrypted cookie values with key rotation.

Each :class:`SecureCookie` wraps one credential pair: an HMAC-SHA256 signing
key and an optional AES-GCM encryption key. A sealed value is an HS256 JWT
whose audience is the cookie name, so a cookie issued under one name does
not open under another. With an encryption key the session id travels as
AES-GCM ciphertext (the cookie name is the associated data); without one it
is signed but readable.

Rotation: :func:`encode_multi` seals with the first codec only, while
:func:`decode_multi` tries every codec in order.
"""

from __future__ import annotations

import base64
import binascii
import secrets
import time
from collections.abc import Callable, Sequence

import jwt
import structlog
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from redisstore.kernel.exceptions import ConfigurationException, CookieAuthenticationException
from redisstore.session.ports.outbound import CookieCodec

logger = structlog.get_logger("redisstore.session.securecookie")

_ALGORITHM = "HS256"
_NONCE_SIZE = 12
DEFAULT_MAX_AGE = 86400 * 30


def generate_random_key(length: int = 32) -> bytes:
    """Return *length* bytes from the operating system CSPRNG."""
    return secrets.token_bytes(length)


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _auth_error(message: str, code: str, name: str) -> CookieAuthenticationException:
    return CookieAuthenticationException(message, code=code, context={"name": name})


class SecureCookie:
    """Cookie codec for a single (hash key, block key) pair.

    Args:
        hash_key: HMAC-SHA256 signing key. 32 or 64 bytes recommended.
        block_key: Optional AES key (16, 24 or 32 bytes) enabling encryption.
        max_age: Expiry window enforced on decode, in seconds; 0 disables it.
        clock: Returns the current Unix time; injectable for tests.
    """

    def __init__(
        self,
        hash_key: bytes,
        block_key: bytes | None = None,
        *,
        max_age: int = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not hash_key:
            raise ConfigurationException("hash key is not set", code="HASH_KEY_MISSING")
        if block_key and len(block_key) not in (16, 24, 32):
            raise ConfigurationException(
                f"block key must be 16, 24 or 32 bytes, got {len(block_key)}",
                code="BLOCK_KEY_INVALID",
            )
        self._hash_key = hash_key
        self._aead = AESGCM(block_key) if block_key else None
        self._max_age = max_age
        self._clock = clock

    @property
    def max_age(self) -> int:
        return self._max_age

    @property
    def encrypts(self) -> bool:
        return self._aead is not None

    def set_max_age(self, max_age: int) -> None:
        """Change the expiry window; applies to cookies already issued too."""
        self._max_age = max_age

    def encode(self, name: str, value: str, max_age: int | None = None) -> str:
        """Seal *value* for cookie *name*, expiring after *max_age* seconds.

        When *max_age* is ``None`` or not positive the codec's own window is used.
        """
        now = int(self._clock())
        ttl = max_age if max_age is not None and max_age > 0 else self._max_age
        claims: dict[str, object] = {"aud": name, "iat": now}
        if ttl > 0:
            claims["exp"] = now + ttl
        if self._aead is not None:
            nonce = secrets.token_bytes(_NONCE_SIZE)
            sealed = self._aead.encrypt(nonce, value.encode(), name.encode())
            claims["enc"] = _b64encode(nonce + sealed)
        else:
            claims["sid"] = value
        return jwt.encode(claims, self._hash_key, algorithm=_ALGORITHM)

    def decode(self, name: str, value: str) -> str:
        """Open a cookie sealed for *name* and return the embedded value.

        Raises:
            CookieAuthenticationException: On a bad signature, a name mismatch,
                expiry, or a failed decryption.
        """
        try:
            claims = jwt.decode(
                value,
                self._hash_key,
                algorithms=[_ALGORITHM],
                audience=name,
                # Time claims are checked below against the codec clock.
                options={"require": ["aud", "iat"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidAudienceError as exc:
            raise _auth_error("Cookie was issued for another name", "COOKIE_NAME_MISMATCH", name) from exc
        except jwt.PyJWTError as exc:
            raise _auth_error(f"Invalid cookie: {exc}", "COOKIE_INVALID", name) from exc

        now = self._clock()
        exp = claims.get("exp")
        if exp is not None and now >= exp:
            raise _auth_error("Cookie has expired", "COOKIE_EXPIRED", name)
        if self._max_age > 0 and claims["iat"] + self._max_age < now:
            raise _auth_error("Cookie is older than the codec max age", "COOKIE_EXPIRED", name)

        if self._aead is None:
            session_id = claims.get("sid")
            if not isinstance(session_id, str):
                raise _auth_error("Cookie carries no readable value", "COOKIE_MALFORMED", name)
            return session_id

        sealed = claims.get("enc")
        if not isinstance(sealed, str):
            raise _auth_error("Cookie is not encrypted", "COOKIE_DECRYPT_FAILED", name)
        try:
            raw = _b64decode(sealed)
        except (binascii.Error, ValueError) as exc:
            raise _auth_error("Cookie ciphertext is malformed", "COOKIE_MALFORMED", name) from exc
        if len(raw) <= _NONCE_SIZE:
            raise _auth_error("Cookie ciphertext is truncated", "COOKIE_MALFORMED", name)
        try:
            plain = self._aead.decrypt(raw[:_NONCE_SIZE], raw[_NONCE_SIZE:], name.encode())
        except InvalidTag as exc:
            raise _auth_error("Cookie decryption failed", "COOKIE_DECRYPT_FAILED", name) from exc
        return plain.decode()


def codecs_from_pairs(*keys: bytes | None, max_age: int = DEFAULT_MAX_AGE) -> list[CookieCodec]:
    """Build one :class:`SecureCookie` per (hash key, block key) pair.

    Keys are given flat and newest first: ``hash1, block1, hash2, block2, ...``.
    A trailing hash key without a block key is allowed; an empty or ``None``
    block key means sign-only.
    """
    codecs: list[CookieCodec] = []
    for i in range(0, len(keys), 2):
        hash_key = keys[i]
        block_key = keys[i + 1] if i + 1 < len(keys) else None
        if hash_key is None:
            raise ConfigurationException(f"hash key {i // 2} is not set", code="HASH_KEY_MISSING")
        codecs.append(SecureCookie(hash_key, block_key or None, max_age=max_age))
    return codecs


def encode_multi(name: str, value: str, codecs: Sequence[CookieCodec], max_age: int | None = None) -> str:
    """Seal *value* with the first codec."""
    if not codecs:
        raise ConfigurationException("no cookie codecs configured", code="NO_CODECS")
    return codecs[0].encode(name, value, max_age)


def decode_multi(name: str, value: str, codecs: Sequence[CookieCodec]) -> str:
    """Open *value* with the first codec that accepts it.

    Raises:
        CookieAuthenticationException: The last codec's error when none accepts
            the cookie, with ``context["attempts"]`` set to the number tried.
    """
    if not codecs:
        raise ConfigurationException("no cookie codecs configured", code="NO_CODECS")
    last_error: CookieAuthenticationException | None = None
    for index, codec in enumerate(codecs):
        try:
            result = codec.decode(name, value)
        except CookieAuthenticationException as exc:
            last_error = exc
            continue
        if index > 0:
            logger.debug("cookie_opened_with_rotated_key", name=name, pair=index)
        return result
    assert last_error is not None
    last_error.context["attempts"] = len(codecs)
    raise last_error
