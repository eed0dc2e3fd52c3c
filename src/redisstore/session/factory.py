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
"""Build a RedisStore from configuration or a ``redis.asyncio`` client."""

from __future__ import annotations

from typing import Any

import structlog

from redisstore.config.properties.session import SessionProperties
from redisstore.core.config import Config
from redisstore.kernel.exceptions import ConfigurationException
from redisstore.logging import configure_logging
from redisstore.session.adapters.redis import RedisBackend
from redisstore.session.options import Options
from redisstore.session.ports.outbound import KeyValueBackend, SessionSerializer
from redisstore.session.serializers import JsonSerializer, PickleSerializer
from redisstore.session.store import RedisStore

logger = structlog.get_logger("redisstore.session.factory")

_SERIALIZERS: dict[str, type[PickleSerializer] | type[JsonSerializer]] = {
    "pickle": PickleSerializer,
    "json": JsonSerializer,
}

_RAW_PREFIX = "raw:"
_HEX_PREFIX = "hex:"


def _key_bytes(value: str | bytes | None, where: str) -> bytes | None:
    """Decode a configured key.

    ``raw:<text>`` is taken as UTF-8 text; anything else, with or without a
    ``hex:`` prefix, must be hex.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bytes):
        return value
    if value.startswith(_RAW_PREFIX):
        return value[len(_RAW_PREFIX) :].encode()
    try:
        return bytes.fromhex(value.removeprefix(_HEX_PREFIX))
    except ValueError:
        raise ConfigurationException(
            f"{where} is not valid hex; prefix passphrases with '{_RAW_PREFIX}'",
            code="KEY_ENCODING_INVALID",
        ) from None


def key_pairs_from_properties(props: SessionProperties) -> list[bytes | None]:
    """Flatten ``key_pairs`` into ``hash1, block1, hash2, block2, ...``."""
    keys: list[bytes | None] = []
    for index, pair in enumerate(props.key_pairs):
        where = f"redisstore.session.key-pairs[{index}]"
        hash_key = _key_bytes(pair.get("hash-key", pair.get("hash_key")), f"{where}.hash-key")
        if hash_key is None:
            raise ConfigurationException(f"{where} has no hash-key", code="HASH_KEY_MISSING")
        keys.append(hash_key)
        keys.append(_key_bytes(pair.get("block-key", pair.get("block_key")), f"{where}.block-key"))
    return keys


def serializer_for(name: str) -> SessionSerializer:
    try:
        return _SERIALIZERS[name.lower()]()
    except KeyError:
        raise ConfigurationException(
            f"Unknown session serializer '{name}'; expected one of {sorted(_SERIALIZERS)}",
            code="SERIALIZER_UNKNOWN",
        ) from None


def store_from_client(client: Any, *key_pairs: bytes | None, **kwargs: Any) -> RedisStore:
    """Build a store directly over a ``redis.asyncio`` client.

    Keyword arguments are passed through to :class:`RedisStore`.
    """
    return RedisStore(RedisBackend(client), *key_pairs, **kwargs)


def session_store_from_config(
    config: Config,
    client: Any = None,
    backend: KeyValueBackend | None = None,
) -> RedisStore:
    """Create a :class:`RedisStore` from ``redisstore.session.*``.

    Logging is set up from ``redisstore.logging.*`` first. Uses *backend*
    when given, else wraps *client*, else opens a ``redis.asyncio`` client
    on ``redis-url``.
    """
    configure_logging(config)
    props = config.bind(SessionProperties)
    keys = key_pairs_from_properties(props)
    if not keys:
        raise ConfigurationException(
            "redisstore.session.key-pairs must hold at least one hash key",
            code="NO_CODECS",
        )

    if backend is None:
        if client is None:
            import redis.asyncio as aioredis

            client = aioredis.from_url(props.redis_url)
        backend = RedisBackend(client)

    store = RedisStore(
        backend,
        *keys,
        options=Options(
            path=props.path,
            domain=props.domain,
            max_age=props.max_age,
            secure=props.secure,
            http_only=props.http_only,
        ),
        serializer=serializer_for(props.serializer),
        max_length=props.max_length,
        default_max_age=props.default_max_age,
        key_prefix=props.key_prefix,
    )
    # Keep every codec's expiry window in step with the cookie max age.
    store.set_max_age(props.max_age)
    logger.info(
        "session_store_configured",
        key_pairs=len(store.codecs),
        serializer=props.serializer,
        key_prefix=props.key_prefix,
        default_max_age=props.default_max_age,
    )
    return store
