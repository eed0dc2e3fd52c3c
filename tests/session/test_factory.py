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
"""Tests for building a RedisStore from configuration."""

from __future__ import annotations

import logging

import pytest
import structlog
from conftest import HASH_KEY, SESSION_NAME, FakeRequest, FakeResponse

from redisstore.config.properties.session import SessionProperties
from redisstore.core.config import Config
from redisstore.kernel.exceptions import ConfigurationException
from redisstore.logging import ROOT_LOGGER
from redisstore.session.adapters.memory import InMemoryBackend
from redisstore.session.adapters.redis import RedisBackend
from redisstore.session.factory import (
    key_pairs_from_properties,
    serializer_for,
    session_store_from_config,
    store_from_client,
)
from redisstore.session.serializers import JsonSerializer, PickleSerializer

HASH_HEX = "00" * 32
BLOCK_HEX = "11" * 32


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.propagate = True
    root.setLevel(logging.NOTSET)
    logging.getLogger("redisstore.session").setLevel(logging.NOTSET)
    structlog.reset_defaults()


def _config(logging_section: dict[str, object] | None = None, **session: object) -> Config:
    section = {"key-pairs": [{"hash-key": HASH_HEX, "block-key": BLOCK_HEX}]}
    section.update(session)
    data: dict[str, object] = {"session": section}
    if logging_section is not None:
        data["logging"] = logging_section
    return Config({"redisstore": data})


class FakeRedis:
    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value

    async def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)


class TestSessionStoreFromConfig:
    def test_defaults(self):
        store = session_store_from_config(_config(), backend=InMemoryBackend())
        assert store.options.path == "/"
        assert store.options.max_age == 86400 * 30
        assert store.default_max_age == 1200
        assert store.max_length == 4096
        assert store.key_prefix == ""
        assert isinstance(store.serializer, PickleSerializer)
        assert store.codecs[0].encrypts is True

    def test_overrides(self):
        config = _config(
            **{
                "key-prefix": "app:",
                "serializer": "json",
                "max-age": 600,
                "default-max-age": 300,
                "max-length": 0,
                "domain": "example.com",
                "secure": True,
                "http-only": True,
            }
        )
        store = session_store_from_config(config, backend=InMemoryBackend())
        assert store.key_prefix == "app:"
        assert isinstance(store.serializer, JsonSerializer)
        assert store.options.max_age == 600
        assert store.options.domain == "example.com"
        assert store.options.secure is True
        assert store.options.http_only is True
        assert store.default_max_age == 300
        assert store.max_length == 0
        assert store.codecs[0].max_age == 600

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("REDISSTORE_SESSION_KEY_PREFIX", "env:")
        monkeypatch.setenv("REDISSTORE_SESSION_MAX_LENGTH", "2048")
        store = session_store_from_config(_config(), backend=InMemoryBackend())
        assert store.key_prefix == "env:"
        assert store.max_length == 2048

    def test_wraps_client_in_redis_backend(self):
        client = object()
        store = session_store_from_config(_config(), client=client)
        assert isinstance(store.backend, RedisBackend)
        assert store.backend.client is client

    def test_requires_key_pairs(self):
        with pytest.raises(ConfigurationException):
            session_store_from_config(Config({}), backend=InMemoryBackend())

    def test_unknown_serializer(self):
        with pytest.raises(ConfigurationException):
            session_store_from_config(_config(serializer="xml"), backend=InMemoryBackend())

    def test_configures_logging(self):
        config = _config({"format": "json", "level": {"root": "DEBUG", "redisstore.session": "WARNING"}})
        session_store_from_config(config, backend=InMemoryBackend())
        assert logging.getLogger(ROOT_LOGGER).level == logging.DEBUG
        assert logging.getLogger("redisstore.session").level == logging.WARNING
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_logging_left_to_host_when_disabled(self):
        root = logging.getLogger(ROOT_LOGGER)
        before = (list(root.handlers), root.level)
        session_store_from_config(_config({"enabled": False}), backend=InMemoryBackend())
        assert (list(root.handlers), root.level) == before


class TestStoreFromClient:
    @pytest.mark.asyncio
    async def test_wraps_redis_client(self):
        client = FakeRedis()
        store = store_from_client(client, HASH_KEY, key_prefix="s:")
        assert isinstance(store.backend, RedisBackend)
        session, _ = await store.get(FakeRequest(), SESSION_NAME)
        session.set("k", "ok")
        await store.save(session, FakeResponse())
        assert "s:" + session.id in client.data


class TestKeyPairs:
    def test_hex_and_raw_keys(self):
        props = SessionProperties(
            key_pairs=[
                {"hash-key": HASH_HEX, "block-key": "hex:" + BLOCK_HEX},
                {"hash-key": "raw:a raw passphrase"},
            ]
        )
        keys = key_pairs_from_properties(props)
        assert keys == [bytes(32), b"\x11" * 32, b"a raw passphrase", None]

    def test_raw_prefix_keeps_hex_looking_passphrase(self):
        props = SessionProperties(key_pairs=[{"hash-key": "raw:deadbeef"}])
        assert key_pairs_from_properties(props) == [b"deadbeef", None]

    def test_bare_value_is_hex(self):
        props = SessionProperties(key_pairs=[{"hash-key": "deadbeef"}])
        assert key_pairs_from_properties(props) == [b"\xde\xad\xbe\xef", None]

    def test_unprefixed_passphrase_rejected(self):
        props = SessionProperties(key_pairs=[{"hash-key": "not a hex string"}])
        with pytest.raises(ConfigurationException) as exc_info:
            key_pairs_from_properties(props)
        assert exc_info.value.code == "KEY_ENCODING_INVALID"
        assert "not a hex string" not in str(exc_info.value)

    def test_missing_hash_key(self):
        with pytest.raises(ConfigurationException):
            key_pairs_from_properties(SessionProperties(key_pairs=[{"block-key": BLOCK_HEX}]))

    def test_serializer_for(self):
        assert isinstance(serializer_for("PICKLE"), PickleSerializer)
        assert isinstance(serializer_for("json"), JsonSerializer)
