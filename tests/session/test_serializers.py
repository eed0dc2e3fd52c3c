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
"""Tests for the pickle and JSON payload codecs."""

from __future__ import annotations

import pickle
from datetime import datetime, timezone

import pytest

from redisstore.kernel.exceptions import SerializationException
from redisstore.session.serializers import JsonSerializer, PickleSerializer
from redisstore.session.session import Session


@pytest.fixture
def session(store) -> Session:
    return Session(store, "s")


class TestPickleSerializer:
    def test_round_trip_arbitrary_types(self, store, session):
        values = {
            "user": "alice",
            7: [1, 2, 3],
            ("tuple", "key"): {"nested": True},
            "when": datetime(2024, 5, 1, tzinfo=timezone.utc),
            "raw": b"\x00\x01",
        }
        session.values.update(values)
        data = PickleSerializer().serialize(session)

        restored = Session(store, "s")
        PickleSerializer().deserialize(data, restored)
        assert restored.values == values

    def test_deserialize_replaces_existing_values(self, store, session):
        session.set("a", 1)
        data = PickleSerializer().serialize(session)
        target = Session(store, "s")
        target.set("stale", True)
        PickleSerializer().deserialize(data, target)
        assert target.values == {"a": 1}

    def test_unencodable_value(self, session):
        session.set("fn", lambda: None)
        with pytest.raises(SerializationException) as exc_info:
            PickleSerializer().serialize(session)
        assert exc_info.value.code == "SERIALIZATION_FAILED"

    @pytest.mark.parametrize("data", [b"", b"\x00garbage", b"\x80\x05\x95"])
    def test_malformed_input(self, session, data):
        with pytest.raises(SerializationException):
            PickleSerializer().deserialize(data, session)

    def test_non_mapping_payload(self, session):
        with pytest.raises(SerializationException):
            PickleSerializer().deserialize(pickle.dumps([1, 2]), session)


class TestJsonSerializer:
    def test_round_trip(self, store, session):
        values = {"user": "alice", "roles": ["admin"], "count": 3, "meta": {"ok": None}}
        session.values.update(values)
        data = JsonSerializer().serialize(session)

        restored = Session(store, "s")
        JsonSerializer().deserialize(data, restored)
        assert restored.values == values

    def test_compact_output(self, session):
        session.set("a", 1)
        assert JsonSerializer().serialize(session) == b'{"a":1}'

    def test_non_string_key(self, session):
        session.set(1, "x")
        with pytest.raises(SerializationException):
            JsonSerializer().serialize(session)

    def test_unencodable_value(self, session):
        session.set("when", datetime.now())
        with pytest.raises(SerializationException):
            JsonSerializer().serialize(session)

    @pytest.mark.parametrize("data", [b"", b"{not json", b"\xff\xfe", b"[1, 2]"])
    def test_malformed_input(self, session, data):
        with pytest.raises(SerializationException):
            JsonSerializer().deserialize(data, session)
