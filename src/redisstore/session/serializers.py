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
"""Payload codecs for session values.

:class:`PickleSerializer` is the default: it round-trips arbitrary key and
value types, provided both the writer and the reader can import them.
:class:`JsonSerializer` trades that for a portable text format with string
keys only.
"""

from __future__ import annotations

import json
import pickle
from typing import TYPE_CHECKING, Any

from redisstore.kernel.exceptions import SerializationException

if TYPE_CHECKING:
    from redisstore.session.session import Session


def _replace_values(session: Session, values: Any) -> None:
    if not isinstance(values, dict):
        raise SerializationException(
            f"Stored session data is a {type(values).__name__}, expected a mapping",
            code="SERIALIZATION_FAILED",
        )
    session.values.clear()
    session.values.update(values)


class PickleSerializer:
    """Binary object-graph encoding of the values dict using :mod:`pickle`."""

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def serialize(self, session: Session) -> bytes:
        try:
            return pickle.dumps(dict(session.values), protocol=self._protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            raise SerializationException(
                f"Cannot encode session values: {exc}",
                code="SERIALIZATION_FAILED",
                context={"session": session.name},
            ) from exc

    def deserialize(self, data: bytes, session: Session) -> None:
        try:
            values = pickle.loads(data)
        except (
            pickle.UnpicklingError,
            EOFError,
            ValueError,
            TypeError,
            LookupError,
            AttributeError,
            ImportError,
            OverflowError,
        ) as exc:
            raise SerializationException(
                f"Cannot decode stored session: {exc}",
                code="SERIALIZATION_FAILED",
                context={"session": session.name},
            ) from exc
        _replace_values(session, values)


class JsonSerializer:
    """Compact JSON encoding. Keys must be strings and values JSON-compatible."""

    def serialize(self, session: Session) -> bytes:
        bad_keys = [k for k in session.values if not isinstance(k, str)]
        if bad_keys:
            raise SerializationException(
                f"JSON sessions need string keys, got {bad_keys[0]!r}",
                code="SERIALIZATION_FAILED",
                context={"session": session.name},
            )
        try:
            return json.dumps(session.values, separators=(",", ":")).encode()
        except (TypeError, ValueError) as exc:
            raise SerializationException(
                f"Cannot encode session values: {exc}",
                code="SERIALIZATION_FAILED",
                context={"session": session.name},
            ) from exc

    def deserialize(self, data: bytes, session: Session) -> None:
        try:
            values = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
            raise SerializationException(
                f"Cannot decode stored session: {exc}",
                code="SERIALIZATION_FAILED",
                context={"session": session.name},
            ) from exc
        _replace_values(session, values)
