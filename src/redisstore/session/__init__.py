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
"""Server-side sessions in a key-value store, referenced by a sealed cookie.

Import concrete backends from the adapter package::

    from redisstore.session.adapters.memory import InMemoryBackend
    from redisstore.session.adapters.redis import RedisBackend
"""

from redisstore.session.middleware import SessionMiddleware, get_session
from redisstore.session.options import Options
from redisstore.session.ports.outbound import CookieCodec, KeyValueBackend, SessionSerializer
from redisstore.session.securecookie import (
    SecureCookie,
    codecs_from_pairs,
    decode_multi,
    encode_multi,
    generate_random_key,
)
from redisstore.session.serializers import JsonSerializer, PickleSerializer
from redisstore.session.session import Session
from redisstore.session.store import RedisStore, generate_session_id

__all__ = [
    "CookieCodec",
    "JsonSerializer",
    "KeyValueBackend",
    "Options",
    "PickleSerializer",
    "RedisStore",
    "SecureCookie",
    "Session",
    "SessionMiddleware",
    "SessionSerializer",
    "codecs_from_pairs",
    "decode_multi",
    "encode_multi",
    "generate_random_key",
    "generate_session_id",
    "get_session",
]
