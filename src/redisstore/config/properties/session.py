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
"""Session store configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from redisstore.core.config import config_properties


@config_properties(prefix="redisstore.session")
@dataclass
class SessionProperties:
    """Configuration for the session store (redisstore.session.*).

    ``key_pairs`` is a list of ``{"hash-key": ..., "block-key": ...}`` mappings,
    newest first. Keys are hex strings, optionally prefixed ``hex:``; a
    ``raw:`` prefix takes the rest as a UTF-8 passphrase instead. ``block-key``
    may be omitted for sign-only cookies.
    """

    path: str = "/"
    domain: str | None = None
    max_age: int = 86400 * 30
    secure: bool = False
    http_only: bool = False
    default_max_age: int = 60 * 20
    max_length: int = 4096
    key_prefix: str = ""
    serializer: str = "pickle"
    redis_url: str = "redis://localhost:6379/0"
    key_pairs: list[dict[str, str]] = field(default_factory=list)
