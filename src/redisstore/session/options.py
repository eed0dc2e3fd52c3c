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
"""Cookie options shared by a session and the Set-Cookie header it produces."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class Options:
    """Per-session cookie and expiry settings.

    ``max_age`` is overloaded: negative marks the session for deletion, zero
    means "use the store default" for the backend TTL (and a browser-session
    cookie), positive is an explicit lifetime in seconds.
    """

    path: str = "/"
    domain: str | None = None
    max_age: int = 0
    secure: bool = False
    http_only: bool = False

    def copy(self) -> Options:
        return dataclasses.replace(self)


def cookie_params(name: str, value: str, options: Options) -> dict[str, Any]:
    """Keyword arguments for ``Response.set_cookie`` carrying *options*.

    A negative max age clears the cookie: empty value, ``Max-Age=0`` and an
    ``Expires`` date at the Unix epoch.
    """
    params: dict[str, Any] = {
        "key": name,
        "value": value,
        "path": options.path,
        "domain": options.domain,
        "secure": options.secure,
        "httponly": options.http_only,
    }
    if options.max_age < 0:
        params["value"] = ""
        params["max_age"] = 0
        params["expires"] = _EPOCH
    elif options.max_age > 0:
        params["max_age"] = options.max_age
        params["expires"] = options.max_age
    return params
