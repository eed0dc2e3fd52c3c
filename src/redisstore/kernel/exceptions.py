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
"""Unified exception hierarchy for redisstore.

All library exceptions inherit from RedisStoreException, so callers can
catch the base class to handle every session error, or a specific subclass
to tell "no session" apart from "forged cookie" apart from "backend down".

Categories:
- BusinessException: missing sessions, unencodable or oversized payloads
- SecurityException: cookie authentication failures
- InfrastructureException: key-value backend failures
- ConfigurationException: invalid keys or settings
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class RedisStoreException(Exception):
    """Base exception for all redisstore errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "COOKIE_EXPIRED").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class ConfigurationException(RedisStoreException):
    """Store or codec configuration is invalid."""


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(RedisStoreException):
    """Session data errors."""


class SessionNotFoundException(BusinessException):
    """The backend holds no record for the session id (never saved or expired)."""


class SerializationException(BusinessException):
    """Session values could not be encoded, or stored bytes could not be decoded."""


class PayloadTooLargeException(BusinessException):
    """The encoded session exceeds the configured maximum length."""


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(RedisStoreException):
    """Authentication errors."""


class CookieAuthenticationException(SecurityException):
    """A session cookie is forged, corrupt, bound to another name, or expired."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(RedisStoreException):
    """Infrastructure failures: key-value store, network."""


class BackendUnavailableException(InfrastructureException):
    """The key-value backend could not be reached or rejected the command."""
