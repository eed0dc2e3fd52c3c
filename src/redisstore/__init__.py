"""redisstore — server-side sessions in Redis behind authenticated cookies."""

from redisstore.kernel.exceptions import (
    BackendUnavailableException,
    CookieAuthenticationException,
    PayloadTooLargeException,
    RedisStoreException,
    SerializationException,
    SessionNotFoundException,
)
from redisstore.session import Options, RedisStore, SecureCookie, Session

__version__ = "0.1.0"

__all__ = [
    "BackendUnavailableException",
    "CookieAuthenticationException",
    "Options",
    "PayloadTooLargeException",
    "RedisStore",
    "RedisStoreException",
    "SecureCookie",
    "SerializationException",
    "Session",
    "SessionNotFoundException",
    "__version__",
]
