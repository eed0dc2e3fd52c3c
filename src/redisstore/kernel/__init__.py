"""redisstore kernel — exception hierarchy with zero external dependencies."""

from redisstore.kernel.exceptions import (
    BackendUnavailableException,
    BusinessException,
    ConfigurationException,
    CookieAuthenticationException,
    InfrastructureException,
    PayloadTooLargeException,
    RedisStoreException,
    SecurityException,
    SerializationException,
    SessionNotFoundException,
)

__all__ = [
    "BackendUnavailableException",
    "BusinessException",
    "ConfigurationException",
    "CookieAuthenticationException",
    "InfrastructureException",
    "PayloadTooLargeException",
    "RedisStoreException",
    "SecurityException",
    "SerializationException",
    "SessionNotFoundException",
]
