"""Key-value backends for the session store."""

from redisstore.session.adapters.memory import InMemoryBackend
from redisstore.session.adapters.redis import RedisBackend

__all__ = ["InMemoryBackend", "RedisBackend"]
