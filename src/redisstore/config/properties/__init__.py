"""Typed configuration property classes for redisstore."""

from redisstore.config.properties.logging import LoggingProperties
from redisstore.config.properties.session import SessionProperties

__all__ = ["LoggingProperties", "SessionProperties"]
