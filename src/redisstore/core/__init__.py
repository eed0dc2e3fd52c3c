"""redisstore core — configuration loading and binding."""

from redisstore.core.config import Config, config_properties

__all__ = ["Config", "config_properties"]
