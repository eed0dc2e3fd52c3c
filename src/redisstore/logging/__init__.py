"""redisstore logging — structlog output for the ``redisstore`` logger tree."""

from redisstore.logging.structured import ROOT_LOGGER, configure_logging

__all__ = ["ROOT_LOGGER", "configure_logging"]
