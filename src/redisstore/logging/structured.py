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
"""Structured logging for the session store using structlog."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from redisstore.config.properties.logging import LoggingProperties
from redisstore.core.config import Config
from redisstore.kernel.exceptions import ConfigurationException

ROOT_LOGGER = "redisstore"

_HANDLER_NAME = "redisstore-structlog"


def _level(name: str) -> int:
    value = logging.getLevelName(str(name).upper())
    if not isinstance(value, int):
        raise ConfigurationException(f"Unknown log level '{name}'", code="LOG_LEVEL_UNKNOWN")
    return value


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    if fmt == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    raise ConfigurationException(
        f"Unknown log format '{fmt}'; expected 'console' or 'json'",
        code="LOG_FORMAT_UNKNOWN",
    )


def _install_handler(logger: logging.Logger, stream: TextIO) -> None:
    # Replace our own handler on reconfiguration; leave host handlers alone.
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def configure_logging(config: Config, stream: TextIO | None = None) -> LoggingProperties:
    """Route structlog events from ``redisstore.*`` loggers to *stream*.

    Only the ``redisstore`` logger tree gets a handler and levels; the host's
    root logger is untouched. *stream* defaults to stdout. With
    ``redisstore.logging.enabled: false`` nothing is changed.

    Returns:
        The bound :class:`LoggingProperties`.
    """
    props = config.bind(LoggingProperties)
    if not props.enabled:
        return props

    # REDISSTORE_LOGGING_LEVEL=DEBUG arrives as a bare string.
    levels = {"root": props.level} if isinstance(props.level, str) else dict(props.level)
    renderer = _renderer(props.format.lower())

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(_level(levels.pop("root", "INFO")))
    for name, level in levels.items():
        logging.getLogger(name).setLevel(_level(level))
    _install_handler(root, stream if stream is not None else sys.stdout)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Module-level loggers pick up a later reconfiguration.
        cache_logger_on_first_use=False,
    )
    return props
