"""Contextual logging for healthgate.

Every component logs through a ``ContextualLogger``, which carries a set of
dimensions (``context_base``, ``operation``, ...) that are attached to each
record.  ``with_context`` returns a new logger with extra dimensions merged
in, leaving the original untouched.

Importing healthgate never touches handlers: records propagate to whatever
the embedding application configured.  Only the standalone runner calls
``LoggerConfigurator.configure_root``, which renders records with structlog.
"""

import logging
import sys
from typing import Any, MutableMapping

import structlog

from healthgate.core.config import settings

_ROOT_LOGGER_NAME = "healthgate"

logging.getLogger(_ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that stamps its dimensions onto every record."""

    def __init__(self, logger: logging.Logger, dimensions: dict[str, Any] | None = None):
        """Initialize the adapter.

        Args:
            logger: The underlying stdlib logger.
            dimensions: Key/value pairs attached to every record.
        """
        super().__init__(logger, {})
        self.dimensions: dict[str, Any] = dict(dimensions or {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with ``dimensions`` merged into the current ones."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})


def build_formatter(json_output: bool) -> structlog.stdlib.ProcessorFormatter:
    """Return a stdlib formatter that renders records (and their dimensions) via structlog.

    Args:
        json_output: Render one JSON object per record instead of console lines.
    """
    pre_chain = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if json_output:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer(default=str)]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )


class LoggerConfigurator:
    """Builds ``ContextualLogger`` instances under the ``healthgate`` namespace."""

    @staticmethod
    def configure_root(level: str | None = None, json_output: bool | None = None) -> None:
        """Install (or replace) the stream handler on the ``healthgate`` logger.

        Meant for the process owner (the standalone runner); embedding
        applications keep their own handlers instead.

        Args:
            level: Log level name. Defaults to ``settings.LOG_LEVEL``.
            json_output: Emit JSON. Defaults to ``settings.LOG_JSON``.
        """
        root = logging.getLogger(_ROOT_LOGGER_NAME)
        for handler in list(root.handlers):
            root.removeHandler(handler)

        handler = logging.StreamHandler(sys.stderr)
        use_json = settings.LOG_JSON if json_output is None else json_output
        handler.setFormatter(build_formatter(use_json))
        root.addHandler(handler)
        root.setLevel(level or settings.LOG_LEVEL)
        root.propagate = False

    @staticmethod
    def configure_logger(name: str, dimensions: dict[str, Any] | None = None) -> ContextualLogger:
        """Return a contextual logger for ``name``.

        Args:
            name: Logger name; placed under the ``healthgate`` namespace.
            dimensions: Initial dimensions.

        Returns:
            The configured logger.
        """
        if name != _ROOT_LOGGER_NAME and not name.startswith(_ROOT_LOGGER_NAME + "."):
            name = f"{_ROOT_LOGGER_NAME}.{name}"
        return ContextualLogger(logging.getLogger(name), dimensions)


logger = LoggerConfigurator.configure_logger(_ROOT_LOGGER_NAME)
