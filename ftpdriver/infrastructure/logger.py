#!/usr/bin/env python3
"""Structured logging for ftpdriver.

The driver never configures sinks itself. Whoever builds it (the protocol
engine or the CLI) hands over a ``Logger``; the driver only emits messages,
each suffixed with ``key=value`` pairs.

Example:
    >>> logger = Logger("ftpdriver.driver", level="DEBUG")
    >>> with logger.add_context(command="ls"):
    ...     logger.debug("Session entered", path="/")
"""

import logging
import logging.handlers
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)


class Logger:
    """Thin wrapper over a stdlib logger that renders keyword context.

    Context pushed with ``add_context`` is kept per thread, so concurrent
    sessions never see each other's fields.
    """

    _local = threading.local()

    def __init__(
        self,
        name: str = "ftpdriver",
        level: Union[LogLevel, str] = LogLevel.INFO,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Args:
            name: Name of the underlying ``logging`` logger
            level: Minimum level, as ``LogLevel`` or its name
            handlers: Handlers to attach (a stderr handler if None)
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.propagate = False
        self.set_level(level)

        if handlers is None:
            console = logging.StreamHandler()
            console.setFormatter(_formatter())
            handlers = [console]

        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)

    def create_file_handler(
        self,
        filename: Union[str, Path],
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ) -> logging.handlers.RotatingFileHandler:
        """Build a size-rotated file handler using the console format."""
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backup_count
        )
        handler.setFormatter(_formatter())
        return handler

    def add_handler(self, handler: logging.Handler) -> None:
        self.logger.addHandler(handler)

    def remove_handler(self, handler: logging.Handler) -> None:
        self.logger.removeHandler(handler)

    def set_level(self, level: Union[LogLevel, str]) -> None:
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        self.logger.setLevel(level)

    def _frames(self) -> List[Dict[str, Any]]:
        if not hasattr(self._local, "frames"):
            self._local.frames = []
        return self._local.frames

    @contextmanager
    def add_context(self, **fields) -> Iterator[None]:
        """Attach ``fields`` to every message logged inside the block."""
        frames = self._frames()
        frames.append(fields)
        try:
            yield
        finally:
            frames.pop()

    def _log(self, level: LogLevel, msg: str, fields: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return

        context: Dict[str, Any] = {}
        for frame in self._frames():
            context.update(frame)
        context.update(fields)

        if context:
            msg = msg + " | " + " ".join(f"{k}={v}" for k, v in context.items())
        self.logger.log(level, msg, extra={"context": context})

    def debug(self, msg: str, **fields) -> None:
        self._log(LogLevel.DEBUG, msg, fields)

    def info(self, msg: str, **fields) -> None:
        self._log(LogLevel.INFO, msg, fields)

    def warning(self, msg: str, **fields) -> None:
        self._log(LogLevel.WARNING, msg, fields)

    def error(self, msg: str, **fields) -> None:
        self._log(LogLevel.ERROR, msg, fields)
