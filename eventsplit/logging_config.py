"""
Logging configuration for eventsplit

Includes IndentLogger for nesting per-clone lines under the document that
produced them.
"""

import logging
import sys
from contextlib import contextmanager

LOGGER_NAME = "eventsplit"


class IndentLogger:
    """Logger wrapper that prefixes messages with tree-style indentation"""

    _branch = "├── "
    _pipe = "│   "

    def __init__(self, base_logger: logging.Logger) -> None:
        self._logger = base_logger
        self._level = 0

    @property
    def base(self) -> logging.Logger:
        """The wrapped standard library logger"""
        return self._logger

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(f"{self.indent}{msg}", *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(f"{self.indent}{msg}", *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(f"{self.indent}{msg}", *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(f"{self.indent}{msg}", *args, **kwargs)

    def isEnabledFor(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    @property
    def indent(self) -> str:
        """Get current indentation string"""
        if self._level == 0:
            return ""
        return self._pipe * (self._level - 1) + self._branch

    @contextmanager
    def indent_block(self, initial_message: str | None = None):
        """
        Context manager for handling indentation blocks

        Args:
            initial_message: Optional message to log at block start
        """
        if initial_message:
            self.debug(initial_message)
        self._level += 1
        try:
            yield
        finally:
            self._level -= 1


def setup_logging(level=logging.INFO) -> IndentLogger:
    """
    Configure logging for eventsplit

    Args:
        level: Logging level, as int or name (default: INFO)

    Returns:
        IndentLogger: Configured logger with indentation support
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    base_logger = logging.getLogger(LOGGER_NAME)
    base_logger.setLevel(level)
    base_logger.handlers = []

    # stderr keeps JSON Lines output on stdout clean
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)8s %(message)s"))
    base_logger.addHandler(handler)

    return IndentLogger(base_logger)


# Default logger with indentation support
logger = IndentLogger(logging.getLogger(LOGGER_NAME))
