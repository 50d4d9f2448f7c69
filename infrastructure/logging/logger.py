"""Colored console logging shared by every process in the repository.

Importing this module installs a single stdout handler on the root logger
with ``ColoredFormatter``. The level comes from the ``LOG_LEVEL`` environment
variable unless a caller pins it through ``configure_logging``.
"""

import datetime
import logging
import os
import sys
from typing import ClassVar

DEFAULT_LEVEL = logging.INFO
NAME_WIDTH = 30
LEVEL_WIDTH = 8


class ColoredFormatter(logging.Formatter):
    """Formatter producing ``time | LEVEL | name | message`` lines.

    Only the level column is colored; the timestamp is grey. DEBUG records
    carry millisecond timestamps so that tight loops (batch replay) remain
    readable.

    Attributes:
        COLORS: ANSI color code per level name.
        GREY: ANSI code used for timestamps.
        RESET: ANSI reset code.
    """

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[90m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    GREY: ClassVar[str] = "\033[90m"
    RESET: ClassVar[str] = "\033[0m"

    def _timestamp(self, record: logging.LogRecord) -> str:
        created = datetime.datetime.fromtimestamp(record.created)
        if record.levelno <= logging.DEBUG:
            return created.strftime("%H:%M:%S.%f")[:-3]
        return created.strftime("%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Render a record as an aligned, colorized line.

        Args:
            record: The record being emitted.

        Returns:
            The formatted line, including the exception traceback if any.
        """
        level_color = self.COLORS.get(record.levelname, self.RESET)
        line = (
            f"{self.GREY}{self._timestamp(record)}{self.RESET} | "
            f"{level_color}{record.levelname.ljust(LEVEL_WIDTH)}{self.RESET} | "
            f"{record.name.ljust(NAME_WIDTH)} | "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _resolve_log_level(explicit_level: str | int | None = None) -> int:
    """Turn an explicit level or ``LOG_LEVEL`` into a numeric level.

    An explicit value always wins over the environment. Unknown names fall
    back to INFO.
    """
    if isinstance(explicit_level, int):
        return explicit_level

    name = explicit_level if explicit_level is not None else os.getenv("LOG_LEVEL", "INFO")
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else DEFAULT_LEVEL


def _install_root_handler() -> logging.Logger:
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ColoredFormatter())
        root_logger.addHandler(handler)
    return root_logger


def configure_logging(level: str | int | None = None) -> int:
    """Configure the root logger and every existing named logger.

    Args:
        level: Level name or number. When omitted, ``LOG_LEVEL`` is used.

    Returns:
        The numeric level that was applied.
    """
    resolved = _resolve_log_level(level)
    root_logger = _install_root_handler()
    root_logger.setLevel(resolved)

    for name in list(logging.root.manager.loggerDict):
        logging.getLogger(name).setLevel(resolved)

    return resolved


def get_logger(name: str) -> logging.Logger:
    """Return the logger called ``name``.

    The logger has no level of its own until ``configure_logging`` runs, so
    it follows the root logger.

    Args:
        name: Logger name, usually the owning class name.
    """
    return logging.getLogger(name)


# Runs once per process, on first import.
if not logging.getLogger().handlers:
    configure_logging()
