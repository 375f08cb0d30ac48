"""Console logging setup for the bingmaps command-line tool."""
from __future__ import annotations
import logging
import os
import sys
from typing import Union

# Libraries that log every connection at DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def _supports_ansi() -> bool:
    """Detect if the terminal supports ANSI escape codes."""
    # https://no-color.org/
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if not hasattr(sys.stderr, "isatty") or not sys.stderr.isatty():
        return False
    if sys.platform == "win32":
        return bool(
            os.environ.get("WT_SESSION")
            or os.environ.get("ANSICON")
            or os.environ.get("ConEmuANSI") == "ON"
            or "TERM" in os.environ
        )
    return True


class LogColors:
    """ANSI color codes, empty strings when color is disabled."""

    def __init__(self, enabled: bool) -> None:
        code = (lambda value: value) if enabled else (lambda value: "")
        self.RESET = code("\033[0m")
        self.BOLD = code("\033[1m")
        self.DEBUG = code("\033[36m")
        self.INFO = code("\033[32m")
        self.WARNING = code("\033[33m")
        self.ERROR = code("\033[31m")
        self.CRITICAL = code("\033[35m")
        self.MODULE = code("\033[94m")


class ColoredFormatter(logging.Formatter):
    """Formats records as ``[LEVEL] logger - message`` with per-level colors."""

    def __init__(self, colors: LogColors) -> None:
        super().__init__()
        self.colors = colors

    def format(self, record: logging.LogRecord) -> str:
        level_color = getattr(self.colors, record.levelname, self.colors.RESET)
        levelname = f"{level_color}{self.colors.BOLD}[{record.levelname}]{self.colors.RESET}"
        name = f"{self.colors.MODULE}{record.name}{self.colors.RESET}"
        formatted = f"{levelname} {name} - {record.getMessage()}"
        if record.exc_info:
            formatted = f"{formatted}\n{self.formatException(record.exc_info)}"
        return formatted


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Send log records to stderr with colored levels.

    Stdout stays free for command output. ``urllib3`` and ``requests`` are
    held at WARNING unless ``level`` is DEBUG.

    Args:
        level: Logging level as an int or a name such as "DEBUG".
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter(LogColors(_supports_ansi())))
    root_logger.addHandler(console_handler)
    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


__all__ = ["LogColors", "ColoredFormatter", "configure_logging"]
