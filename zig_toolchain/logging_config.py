"""
Logging setup for zig-toolchain.

All modules log through children of the package logger. Console messages go
to stderr so stdout only carries listings and JSON; an optional log file
receives every message at DEBUG.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


LOGGER_NAME = "zig_toolchain"

_logger: Optional[logging.Logger] = None


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: Show debug messages on the console
        quiet: Show only warnings and errors on the console
        log_file: Optional file path that receives all messages

    Returns:
        The package logger
    """
    global _logger

    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.WARNING
    else:
        console_level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if log_file else console_level)
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ColoredFormatter(
        "%(levelname_colored)s %(message)s",
        use_colors=sys.stderr.isatty(),
    ))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the package logger, configuring console defaults on first use."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


class ColoredFormatter(logging.Formatter):
    """Prefix each message with a colored level name and symbol."""

    LEVEL_STYLES = {
        "DEBUG": ("\033[36m", "·"),
        "INFO": ("\033[32m", "›"),
        "WARNING": ("\033[33m", "!"),
        "ERROR": ("\033[31m", "✗"),
        "CRITICAL": ("\033[1;31m", "✗"),
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            color, symbol = self.LEVEL_STYLES.get(record.levelname, ("", ""))
            record.levelname_colored = f"{color}{symbol} {record.levelname}{self.RESET}"
        else:
            record.levelname_colored = record.levelname
        return super().format(record)
