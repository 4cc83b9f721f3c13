"""
Common utilities shared across zig_toolchain modules.
"""

from __future__ import annotations

import os


def debug_enabled() -> bool:
    """Check whether debug output was requested through the environment."""
    return os.environ.get("ZIG_TOOLCHAIN_DEBUG", "0") == "1"


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log verbose message using structured logging.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or debug_enabled():
        from .logging_config import get_logger
        get_logger().info(msg)


def format_size(size: str | int | None) -> str:
    """
    Format a byte count for display.

    Args:
        size: Size in bytes (the index publishes sizes as strings)

    Returns:
        Human-readable size (e.g., "44.1 MiB"), or "" if unknown
    """
    if size is None or size == "":
        return ""
    try:
        value = float(size)
    except (TypeError, ValueError):
        return ""
    for unit in ("B", "KiB", "MiB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"
