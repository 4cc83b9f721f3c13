"""
Output rendering and formatting.
"""

from __future__ import annotations

import json
import re
import sys
from dataclasses import dataclass
from typing import Iterable, TextIO

from wcwidth import wcswidth

from .common import format_size
from .reconcile import Inventory, Item, ItemState

# ANSI color codes
GREEN = "\033[32m"
BLUE = "\033[34m"
RED = "\033[31m"
RESET = "\033[0m"

# CSI (color etc.): ESC [ ... cmd
CSI_RE = re.compile(r'\x1b\[[0-?]*[ -/]*[@-~]')


@dataclass(frozen=True)
class RenderOptions:
    """
    Attributes:
        color: Colorize output
        emoji: Use emoji status icons
    """
    color: bool = True
    emoji: bool = True


def colorize(text: str, color: str, options: RenderOptions) -> str:
    """Apply color to text, or return it unchanged if colors are disabled."""
    if not options.color or not text:
        return text
    return f"{color}{text}{RESET}"


def display_width(text: str) -> int:
    """Terminal display width of text, ignoring ANSI escapes."""
    plain = CSI_RE.sub('', text)
    width = wcswidth(plain)
    return width if width >= 0 else len(plain)


def pad(text: str, width: int) -> str:
    """Left-align text in a column of the given display width."""
    return text + " " * max(0, width - display_width(text))


def status_icon(state: ItemState, options: RenderOptions) -> str:
    """Get status icon for an item state."""
    if not options.emoji:
        return {ItemState.ACTIVE: "*", ItemState.DOWNLOADED: "+"}.get(state, "-")
    return {ItemState.ACTIVE: "✅", ItemState.DOWNLOADED: "📦"}.get(state, "☁️")


def _state_color(state: ItemState) -> str:
    if state == ItemState.ACTIVE:
        return GREEN
    if state == ItemState.DOWNLOADED:
        return BLUE
    return ""


def _render_rows(items: Iterable[Item], options: RenderOptions, out: TextIO, show_remote: bool) -> None:
    rows = []
    for item in items:
        color = _state_color(item.state)
        version = str(item.version)
        cells = [
            status_icon(item.state, options),
            colorize(version, color, options) if color else version,
        ]
        if show_remote:
            cells.append(item.date)
            cells.append(format_size(item.size))
        else:
            cells.append(item.local_path.name if item.local_path else "")
        if item.master:
            cells.append(colorize("[master]", RED, options))
        rows.append(cells)

    if not rows:
        return

    columns = max(len(row) for row in rows)
    widths = [
        max((display_width(row[i]) for row in rows if i < len(row)), default=0)
        for i in range(columns)
    ]
    for row in rows:
        line = "  ".join(pad(cell, widths[i]) for i, cell in enumerate(row))
        print(line.rstrip(), file=out)


def render_remote(inventory: Inventory, options: RenderOptions | None = None, out: TextIO | None = None) -> None:
    """Render indexed versions (the 'list' command)."""
    options = options or RenderOptions()
    out = out or sys.stdout
    legend = f"{colorize('[active]', GREEN, options)} {colorize('[downloaded]', BLUE, options)}"
    print(f"List of indexed zig versions ({legend}):\n", file=out)
    _render_rows(inventory.indexed(), options, out, show_remote=True)


def render_local(inventory: Inventory, options: RenderOptions | None = None, out: TextIO | None = None) -> None:
    """Render downloaded versions (the 'show' command)."""
    options = options or RenderOptions()
    out = out or sys.stdout
    print(f"List of downloaded zig versions ({colorize('[active]', GREEN, options)}):\n", file=out)
    _render_rows(inventory.downloaded(), options, out, show_remote=False)


def render_json(inventory: Inventory, remote: bool = True, out: TextIO | None = None) -> None:
    """Render indexed (remote) or downloaded items as JSON."""
    out = out or sys.stdout
    items = inventory.indexed() if remote else inventory.downloaded()
    json.dump({"items": [item.to_dict() for item in items]}, out, indent=2)
    out.write("\n")
