"""Window capability handed to the navigator.

The navigator never reaches for a global window object; it is given something
that can ``resize`` and ``hide``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

NARROW_WIDTH = 352
WIDE_WIDTH = 520
HEADER_HEIGHT = 176
ROW_HEIGHT = 64
MAX_VISIBLE_ROWS = 5


@dataclass(frozen=True)
class WindowSize:
    width: int
    height: int


class WindowHandle(Protocol):
    def resize(self, size: WindowSize) -> None: ...

    def hide(self) -> None: ...


def window_size_for(show_indirect: bool, row_count: int) -> WindowSize:
    """Window size for the current pane count and active list length."""
    width = WIDE_WIDTH if show_indirect else NARROW_WIDTH
    rows = max(1, min(MAX_VISIBLE_ROWS, row_count))
    return WindowSize(width=width, height=HEADER_HEIGHT + rows * ROW_HEIGHT)


class TerminalWindow:
    """Window handle for the terminal front end.

    A terminal cannot be resized from inside, so the requested size is only
    recorded. Hiding ends the session.
    """

    def __init__(self) -> None:
        self.size = window_size_for(False, 0)
        self.hidden = False

    def resize(self, size: WindowSize) -> None:
        self.size = size

    def hide(self) -> None:
        self.hidden = True


__all__ = [
    "TerminalWindow",
    "WindowHandle",
    "WindowSize",
    "window_size_for",
]
