"""Main interactive event loop for the terminal launcher.

Coordinates background polling, rendering, and key dispatch. Feature logic
lives in the navigator; this loop only wires it to the terminal.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass

from ..input import KeyEvent, read_key
from ..input.keys import ESC
from .navigator import Navigator
from .terminal import TerminalController
from .window import TerminalWindow


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    poll_interval_ms: int = 50


def is_quit_key(event: KeyEvent) -> bool:
    """ESC and Ctrl+C end the session when the navigator leaves them unconsumed."""
    if event.key == ESC and not event.has_command_modifier:
        return True
    return event.ctrl and event.key == "c"


def is_refresh_key(event: KeyEvent) -> bool:
    return event.ctrl and not event.alt and not event.meta and event.key == "r"


def run_main_loop(
    navigator: Navigator,
    terminal: TerminalController,
    window: TerminalWindow,
    stdin_fd: int,
    render: Callable[[Navigator, int, int], str],
    timing: RuntimeLoopTiming | None = None,
) -> None:
    """Run until the window is hidden or a quit key arrives.

    Ctrl+R, which the navigator never consumes, refetches the shown lists.
    """
    timing = timing if timing is not None else RuntimeLoopTiming()
    last_size = None
    with terminal.raw_mode():
        while not window.hidden:
            term = shutil.get_terminal_size((80, 24))
            if (term.columns, term.lines) != last_size:
                last_size = (term.columns, term.lines)
                navigator.dirty = True
            navigator.poll()
            if window.hidden:
                break
            if navigator.dirty:
                terminal.write_frame(render(navigator, term.columns, term.lines))
                navigator.dirty = False

            event = read_key(stdin_fd, timeout_ms=timing.poll_interval_ms)
            if event is None:
                continue
            if navigator.handle_key(event):
                continue
            if is_refresh_key(event):
                navigator.refresh()
                continue
            if is_quit_key(event):
                break
