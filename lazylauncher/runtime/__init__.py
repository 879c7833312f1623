"""Public runtime orchestration entry points.

This package groups the navigator state machine, its background fetch layer,
and the terminal event loop that drives it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .navigator import ExecutePolicy, Navigator


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


def __getattr__(name: str):
    if name in {"ExecutePolicy", "Navigator"}:
        from . import navigator as _navigator

        return getattr(_navigator, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ExecutePolicy",
    "Navigator",
    "run_main_loop",
]
