"""UI theme definition used by the renderer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    pane_title: str
    pane_detail: str
    filter_query: str
    row_detail: str
    row_marker: str
    error: str
    status: str
    hint: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    pane_title="\033[1;38;5;252m",
    pane_detail="\033[2;38;5;250m",
    filter_query="\033[1;38;5;81m",
    row_detail="\033[38;5;244m",
    row_marker="\033[38;5;44m",
    error="\033[38;5;203m",
    status="\033[38;5;214m",
    hint="\033[2;38;5;250m",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="\033[7m",
    reset="\033[0m",
    pane_title="",
    pane_detail="",
    filter_query="",
    row_detail="",
    row_marker="",
    error="",
    status="",
    hint="",
)
