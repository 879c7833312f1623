"""Terminal rendering for the navigator.

Draws one header cell per visible pane (selected candidate plus filter text
and fetch state), then the active pane's filtered list, then a status row.
"""

from __future__ import annotations

from .ansi import fit_ansi_line
from .catalog.types import Candidate, PaneIndex
from .runtime.navigator import Navigator
from .ui_theme import DEFAULT_THEME, UITheme

PANE_TITLES = {
    PaneIndex.DIRECT: "Item",
    PaneIndex.ACTION: "Action",
    PaneIndex.INDIRECT: "Target",
}
KEY_HINTS = "tab pane  ←/→ drill  ↑/↓ move  enter run  ⌫ clear  ^r refresh  esc quit"
HEADER_ROWS = 3
FOOTER_ROWS = 1


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def icon_glyph(candidate: Candidate) -> str:
    """One-cell stand-in for the candidate's icon."""
    if candidate.icon_ref.startswith("action:"):
        return "»"
    return "▸" if candidate.has_children else "·"


def candidate_label(candidate: Candidate) -> str:
    suffix = "..." if candidate.indirect_type_count > 0 else ""
    return f"{icon_glyph(candidate)} {candidate.name}{suffix}"


def _pane_header(navigator: Navigator, pane: PaneIndex, width: int, theme: UITheme) -> tuple[str, str]:
    candidate = navigator.selected_candidate(pane)
    if candidate is not None:
        title = f"{theme.pane_title}{candidate_label(candidate)}{theme.reset}"
    else:
        title = f"{theme.pane_detail}  {PANE_TITLES[pane]}{theme.reset}"

    parts: list[str] = []
    filter_text = navigator.state.panes[pane].filter_text
    if filter_text:
        parts.append(f"{theme.filter_query}/{filter_text}{theme.reset}")
    query = navigator.query(pane)
    if query is not None and query.error:
        parts.append(f"{theme.error}! {query.error}{theme.reset}")
    elif query is not None and query.is_fetching:
        parts.append(f"{theme.pane_detail}loading…{theme.reset}")
    elif candidate is not None and candidate.detail:
        parts.append(f"{theme.pane_detail}{candidate.detail}{theme.reset}")
    detail = " ".join(parts)

    cell_title = fit_ansi_line(" " + title, width)
    cell_detail = fit_ansi_line(" " + detail, width)
    if pane == navigator.state.active_pane:
        cell_title = selected_with_ansi(cell_title)
    return cell_title, cell_detail


def list_window_start(selected_idx: int, count: int, rows: int) -> int:
    """First visible row index that keeps ``selected_idx`` on screen."""
    if count <= rows or selected_idx < rows:
        return 0
    return min(selected_idx - rows + 1, count - rows)


def _list_row(candidate: Candidate, width: int, selected: bool, theme: UITheme) -> str:
    marker = f" {theme.row_marker}›{theme.reset}" if candidate.has_children else ""
    detail = f"  {theme.row_detail}{candidate.detail}{theme.reset}" if candidate.detail else ""
    row = fit_ansi_line(f" {candidate_label(candidate)}{marker}{detail}", width)
    return selected_with_ansi(row) if selected else row


def render_navigator(
    navigator: Navigator,
    columns: int,
    rows: int,
    theme: UITheme = DEFAULT_THEME,
) -> str:
    """Return one full frame, lines separated by CRLF for raw-mode output."""
    columns = max(1, columns)
    visible = navigator.visible_panes()
    cell_width = max(1, columns // len(visible))

    titles: list[str] = []
    details: list[str] = []
    for pane in visible:
        title, detail = _pane_header(navigator, pane, cell_width, theme)
        titles.append(title)
        details.append(detail)

    lines = [
        "".join(titles),
        "".join(details),
        f"{theme.divider}{'─' * columns}{theme.reset}",
    ]

    active = navigator.state.active_pane
    items = navigator.filtered(active)
    selected_id = navigator.state.panes[active].selected_child_id
    list_rows = max(1, rows - HEADER_ROWS - FOOTER_ROWS)
    ids = [candidate.id for candidate in items]
    selected_idx = ids.index(selected_id) if selected_id in ids else -1
    start = list_window_start(selected_idx, len(items), list_rows)
    for candidate in items[start : start + list_rows]:
        lines.append(_list_row(candidate, columns, candidate.id == selected_id, theme))
    if not items:
        query = navigator.query(active)
        empty = "loading…" if query is not None and query.is_fetching else "no results"
        lines.append(fit_ansi_line(f" {theme.hint}{empty}{theme.reset}", columns))
    while len(lines) < HEADER_ROWS + list_rows:
        lines.append("")

    if navigator.status_message:
        footer = f"{theme.status}{navigator.status_message}{theme.reset}"
    else:
        footer = f"{theme.hint}{KEY_HINTS}{theme.reset}"
    lines.append(fit_ansi_line(footer, columns))
    return "\r\n".join(lines)
