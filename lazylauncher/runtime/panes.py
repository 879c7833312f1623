"""Navigation state for the three panes and its record store.

``PaneStack`` performs no validation; the cascade controller keeps the
derived invariants. Each mutation replaces one field of one pane in a single
assignment, so a reader never sees half an update.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from ..catalog.types import PaneIndex


@dataclass
class Pane:
    """Per-pane navigation record.

    ``parent_id`` of ``None`` is the catalog root. ``parent_stack`` holds the
    parents drilled through to reach ``parent_id``, nearest last; it may be
    shorter than the real ancestry, in which case the catalog is asked.
    """

    parent_id: str | None = None
    selected_child_id: str | None = None
    filter_text: str = ""
    parent_stack: list[str | None] = field(default_factory=list)


def _initial_panes() -> list[Pane]:
    return [Pane() for _ in PaneIndex]


@dataclass
class NavigatorState:
    panes: list[Pane] = field(default_factory=_initial_panes)
    active_pane: PaneIndex = PaneIndex.DIRECT

    def pane(self, index: PaneIndex) -> Pane:
        return self.panes[index]

    @property
    def active(self) -> Pane:
        return self.panes[self.active_pane]

    @property
    def direct_child_id(self) -> str | None:
        return self.panes[PaneIndex.DIRECT].selected_child_id

    @property
    def action_child_id(self) -> str | None:
        return self.panes[PaneIndex.ACTION].selected_child_id

    @property
    def indirect_child_id(self) -> str | None:
        return self.panes[PaneIndex.INDIRECT].selected_child_id

    def snapshot(self) -> NavigatorState:
        """Return a deep copy suitable for before/after comparisons."""
        return copy.deepcopy(self)


class PaneStack:
    """Mutation API over a ``NavigatorState``.

    Every method returns ``True`` when it changed something.
    """

    def __init__(self, state: NavigatorState | None = None) -> None:
        self.state = state if state is not None else NavigatorState()

    def pane(self, index: PaneIndex) -> Pane:
        return self.state.panes[index]

    def set_parent(self, index: PaneIndex, parent_id: str | None) -> bool:
        """Jump to ``parent_id`` with unknown ancestry."""
        pane = self.pane(index)
        if pane.parent_id == parent_id and not pane.parent_stack:
            return False
        self.state.panes[index] = Pane(
            parent_id=parent_id,
            selected_child_id=pane.selected_child_id,
            filter_text=pane.filter_text,
        )
        return True

    def push_parent(self, index: PaneIndex, parent_id: str) -> bool:
        """Drill into ``parent_id``, remembering the current parent."""
        pane = self.pane(index)
        if pane.parent_id == parent_id:
            return False
        self.state.panes[index] = Pane(
            parent_id=parent_id,
            selected_child_id=pane.selected_child_id,
            filter_text=pane.filter_text,
            parent_stack=[*pane.parent_stack, pane.parent_id],
        )
        return True

    def pop_parent(self, index: PaneIndex) -> bool:
        """Drill out to the remembered parent; ``False`` when none is known."""
        pane = self.pane(index)
        if not pane.parent_stack:
            return False
        self.state.panes[index] = Pane(
            parent_id=pane.parent_stack[-1],
            selected_child_id=pane.selected_child_id,
            filter_text=pane.filter_text,
            parent_stack=pane.parent_stack[:-1],
        )
        return True

    def set_selected(self, index: PaneIndex, child_id: str | None) -> bool:
        pane = self.pane(index)
        if pane.selected_child_id == child_id:
            return False
        pane.selected_child_id = child_id
        return True

    def set_filter_text(self, index: PaneIndex, text: str) -> bool:
        pane = self.pane(index)
        if pane.filter_text == text:
            return False
        pane.filter_text = text
        return True

    def append_filter_text(self, index: PaneIndex, text: str) -> bool:
        if not text:
            return False
        return self.set_filter_text(index, self.pane(index).filter_text + text)

    def clear_filter_text(self, index: PaneIndex) -> bool:
        return self.set_filter_text(index, "")

    def set_active(self, index: PaneIndex) -> bool:
        if self.state.active_pane == index:
            return False
        self.state.active_pane = index
        return True

    def reset(self) -> None:
        """Restore the start-of-process state in place."""
        self.state.panes = _initial_panes()
        self.state.active_pane = PaneIndex.DIRECT


__all__ = [
    "NavigatorState",
    "Pane",
    "PaneStack",
]
