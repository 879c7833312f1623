"""Keyboard routing for the three-pane navigator.

``KeyRouter.route`` is pure: it reads a ``RouterContext`` snapshot and returns
``(consumed, transition)``. Applying the transition is the navigator's job.
Keys held with Ctrl, Alt, or Meta are never consumed so the host can act on
them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..catalog.types import Candidate, PaneIndex, candidate_ids, find_candidate
from ..runtime.panes import NavigatorState
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import BACKSPACE, DOWN, ENTER, LEFT, RIGHT, TAB, UP, KeyEvent

FILTER_CHARACTERS = frozenset("abcdefghijklmnopqrstuvwxyz1234567890")


@dataclass(frozen=True)
class FocusPane:
    pane: PaneIndex


@dataclass(frozen=True)
class DrillIn:
    pane: PaneIndex
    parent_id: str


@dataclass(frozen=True)
class DrillOut:
    pane: PaneIndex


@dataclass(frozen=True)
class SelectChild:
    pane: PaneIndex
    child_id: str


@dataclass(frozen=True)
class ExecuteSelection:
    direct_id: str
    action_id: str
    indirect_id: str | None


@dataclass(frozen=True)
class ClearFilter:
    pane: PaneIndex


@dataclass(frozen=True)
class TypeFilterChar:
    pane: PaneIndex
    char: str


Transition = Union[
    FocusPane,
    DrillIn,
    DrillOut,
    SelectChild,
    ExecuteSelection,
    ClearFilter,
    TypeFilterChar,
]

RouteResult = tuple[bool, Union[Transition, None]]

IGNORED: RouteResult = (False, None)
CONSUMED: RouteResult = (True, None)


@dataclass(frozen=True)
class RouterContext:
    """Snapshot of what the router needs to decide on one key."""

    state: NavigatorState
    filtered: list[Candidate]
    visible_pane_count: int

    @property
    def active_pane(self) -> PaneIndex:
        return self.state.active_pane

    @property
    def selected_child_id(self) -> str | None:
        return self.state.active.selected_child_id

    def selected_candidate(self) -> Candidate | None:
        return find_candidate(self.filtered, self.selected_child_id)


def wrap_around(index: int, bounds: int) -> int:
    """Python-modulo wrap of ``index`` into ``[0, bounds)``."""
    if bounds <= 0:
        return 0
    return index % bounds


class KeyRouter:
    """Map key events to navigator transitions."""

    def __init__(self) -> None:
        self._registry: KeyComboRegistry[RouteResult] = KeyComboRegistry()
        self._registry.register_bindings(
            KeyComboBinding((TAB,), self._cycle_pane),
            KeyComboBinding((RIGHT,), self._drill_in),
            KeyComboBinding((LEFT,), self._drill_out),
            KeyComboBinding((UP, DOWN), self._move_selection),
            KeyComboBinding((ENTER,), self._execute),
            KeyComboBinding((BACKSPACE,), self._clear_filter),
        )

    def route(self, event: KeyEvent, context: RouterContext) -> RouteResult:
        if event.has_command_modifier:
            return IGNORED
        if self._registry.handles(event.key):
            result = self._registry.dispatch(event.key, event, context)
            return result if result is not None else CONSUMED
        if event.is_character and event.key.lower() in FILTER_CHARACTERS:
            return True, TypeFilterChar(context.active_pane, event.key.lower())
        return IGNORED

    @staticmethod
    def _cycle_pane(event: KeyEvent, context: RouterContext) -> RouteResult:
        direction = -1 if event.shift else 1
        target = wrap_around(int(context.active_pane) + direction, context.visible_pane_count)
        return True, FocusPane(PaneIndex(target))

    @staticmethod
    def _drill_in(_event: KeyEvent, context: RouterContext) -> RouteResult:
        candidate = context.selected_candidate()
        if candidate is None or not candidate.has_children:
            return CONSUMED
        return True, DrillIn(context.active_pane, candidate.id)

    @staticmethod
    def _drill_out(_event: KeyEvent, context: RouterContext) -> RouteResult:
        if context.state.active.parent_id is None:
            return CONSUMED
        return True, DrillOut(context.active_pane)

    @staticmethod
    def _move_selection(event: KeyEvent, context: RouterContext) -> RouteResult:
        ids = candidate_ids(context.filtered)
        if not ids:
            return CONSUMED
        direction = -1 if event.key == UP else 1
        selected = context.selected_child_id
        if selected in ids:
            next_index = wrap_around(ids.index(selected) + direction, len(ids))
        else:
            next_index = 0 if direction > 0 else len(ids) - 1
        return True, SelectChild(context.active_pane, ids[next_index])

    @staticmethod
    def _execute(_event: KeyEvent, context: RouterContext) -> RouteResult:
        state = context.state
        direct_id = state.direct_child_id
        action_id = state.action_child_id
        if direct_id is None or action_id is None:
            return CONSUMED
        indirect_id = None
        if context.visible_pane_count > 2:
            indirect_id = state.indirect_child_id
            if indirect_id is None:
                return CONSUMED
        return True, ExecuteSelection(direct_id, action_id, indirect_id)

    @staticmethod
    def _clear_filter(_event: KeyEvent, context: RouterContext) -> RouteResult:
        return True, ClearFilter(context.active_pane)


__all__ = [
    "ClearFilter",
    "DrillIn",
    "DrillOut",
    "ExecuteSelection",
    "FILTER_CHARACTERS",
    "FocusPane",
    "KeyRouter",
    "RouterContext",
    "SelectChild",
    "Transition",
    "TypeFilterChar",
    "wrap_around",
]
