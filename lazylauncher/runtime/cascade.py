"""Derived-state rules that run after every navigator mutation.

The controller compares the current state with what it observed on the
previous pass and applies, in order:

1. a parent change clears that pane's filter text (DIRECT and INDIRECT);
2. a DIRECT selection change clears ACTION's filter; an ACTION selection
   change clears INDIRECT's filter and returns INDIRECT to its root;
3. each pane with data auto-selects the first filtered candidate when its
   key or first candidate changed, or when the selection fell out of view;
   a pane whose key changed to one with no data yet selects nothing;
4. INDIRECT focus falls back to ACTION once INDIRECT is hidden.

Passes repeat until nothing changes, so a settled state is a fixed point.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from ..catalog.types import Candidate, PaneIndex, candidate_ids, find_candidate
from ..search.fuzzy import filter_candidates
from .panes import NavigatorState, PaneStack
from .query_cache import QueryKey, query_key_for

MAX_CASCADE_PASSES = 16

DIRECT = PaneIndex.DIRECT
ACTION = PaneIndex.ACTION
INDIRECT = PaneIndex.INDIRECT


@dataclass
class _Observed:
    parents: list[str | None]
    selected: list[str | None]
    keys: list[QueryKey | None]
    first_ids: list[str | None]


class CascadeController:
    """Keep pane selections, filters, and focus consistent with fetched data."""

    def __init__(
        self,
        panes: PaneStack,
        lookup: Callable[[QueryKey], list[Candidate] | None],
    ) -> None:
        self.panes = panes
        self._lookup = lookup
        self._observed = self._observe(panes.state)

    @staticmethod
    def _observe(state: NavigatorState) -> _Observed:
        return _Observed(
            parents=[pane.parent_id for pane in state.panes],
            selected=[pane.selected_child_id for pane in state.panes],
            keys=[None for _ in PaneIndex],
            first_ids=[None for _ in PaneIndex],
        )

    @property
    def state(self) -> NavigatorState:
        return self.panes.state

    def reset_observation(self) -> None:
        """Forget previous passes, e.g. after the state was reset wholesale."""
        self._observed = self._observe(self.state)

    def should_show_indirect(self) -> bool:
        """True when the selected action needs an indirect choice."""
        actions = self.data(ACTION)
        action = find_candidate(actions, self.state.action_child_id)
        return action is not None and action.indirect_type_count > 0

    def visible_pane_count(self) -> int:
        return 3 if self.should_show_indirect() else 2

    def query_key(self, pane: PaneIndex) -> QueryKey | None:
        indirect_visible = pane == INDIRECT and self.should_show_indirect()
        return query_key_for(self.state, pane, indirect_visible=indirect_visible)

    def data(self, pane: PaneIndex) -> list[Candidate] | None:
        key = self.query_key(pane)
        if key is None:
            return None
        return self._lookup(key)

    def filtered(self, pane: PaneIndex) -> list[Candidate]:
        data = self.data(pane)
        if data is None:
            return []
        return filter_candidates(data, self.state.panes[pane].filter_text)

    def run(self) -> bool:
        """Run passes until the state settles; return whether anything changed."""
        changed_any = False
        for _ in range(MAX_CASCADE_PASSES):
            if not self._pass():
                return changed_any
            changed_any = True
        logger.warning("cascade did not settle after {} passes", MAX_CASCADE_PASSES)
        return changed_any

    def _pass(self) -> bool:
        state = self.state
        panes = self.panes
        observed = self._observed
        changed = False

        if state.panes[DIRECT].parent_id != observed.parents[DIRECT]:
            changed |= panes.clear_filter_text(DIRECT)
        if state.panes[INDIRECT].parent_id != observed.parents[INDIRECT]:
            changed |= panes.clear_filter_text(INDIRECT)

        if state.direct_child_id != observed.selected[DIRECT]:
            changed |= panes.clear_filter_text(ACTION)
        if state.action_child_id != observed.selected[ACTION]:
            changed |= panes.clear_filter_text(INDIRECT)
            changed |= panes.set_parent(INDIRECT, None)

        observed.parents = [pane.parent_id for pane in state.panes]
        observed.selected = [pane.selected_child_id for pane in state.panes]

        for index in PaneIndex:
            changed |= self._auto_select(index)

        if state.active_pane == INDIRECT and not self.should_show_indirect():
            changed |= panes.set_active(ACTION)
        return changed

    def _auto_select(self, index: PaneIndex) -> bool:
        observed = self._observed
        pane = self.state.panes[index]
        key = self.query_key(index)
        if key is None:
            observed.keys[index] = None
            observed.first_ids[index] = None
            return self.panes.set_selected(index, None)

        data = self._lookup(key)
        if data is None:
            if key == observed.keys[index]:
                return False
            observed.keys[index] = key
            observed.first_ids[index] = None
            return self.panes.set_selected(index, None)

        filtered = filter_candidates(data, pane.filter_text)
        changed = False
        if filtered:
            first_id = filtered[0].id
            if (
                key != observed.keys[index]
                or first_id != observed.first_ids[index]
                or pane.selected_child_id not in candidate_ids(filtered)
            ):
                changed = self.panes.set_selected(index, first_id)
        else:
            first_id = None
            if pane.selected_child_id is not None and pane.selected_child_id not in candidate_ids(data):
                changed = self.panes.set_selected(index, None)

        observed.keys[index] = key
        observed.first_ids[index] = first_id
        return changed


__all__ = [
    "CascadeController",
    "MAX_CASCADE_PASSES",
]
