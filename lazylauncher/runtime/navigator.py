"""Navigator: the runtime that ties keys, panes, fetches, and derived state.

Control flow for one key press: the router turns the event into a transition,
the transition mutates the pane stack, the cascade settles derived state, and
fetches are scheduled for whatever keys the panes now show. Fetches and other
source calls finish later on worker threads and are applied by ``poll``.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from ..catalog.source import CatalogSource
from ..catalog.types import Candidate, ExecuteResult, PaneIndex, find_candidate
from ..input.key_router import (
    ClearFilter,
    DrillIn,
    DrillOut,
    ExecuteSelection,
    FocusPane,
    KeyRouter,
    RouterContext,
    SelectChild,
    Transition,
    TypeFilterChar,
)
from ..input.keys import KeyEvent
from .background import BackgroundResult, BackgroundRunner, JobRunner
from .cascade import CascadeController
from .panes import NavigatorState, PaneStack
from .query_cache import QueryCache, QueryKey, QueryResult, load_query
from .window import WindowHandle, WindowSize, window_size_for

STATUS_MESSAGE_SECONDS = 4.0

PARENT_LOOKUP = "parent"
EXECUTE = "execute"


@dataclass(frozen=True)
class ExecutePolicy:
    """What happens around a completed execute call.

    ``reset_after_execute`` restores the initial navigation state after a
    success. ``hide_on_failure`` hides the window even when execute failed.
    """

    reset_after_execute: bool = False
    hide_on_failure: bool = False


class Navigator:
    """Three-pane launcher navigator over a ``CatalogSource``."""

    def __init__(
        self,
        source: CatalogSource,
        window: WindowHandle,
        *,
        policy: ExecutePolicy | None = None,
        fetch_runner: JobRunner | None = None,
        call_runner: JobRunner | None = None,
        stale_after_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.source = source
        self.window = window
        self.policy = policy if policy is not None else ExecutePolicy()
        self._clock = clock
        self.panes = PaneStack()
        self.cache = QueryCache(
            lambda key: load_query(source, key),
            runner=fetch_runner,
            stale_after_seconds=stale_after_seconds,
            clock=clock,
        )
        self._calls = call_runner if call_runner is not None else BackgroundRunner("lazylauncher-call")
        self.cascade = CascadeController(self.panes, self.cache.peek)
        self.router = KeyRouter()
        self.status_message = ""
        self.status_message_until = 0.0
        self.dirty = True
        self.execute_pending = False
        self._pending_parent_lookups: set[tuple[PaneIndex, str]] = set()
        self._window_size: WindowSize | None = None
        self._settle()

    @property
    def state(self) -> NavigatorState:
        return self.panes.state

    # --- derived views used by the router and renderers

    def should_show_indirect(self) -> bool:
        return self.cascade.should_show_indirect()

    def visible_panes(self) -> list[PaneIndex]:
        return list(PaneIndex)[: self.cascade.visible_pane_count()]

    def query_key(self, pane: PaneIndex) -> QueryKey | None:
        return self.cascade.query_key(pane)

    def query(self, pane: PaneIndex) -> QueryResult | None:
        key = self.query_key(pane)
        if key is None:
            return None
        return self.cache.get(key)

    def filtered(self, pane: PaneIndex) -> list[Candidate]:
        return self.cascade.filtered(pane)

    def selected_candidate(self, pane: PaneIndex) -> Candidate | None:
        return find_candidate(self.cascade.data(pane), self.state.panes[pane].selected_child_id)

    def router_context(self) -> RouterContext:
        return RouterContext(
            state=self.state,
            filtered=self.filtered(self.state.active_pane),
            visible_pane_count=self.cascade.visible_pane_count(),
        )

    # --- input

    def handle_key(self, event: KeyEvent) -> bool:
        """Route one key press; returns whether the key was consumed."""
        consumed, transition = self.router.route(event, self.router_context())
        if transition is not None:
            self.apply(transition)
        elif consumed:
            self.dirty = True
        return consumed

    def apply(self, transition: Transition) -> None:
        """Apply one router transition and settle derived state."""
        panes = self.panes
        if isinstance(transition, FocusPane):
            panes.set_active(transition.pane)
        elif isinstance(transition, DrillIn):
            panes.push_parent(transition.pane, transition.parent_id)
        elif isinstance(transition, DrillOut):
            self._drill_out(transition.pane)
        elif isinstance(transition, SelectChild):
            panes.set_selected(transition.pane, transition.child_id)
        elif isinstance(transition, ClearFilter):
            panes.clear_filter_text(transition.pane)
        elif isinstance(transition, TypeFilterChar):
            if panes.set_parent(transition.pane, None):
                self.cascade.run()
            panes.append_filter_text(transition.pane, transition.char)
        elif isinstance(transition, ExecuteSelection):
            self._execute(transition)
        else:
            raise TypeError(f"unsupported transition: {transition!r}")
        self._settle()

    def _drill_out(self, pane: PaneIndex) -> None:
        current = self.state.panes[pane].parent_id
        if current is None:
            return
        if self.panes.pop_parent(pane):
            return
        lookup = (pane, current)
        if lookup in self._pending_parent_lookups:
            return
        self._pending_parent_lookups.add(lookup)
        source = self.source
        self._calls.submit((PARENT_LOOKUP, pane, current), lambda: source.get_parent(current))

    def _execute(self, transition: ExecuteSelection) -> None:
        if self.execute_pending:
            logger.debug("execute already in flight; ignoring {}", transition)
            return
        self.execute_pending = True
        source = self.source
        logger.info(
            "execute: direct={} action={} indirect={}",
            transition.direct_id,
            transition.action_id,
            transition.indirect_id,
        )
        self._calls.submit(
            (EXECUTE, transition),
            lambda: source.execute(transition.direct_id, transition.action_id, transition.indirect_id),
        )

    # --- background completions

    def poll(self) -> bool:
        """Apply finished fetches and calls; returns whether anything changed."""
        changed = bool(self.cache.drain_results())
        for result in self._calls.drain():
            changed |= self._apply_call_result(result)
        if changed:
            self._settle()
        if self.status_message and self._clock() >= self.status_message_until:
            self.status_message = ""
            self.status_message_until = 0.0
            self.dirty = True
            changed = True
        return changed

    def _apply_call_result(self, result: BackgroundResult) -> bool:
        kind = result.tag[0]
        if kind == PARENT_LOOKUP:
            _, pane, lookup_from = result.tag
            return self._apply_parent_lookup(pane, lookup_from, result)
        if kind == EXECUTE:
            return self._apply_execute_result(result)
        logger.warning("unknown background result: {}", result.tag)
        return False

    def _apply_parent_lookup(self, pane: PaneIndex, lookup_from: str, result: BackgroundResult) -> bool:
        self._pending_parent_lookups.discard((pane, lookup_from))
        if self.state.panes[pane].parent_id != lookup_from:
            logger.debug("discarding parent lookup for {}: pane moved on", lookup_from)
            return False
        if result.error is not None:
            logger.warning("parent lookup failed for {}: {}", lookup_from, result.error)
            self.set_status_message(f"Cannot go up: {result.error}")
            return True
        return self.panes.set_parent(pane, result.value)

    def _apply_execute_result(self, result: BackgroundResult) -> bool:
        self.execute_pending = False
        if result.error is not None:
            outcome = ExecuteResult.failure(str(result.error) or type(result.error).__name__)
        elif isinstance(result.value, ExecuteResult):
            outcome = result.value
        else:
            outcome = ExecuteResult.success()

        if outcome.ok:
            logger.info("execute succeeded")
            self.window.hide()
            if self.policy.reset_after_execute:
                self.reset()
            return True

        logger.warning("execute failed: {}", outcome.message)
        self.set_status_message(f"Execute failed: {outcome.message}")
        if self.policy.hide_on_failure:
            self.window.hide()
        return True

    # --- commands

    def set_status_message(self, message: str) -> None:
        self.status_message = message
        self.status_message_until = self._clock() + STATUS_MESSAGE_SECONDS
        self.dirty = True

    def open_parent(self, pane: PaneIndex, parent_id: str | None) -> None:
        """Show ``parent_id``'s children in ``pane`` without known ancestry."""
        self.panes.set_parent(pane, parent_id)
        self._settle()

    def refresh(self) -> None:
        """Refetch every list the panes currently show."""
        for pane in PaneIndex:
            key = self.query_key(pane)
            if key is not None:
                self.cache.invalidate(key)
        self._settle()

    def reset(self) -> None:
        """Return to the start-of-process navigation state."""
        self.panes.reset()
        self.cascade.reset_observation()
        self._pending_parent_lookups.clear()
        self._settle()

    def _settle(self) -> None:
        self.cascade.run()
        for pane in PaneIndex:
            key = self.query_key(pane)
            if key is not None:
                self.cache.ensure(key)
        self._resize_window()
        self.dirty = True

    def _resize_window(self) -> None:
        size = window_size_for(self.should_show_indirect(), len(self.filtered(self.state.active_pane)))
        if size == self._window_size:
            return
        self._window_size = size
        self.window.resize(size)


__all__ = [
    "ExecutePolicy",
    "Navigator",
    "STATUS_MESSAGE_SECONDS",
]
