"""Per-pane query cache with stale-while-revalidate reads.

Each pane owns its own namespace, so DIRECT and INDIRECT never share entries
even though both list children of a parent. At most one fetch per key is in
flight. Results are applied on the caller's thread in ``drain_results``.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from ..catalog.source import CatalogSource
from ..catalog.types import Candidate, PaneIndex
from .background import BackgroundRunner, JobRunner
from .panes import NavigatorState

CHILDREN = "children"
ACTIONS = "actions"
INDIRECTS = "indirects"


@dataclass(frozen=True)
class QueryKey:
    """Identity of one list fetch."""

    pane: PaneIndex
    kind: str
    args: tuple[str | None, ...]


@dataclass(frozen=True)
class QueryResult:
    """What a pane can show for a key right now."""

    data: list[Candidate] | None
    is_fetching: bool
    error: str | None = None


@dataclass
class CacheEntry:
    data: list[Candidate] | None = None
    error: str | None = None
    fetched_at: float | None = None
    generation: int = 0
    invalidated: bool = False


def query_key_for(state: NavigatorState, pane: PaneIndex, *, indirect_visible: bool) -> QueryKey | None:
    """Derive the key ``pane`` should be showing; ``None`` when disabled."""
    if pane == PaneIndex.DIRECT:
        return QueryKey(PaneIndex.DIRECT, CHILDREN, (state.panes[PaneIndex.DIRECT].parent_id,))
    if pane == PaneIndex.ACTION:
        direct_id = state.direct_child_id
        if direct_id is None:
            return None
        return QueryKey(PaneIndex.ACTION, ACTIONS, (direct_id,))
    if not indirect_visible:
        return None
    indirect_parent = state.panes[PaneIndex.INDIRECT].parent_id
    if indirect_parent is not None:
        return QueryKey(PaneIndex.INDIRECT, CHILDREN, (indirect_parent,))
    return QueryKey(PaneIndex.INDIRECT, INDIRECTS, (state.direct_child_id, state.action_child_id))


def load_query(source: CatalogSource, key: QueryKey) -> list[Candidate]:
    """Run the source call that answers ``key``."""
    if key.kind == CHILDREN:
        return list(source.list_children(key.args[0]))
    if key.kind == ACTIONS:
        (item_id,) = key.args
        return list(source.list_actions(item_id))
    if key.kind == INDIRECTS:
        item_id, action_id = key.args
        return list(source.list_indirects(item_id, action_id))
    raise ValueError(f"unknown query kind: {key.kind!r}")


def _error_message(exc: Exception) -> str:
    text = str(exc).strip()
    return text if text else type(exc).__name__


class QueryCache:
    """Cache of fetched candidate lists keyed by ``QueryKey``.

    ``stale_after_seconds`` of ``None`` keeps entries fresh forever; otherwise
    an older entry keeps serving its data while ``ensure`` refetches it.
    """

    def __init__(
        self,
        load: Callable[[QueryKey], list[Candidate]],
        *,
        runner: JobRunner | None = None,
        stale_after_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._load = load
        self._runner = runner if runner is not None else BackgroundRunner("lazylauncher-fetch")
        self._stale_after_seconds = stale_after_seconds
        self._clock = clock
        self._namespaces: dict[PaneIndex, dict[QueryKey, CacheEntry]] = {pane: {} for pane in PaneIndex}
        self._in_flight: dict[QueryKey, int] = {}

    def _entry(self, key: QueryKey) -> CacheEntry | None:
        return self._namespaces[key.pane].get(key)

    def _is_stale(self, entry: CacheEntry) -> bool:
        if entry.invalidated:
            return True
        if self._stale_after_seconds is None or entry.fetched_at is None:
            return False
        return self._clock() - entry.fetched_at >= self._stale_after_seconds

    def get(self, key: QueryKey) -> QueryResult:
        entry = self._entry(key)
        is_fetching = key in self._in_flight
        if entry is None:
            return QueryResult(data=None, is_fetching=is_fetching)
        return QueryResult(data=entry.data, is_fetching=is_fetching, error=entry.error)

    def peek(self, key: QueryKey | None) -> list[Candidate] | None:
        """Return cached data for ``key`` without scheduling anything."""
        if key is None:
            return None
        entry = self._entry(key)
        return entry.data if entry is not None else None

    def is_fetching(self, key: QueryKey) -> bool:
        return key in self._in_flight

    def ensure(self, key: QueryKey) -> bool:
        """Schedule a fetch for ``key`` when missing or stale.

        Returns ``True`` when a new fetch was started.
        """
        if key in self._in_flight:
            return False
        entry = self._entry(key)
        if entry is not None and entry.data is not None and not self._is_stale(entry):
            return False
        if entry is None:
            entry = CacheEntry()
            self._namespaces[key.pane][key] = entry

        generation = entry.generation
        self._in_flight[key] = generation
        load = self._load
        logger.debug("fetch scheduled: {} generation={}", key, generation)
        self._runner.submit(("query", key, generation), lambda: load(key))
        return True

    def invalidate(self, key: QueryKey | None = None) -> None:
        """Mark one key, or every key, for refetch.

        An answer already in flight is dropped on arrival and the key is fetched
        again for its new generation.
        """
        if key is None:
            entries = [entry for namespace in self._namespaces.values() for entry in namespace.values()]
        else:
            entry = self._entry(key)
            entries = [entry] if entry is not None else []
        for entry in entries:
            entry.generation += 1
            entry.invalidated = True

    def drain_results(self) -> list[QueryKey]:
        """Apply completed fetches and return the keys whose entries changed."""
        updated: list[QueryKey] = []
        for result in self._runner.drain():
            _, key, generation = result.tag
            if self._in_flight.get(key) == generation:
                del self._in_flight[key]
            entry = self._entry(key)
            if entry is None:
                continue
            if entry.generation != generation:
                logger.debug("discarding superseded fetch result: {}", key)
                self.ensure(key)
                continue
            entry.fetched_at = self._clock()
            entry.invalidated = False
            if result.error is not None:
                entry.data = []
                entry.error = _error_message(result.error)
                logger.warning("fetch failed for {}: {}", key, entry.error)
            else:
                entry.data = list(result.value)
                entry.error = None
            updated.append(key)
        return updated


__all__ = [
    "ACTIONS",
    "CHILDREN",
    "INDIRECTS",
    "QueryCache",
    "QueryKey",
    "QueryResult",
    "load_query",
    "query_key_for",
]
