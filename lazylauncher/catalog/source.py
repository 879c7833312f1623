"""Query interface the navigator consumes from its data source.

Everything list-returning is an idempotent read. ``execute`` is the only
mutating call. The catalog root is represented by ``None`` wherever a parent
id is expected, so it can never collide with a real id.
"""

from __future__ import annotations

from typing import Literal, Protocol

from .types import Candidate, ExecuteResult

IconKind = Literal["item", "action"]


class CatalogError(RuntimeError):
    """Raised by a source when a listing or lookup cannot be served."""


class CatalogSource(Protocol):
    def list_children(self, parent_id: str | None) -> list[Candidate]:
        """Children of ``parent_id``; ``None`` lists the catalog root."""
        ...

    def list_actions(self, item_id: str) -> list[Candidate]:
        """Actions applicable to one item."""
        ...

    def list_indirects(self, item_id: str, action_id: str) -> list[Candidate]:
        """Root indirect choices for an (item, action) pair."""
        ...

    def get_parent(self, candidate_id: str) -> str | None:
        """Parent id of ``candidate_id``; ``None`` when it sits at the root."""
        ...

    def execute(self, direct_id: str, action_id: str, indirect_id: str | None) -> ExecuteResult:
        """Run ``action_id`` on ``direct_id`` with an optional indirect."""
        ...

    def icon_url(self, candidate_id: str, kind: IconKind) -> str:
        """Icon locator used by renderers only."""
        ...
