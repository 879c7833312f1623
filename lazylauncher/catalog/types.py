"""Value types shared by the catalog source and the navigator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class PaneIndex(IntEnum):
    """The three cascading panes, in tab order."""

    DIRECT = 0
    ACTION = 1
    INDIRECT = 2


@dataclass(frozen=True)
class Candidate:
    """One selectable row in a pane list.

    ``id`` is unique within the list it was fetched in, not across panes.
    """

    id: str
    name: str
    detail: str = ""
    has_children: bool = False
    indirect_type_count: int = 0
    icon_ref: str = ""


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of one execute call."""

    ok: bool
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> ExecuteResult:
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, message: str) -> ExecuteResult:
        return cls(ok=False, message=message)


def candidate_ids(candidates: list[Candidate]) -> list[str]:
    """Return ids of ``candidates`` in list order."""
    return [candidate.id for candidate in candidates]


def find_candidate(candidates: list[Candidate] | None, candidate_id: str | None) -> Candidate | None:
    """Return the candidate with ``candidate_id`` or ``None``."""
    if not candidates or candidate_id is None:
        return None
    for candidate in candidates:
        if candidate.id == candidate_id:
            return candidate
    return None
