"""Pure filter/rank function for pane candidate lists.

Substring hits always rank above subsequence ("fuzzy") hits, and hits in
``name`` rank above hits in ``detail``. Ties keep fetch order.
"""

from __future__ import annotations

from ..catalog.types import Candidate

NAME_SUBSTRING_BASE = 40_000
DETAIL_SUBSTRING_BASE = 30_000
NAME_FUZZY_BASE = 20_000
DETAIL_FUZZY_BASE = 10_000


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``query`` as an in-order subsequence of ``candidate``.

    Returns ``None`` when some query character cannot be matched. Consecutive
    runs and word-boundary hits score higher; long candidates are penalised.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate_folded[idx - 1] in "/_- .":
            score += 35
        prev_idx = idx

    score -= len(candidate_folded) // 5
    return score


def substring_index(query: str, candidate: str) -> int | None:
    """Return the case-insensitive index of ``query`` in ``candidate``."""
    if not query:
        return 0
    idx = candidate.casefold().find(query.casefold())
    if idx < 0:
        return None
    return idx


def _substring_rank(base: int, query: str, text: str) -> int | None:
    idx = substring_index(query, text)
    if idx is None:
        return None
    return base - min(idx * 50, 5_000) - min(len(text), 1_000)


def _fuzzy_rank(base: int, query: str, text: str) -> int | None:
    score = fuzzy_score(query, text)
    if score is None:
        return None
    return base + max(-2_000, min(2_000, score))


def rank_candidate(query: str, candidate: Candidate) -> int | None:
    """Return the best relevance rank of ``candidate`` for ``query``."""
    ranks = (
        _substring_rank(NAME_SUBSTRING_BASE, query, candidate.name),
        _substring_rank(DETAIL_SUBSTRING_BASE, query, candidate.detail) if candidate.detail else None,
        _fuzzy_rank(NAME_FUZZY_BASE, query, candidate.name),
        _fuzzy_rank(DETAIL_FUZZY_BASE, query, candidate.detail) if candidate.detail else None,
    )
    matched = [rank for rank in ranks if rank is not None]
    if not matched:
        return None
    return max(matched)


def filter_candidates(candidates: list[Candidate], text: str) -> list[Candidate]:
    """Return the candidates matching ``text``, most relevant first.

    Empty ``text`` returns the list in fetch order. Unmatched input yields an
    empty list.
    """
    if not text:
        return list(candidates)

    scored: list[tuple[int, int, Candidate]] = []
    for idx, candidate in enumerate(candidates):
        rank = rank_candidate(text, candidate)
        if rank is None:
            continue
        scored.append((rank, idx, candidate))
    scored.sort(key=lambda item: (-item[0], item[1]))
    return [candidate for _, _, candidate in scored]
