"""Candidate filtering used by every pane."""

from .fuzzy import filter_candidates, fuzzy_score, rank_candidate, substring_index

__all__ = [
    "filter_candidates",
    "fuzzy_score",
    "rank_candidate",
    "substring_index",
]
