"""Catalog data model, query interface, and the folder-backed source."""

from .folders import FolderCatalogSource, FolderPreset
from .source import CatalogError, CatalogSource
from .types import Candidate, ExecuteResult, PaneIndex, find_candidate

__all__ = [
    "Candidate",
    "CatalogError",
    "CatalogSource",
    "ExecuteResult",
    "FolderCatalogSource",
    "FolderPreset",
    "PaneIndex",
    "find_candidate",
]
