"""Filesystem-backed catalog built from folder presets.

The catalog root is the union of every preset folder's children, each preset
carrying its own declarative filter. Below the root, items are plain
directory listings. Candidate ids are absolute paths.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .actions import BUILTIN_ACTIONS, FOLDER, ActionSpec
from .source import CatalogError, IconKind
from .types import Candidate, ExecuteResult

APPLICATION_SUFFIXES = (".app", ".desktop")


@dataclass(frozen=True)
class FolderPreset:
    """A folder whose children join the catalog root, plus its filter."""

    path: Path
    hide_hidden: bool = True
    applications_only: bool = False

    def accepts(self, entry: Path) -> bool:
        if self.hide_hidden and is_hidden(entry):
            return False
        if self.applications_only and not is_application(entry):
            return False
        return True


def is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def is_application(path: Path) -> bool:
    return path.suffix.lower() in APPLICATION_SUFFIXES


def collapse_home(path: Path, home: Path) -> str:
    """Render ``path`` with the home folder shortened to ``~``."""
    try:
        relative = path.relative_to(home)
    except ValueError:
        return str(path)
    if not relative.parts:
        return "~"
    return str(Path("~") / relative)


def _safe_is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def _scan(directory: Path) -> list[Path]:
    """List ``directory`` with folders first, then case-insensitive name order."""
    with os.scandir(directory) as entries:
        children = [Path(entry.path) for entry in entries]
    children.sort(key=lambda child: (not _safe_is_dir(child), child.name.casefold()))
    return children


class FolderCatalogSource:
    """``CatalogSource`` over local folders and the built-in actions."""

    def __init__(
        self,
        presets: Iterable[FolderPreset],
        *,
        show_hidden: bool = False,
        actions: Iterable[ActionSpec] = BUILTIN_ACTIONS,
        home: Path | None = None,
    ) -> None:
        self.presets = [
            FolderPreset(
                path=preset.path.expanduser().absolute(),
                hide_hidden=preset.hide_hidden,
                applications_only=preset.applications_only,
            )
            for preset in presets
        ]
        self.show_hidden = show_hidden
        self.actions = {action.id: action for action in actions}
        self.home = (home if home is not None else Path.home()).absolute()
        self._preset_paths = {preset.path for preset in self.presets}

    def _candidate(self, path: Path) -> Candidate:
        is_dir = _safe_is_dir(path)
        return Candidate(
            id=str(path),
            name=path.name,
            detail=collapse_home(path.parent, self.home),
            has_children=is_dir and not is_application(path),
            icon_ref=self.icon_url(str(path), "item"),
        )

    def _root_children(self) -> list[Candidate]:
        seen: set[str] = set()
        out: list[Candidate] = []
        for preset in self.presets:
            try:
                entries = _scan(preset.path)
            except OSError as exc:
                logger.warning("skipping preset {}: {}", preset.path, exc)
                continue
            for entry in entries:
                if not preset.accepts(entry) or str(entry) in seen:
                    continue
                seen.add(str(entry))
                out.append(self._candidate(entry))
        return out

    def list_children(self, parent_id: str | None) -> list[Candidate]:
        if parent_id is None:
            return self._root_children()
        directory = Path(parent_id)
        try:
            entries = _scan(directory)
        except OSError as exc:
            raise CatalogError(f"cannot list {directory}: {exc.strerror or exc}") from exc
        return [
            self._candidate(entry)
            for entry in entries
            if self.show_hidden or not is_hidden(entry)
        ]

    def _existing_item(self, item_id: str) -> Path:
        path = Path(item_id)
        if not path.exists():
            raise CatalogError(f"no such item: {item_id}")
        return path

    def _action_candidate(self, action: ActionSpec) -> Candidate:
        return Candidate(
            id=action.id,
            name=action.name,
            detail=action.description,
            indirect_type_count=len(action.indirect_types),
            icon_ref=self.icon_url(action.id, "action"),
        )

    def list_actions(self, item_id: str) -> list[Candidate]:
        path = self._existing_item(item_id)
        return [
            self._action_candidate(action)
            for action in self.actions.values()
            if action.applies_to(path)
        ]

    def list_indirects(self, item_id: str, action_id: str) -> list[Candidate]:
        action = self.actions.get(action_id)
        if action is None:
            raise CatalogError(f"unknown action: {action_id}")
        if FOLDER not in action.indirect_types:
            return []
        return [
            candidate
            for candidate in self._root_children()
            if candidate.has_children and candidate.id != item_id
        ]

    def get_parent(self, candidate_id: str) -> str | None:
        path = Path(candidate_id)
        parent = path.parent
        if parent == path or parent in self._preset_paths:
            return None
        return str(parent)

    def execute(self, direct_id: str, action_id: str, indirect_id: str | None) -> ExecuteResult:
        action = self.actions.get(action_id)
        if action is None:
            return ExecuteResult.failure(f"unknown action: {action_id}")
        if action.indirect_types and indirect_id is None:
            return ExecuteResult.failure(f"{action.name} needs a destination")
        target = Path(direct_id)
        indirect = Path(indirect_id) if indirect_id is not None else None
        try:
            if not target.exists():
                raise CatalogError(f"no such item: {direct_id}")
            action.run(target, indirect)
        except (CatalogError, OSError) as exc:
            return ExecuteResult.failure(str(exc))
        return ExecuteResult.success(f"{action.name}: {target.name}")

    def icon_url(self, candidate_id: str, kind: IconKind) -> str:
        if kind == "action":
            return f"action:{candidate_id}"
        return Path(candidate_id).absolute().as_uri()
