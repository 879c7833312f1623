"""Built-in actions offered for filesystem items."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from urllib.parse import quote

from .source import CatalogError

FOLDER = "folder"


def _always(_path: Path) -> bool:
    return True


@dataclass(frozen=True)
class ActionSpec:
    """One action: its row text, the indirect types it needs, and how it runs."""

    id: str
    name: str
    description: str
    run: Callable[[Path, Path | None], None]
    indirect_types: tuple[str, ...] = ()
    applies_to: Callable[[Path], bool] = _always


def opener_command() -> str:
    return "open" if sys.platform == "darwin" else "xdg-open"


def _launch_detached(target: Path) -> None:
    opener = opener_command()
    if shutil.which(opener) is None:
        raise CatalogError(f"{opener} is not available")
    subprocess.Popen(
        [opener, str(target)],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def open_item(target: Path, _indirect: Path | None) -> None:
    _launch_detached(target)


def reveal_item(target: Path, _indirect: Path | None) -> None:
    _launch_detached(target.parent)


def _require_folder(indirect: Path | None) -> Path:
    if indirect is None:
        raise CatalogError("a destination folder is required")
    if not indirect.is_dir():
        raise CatalogError(f"not a folder: {indirect}")
    return indirect


def _destination(target: Path, folder: Path) -> Path:
    destination = folder / target.name
    if destination.exists():
        raise CatalogError(f"already exists: {destination}")
    try:
        destination.resolve().relative_to(target.resolve())
    except ValueError:
        return destination
    raise CatalogError(f"cannot place {target.name} inside itself")


def move_item(target: Path, indirect: Path | None) -> None:
    destination = _destination(target, _require_folder(indirect))
    shutil.move(str(target), str(destination))


def copy_item(target: Path, indirect: Path | None) -> None:
    destination = _destination(target, _require_folder(indirect))
    if target.is_dir():
        shutil.copytree(target, destination)
    else:
        shutil.copy2(target, destination)


def trash_directory() -> Path:
    if sys.platform == "darwin":
        return Path.home() / ".Trash"
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(data_home) / "Trash"


def _unique_name(folder: Path, name: str) -> str:
    candidate = name
    counter = 2
    while (folder / candidate).exists():
        candidate = f"{name}.{counter}"
        counter += 1
    return candidate


def trash_item(target: Path, _indirect: Path | None) -> None:
    """Move ``target`` into the user trash (freedesktop layout off macOS)."""
    trash = trash_directory()
    if sys.platform == "darwin":
        trash.mkdir(parents=True, exist_ok=True)
        shutil.move(str(target), str(trash / _unique_name(trash, target.name)))
        return

    files_dir = trash / "files"
    info_dir = trash / "info"
    files_dir.mkdir(parents=True, exist_ok=True)
    info_dir.mkdir(parents=True, exist_ok=True)
    name = _unique_name(files_dir, target.name)
    info = (
        "[Trash Info]\n"
        f"Path={quote(str(target.resolve()))}\n"
        f"DeletionDate={datetime.now().strftime('%Y-%m-%dT%H:%M:%S')}\n"
    )
    (info_dir / f"{name}.trashinfo").write_text(info, encoding="utf-8")
    shutil.move(str(target), str(files_dir / name))


BUILTIN_ACTIONS: tuple[ActionSpec, ...] = (
    ActionSpec(id="open", name="Open", description="Open with the default application", run=open_item),
    ActionSpec(id="reveal", name="Reveal", description="Open the containing folder", run=reveal_item),
    ActionSpec(
        id="move-to",
        name="Move To",
        description="Move into another folder",
        run=move_item,
        indirect_types=(FOLDER,),
    ),
    ActionSpec(
        id="copy-to",
        name="Copy To",
        description="Copy into another folder",
        run=copy_item,
        indirect_types=(FOLDER,),
    ),
    ActionSpec(id="move-to-trash", name="Move to Trash", description="Move to the trash", run=trash_item),
)
