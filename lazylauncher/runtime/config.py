"""Persistent JSON config helpers.

Stores folder presets and execute policy flags. All access is defensive:
malformed or missing config falls back to defaults field by field.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "lazylauncher"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class PresetConfig:
    """One folder whose children appear at the catalog root."""

    path: Path
    hide_hidden: bool = True
    applications_only: bool = False


@dataclass(frozen=True)
class LauncherConfig:
    presets: tuple[PresetConfig, ...] = field(default_factory=tuple)
    show_hidden: bool = False
    reset_after_execute: bool = False
    hide_on_failure: bool = False
    stale_after_seconds: float | None = None


def _application_folders() -> list[Path]:
    if sys.platform == "darwin":
        return [Path("/Applications"), Path("/System/Applications")]
    return [
        Path("/usr/share/applications"),
        Path.home() / ".local" / "share" / "applications",
    ]


def default_presets() -> tuple[PresetConfig, ...]:
    """Home, Desktop, and Downloads plus existing application folders."""
    home = Path.home()
    presets = [
        PresetConfig(path=home),
        PresetConfig(path=home / "Desktop"),
        PresetConfig(path=home / "Downloads"),
    ]
    presets.extend(
        PresetConfig(path=folder, applications_only=True)
        for folder in _application_folders()
        if folder.is_dir()
    )
    return tuple(preset for preset in presets if preset.path.is_dir())


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], config_path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _bool_field(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _parse_preset(raw: object) -> PresetConfig | None:
    """Accept either a path string or ``{"path": ..., ...}``."""
    if isinstance(raw, str):
        raw = {"path": raw}
    if not isinstance(raw, dict):
        return None
    raw_path = raw.get("path")
    if not isinstance(raw_path, str) or not raw_path.strip():
        return None
    return PresetConfig(
        path=Path(raw_path).expanduser(),
        hide_hidden=_bool_field(raw, "hide_hidden", True),
        applications_only=_bool_field(raw, "applications_only", False),
    )


def _parse_stale_after(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0:
        return None
    return float(value)


def parse_launcher_config(data: dict[str, object]) -> LauncherConfig:
    """Build a ``LauncherConfig`` from decoded JSON, ignoring invalid fields."""
    raw_presets = data.get("presets")
    if isinstance(raw_presets, list):
        presets = tuple(preset for preset in map(_parse_preset, raw_presets) if preset is not None)
    else:
        presets = default_presets()
    return LauncherConfig(
        presets=presets,
        show_hidden=_bool_field(data, "show_hidden", False),
        reset_after_execute=_bool_field(data, "reset_after_execute", False),
        hide_on_failure=_bool_field(data, "hide_on_failure", False),
        stale_after_seconds=_parse_stale_after(data.get("stale_after_seconds")),
    )


def load_launcher_config(config_path: Path = DEFAULT_CONFIG_PATH) -> LauncherConfig:
    return parse_launcher_config(load_config(config_path))


def serialize_launcher_config(config: LauncherConfig) -> dict[str, object]:
    return {
        "presets": [
            {
                "path": str(preset.path),
                "hide_hidden": preset.hide_hidden,
                "applications_only": preset.applications_only,
            }
            for preset in config.presets
        ],
        "show_hidden": config.show_hidden,
        "reset_after_execute": config.reset_after_execute,
        "hide_on_failure": config.hide_on_failure,
        "stale_after_seconds": config.stale_after_seconds,
    }


def save_launcher_config(config: LauncherConfig, config_path: Path = DEFAULT_CONFIG_PATH) -> None:
    save_config(serialize_launcher_config(config), config_path)
