"""Command-line front door for lazylauncher.

Parses CLI options, merges them over the persisted config, builds the folder
catalog, and runs the interactive navigator in the terminal.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from loguru import logger

from .catalog.folders import FolderCatalogSource, FolderPreset
from .catalog.types import PaneIndex
from .render import render_navigator
from .runtime.config import DEFAULT_CONFIG_PATH, LauncherConfig, PresetConfig, load_launcher_config
from .runtime.logs import DEFAULT_LOG_PATH, configure_logging
from .runtime.navigator import ExecutePolicy, Navigator
from .runtime.window import TerminalWindow
from .ui_theme import DEFAULT_THEME, PLAIN_THEME


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazylauncher",
        description="Keyboard-driven launcher: pick an item, an action, and optionally a target.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config JSON.")
    parser.add_argument(
        "--preset",
        action="append",
        default=None,
        metavar="DIR",
        help="Folder whose contents appear at the top level (repeatable; replaces configured presets).",
    )
    parser.add_argument("--show-hidden", action="store_true", help="Show dotfiles when browsing folders.")
    parser.add_argument(
        "--reset-after-execute",
        action="store_true",
        help="Return to the top level after a successful action.",
    )
    parser.add_argument(
        "--hide-on-failure",
        action="store_true",
        help="Close the launcher even when the action failed.",
    )
    parser.add_argument("--start-in", metavar="ID", default=None, help="Open the item pane inside this folder.")
    parser.add_argument("--no-color", action="store_true", help="Disable colors.")
    parser.add_argument("--log-file", type=Path, default=None, help=f"Log file (default: {DEFAULT_LOG_PATH}).")
    parser.add_argument("--verbose", action="store_true", help="Log debug details.")
    return parser


def apply_cli_overrides(config: LauncherConfig, args: argparse.Namespace) -> LauncherConfig:
    """Return ``config`` with explicit command-line flags layered on top."""
    if args.preset:
        config = replace(
            config,
            presets=tuple(PresetConfig(path=Path(raw).expanduser()) for raw in args.preset),
        )
    if args.show_hidden:
        config = replace(config, show_hidden=True)
    if args.reset_after_execute:
        config = replace(config, reset_after_execute=True)
    if args.hide_on_failure:
        config = replace(config, hide_on_failure=True)
    return config


def build_source(config: LauncherConfig) -> FolderCatalogSource:
    presets = [
        FolderPreset(
            path=preset.path,
            hide_hidden=preset.hide_hidden,
            applications_only=preset.applications_only,
        )
        for preset in config.presets
    ]
    return FolderCatalogSource(presets, show_hidden=config.show_hidden)


def build_navigator(
    source: FolderCatalogSource,
    config: LauncherConfig,
    window: TerminalWindow,
    start_in: str | None = None,
) -> Navigator:
    navigator = Navigator(
        source,
        window,
        policy=ExecutePolicy(
            reset_after_execute=config.reset_after_execute,
            hide_on_failure=config.hide_on_failure,
        ),
        stale_after_seconds=config.stale_after_seconds,
    )
    if start_in is not None:
        navigator.open_parent(PaneIndex.DIRECT, start_in)
    return navigator


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the launcher until an action runs or ESC."""
    args = build_parser().parse_args(argv)

    config = load_launcher_config(args.config if args.config is not None else DEFAULT_CONFIG_PATH)
    config = apply_cli_overrides(config, args)
    if not config.presets:
        raise SystemExit("No folder presets configured; pass --preset DIR.")
    if args.start_in is not None and not Path(args.start_in).is_dir():
        raise SystemExit(f"Folder not found: {args.start_in}")
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("lazylauncher needs an interactive terminal.")

    configure_logging(args.log_file if args.log_file is not None else DEFAULT_LOG_PATH, verbose=args.verbose)
    logger.info("starting with {} preset(s)", len(config.presets))

    from .runtime.loop import run_main_loop
    from .runtime.terminal import TerminalController

    window = TerminalWindow()
    start_in = str(Path(args.start_in).absolute()) if args.start_in is not None else None
    navigator = build_navigator(build_source(config), config, window, start_in=start_in)
    theme = PLAIN_THEME if args.no_color else DEFAULT_THEME
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    run_main_loop(
        navigator,
        terminal,
        window,
        stdin_fd,
        render=lambda nav, columns, rows: render_navigator(nav, columns, rows, theme),
    )
