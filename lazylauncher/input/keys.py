"""Normalized key events produced by the terminal reader."""

from __future__ import annotations

from dataclasses import dataclass

TAB = "TAB"
ENTER = "ENTER"
BACKSPACE = "BACKSPACE"
ESC = "ESC"
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"


@dataclass(frozen=True)
class KeyEvent:
    """One key press: a named key token or a single character, plus modifiers."""

    key: str
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    @property
    def has_command_modifier(self) -> bool:
        return self.ctrl or self.alt or self.meta

    @property
    def is_character(self) -> bool:
        return len(self.key) == 1
