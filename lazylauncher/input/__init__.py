"""Input-layer public API for key decoding and routing."""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .key_router import (
    ClearFilter,
    DrillIn,
    DrillOut,
    ExecuteSelection,
    FocusPane,
    KeyRouter,
    RouterContext,
    SelectChild,
    Transition,
    TypeFilterChar,
)
from .keys import KeyEvent
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "ClearFilter",
    "DrillIn",
    "DrillOut",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "ExecuteSelection",
    "FocusPane",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyEvent",
    "KeyRouter",
    "RouterContext",
    "SelectChild",
    "Transition",
    "TypeFilterChar",
    "read_key",
]
