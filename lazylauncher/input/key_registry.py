"""Key-token dispatch table used by the router."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

R = TypeVar("R")


@dataclass(frozen=True)
class KeyComboBinding(Generic[R]):
    """One or more key tokens sharing a single handler."""

    combos: tuple[str, ...]
    handler: Callable[..., R]


class KeyComboRegistry(Generic[R]):
    """Exact-match map from key token to handler."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[..., R]] = {}

    def register_bindings(self, *bindings: KeyComboBinding[R]) -> KeyComboRegistry[R]:
        """Register ``bindings``; later bindings win for repeated tokens."""
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
        return self

    def handles(self, key: str) -> bool:
        return key in self._handlers

    def dispatch(self, key: str, *args: object) -> R | None:
        """Invoke the handler bound to ``key`` with ``args``; ``None`` if unbound."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler(*args)
