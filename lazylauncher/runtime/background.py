"""Background job runner whose results are drained on the UI thread."""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Protocol


@dataclass(frozen=True)
class BackgroundResult:
    """Completed job payload, or the exception it raised."""

    tag: Hashable
    value: object = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class JobRunner(Protocol):
    def submit(self, tag: Hashable, job: Callable[[], object]) -> None: ...

    def drain(self) -> list[BackgroundResult]: ...


class BackgroundRunner:
    """Run each submitted job on its own daemon thread.

    Workers only ever touch the result queue; callers apply results from
    ``drain()`` on their own thread.
    """

    def __init__(self, name: str = "lazylauncher-job") -> None:
        self._name = name
        self._results: Queue[BackgroundResult] = Queue()
        self._pending = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        with self._lock:
            return self._pending

    def _worker(self, tag: Hashable, job: Callable[[], object]) -> None:
        try:
            value = job()
        except Exception as exc:
            result = BackgroundResult(tag=tag, error=exc)
        else:
            result = BackgroundResult(tag=tag, value=value)
        with self._lock:
            self._pending -= 1
        self._results.put(result)

    def submit(self, tag: Hashable, job: Callable[[], object]) -> None:
        """Start ``job`` in the background; its result is tagged with ``tag``."""
        with self._lock:
            self._pending += 1
        worker = threading.Thread(
            target=self._worker,
            args=(tag, job),
            name=self._name,
            daemon=True,
        )
        worker.start()

    def drain(self) -> list[BackgroundResult]:
        """Drain all completed job results."""
        out: list[BackgroundResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "BackgroundResult",
    "BackgroundRunner",
    "JobRunner",
]
