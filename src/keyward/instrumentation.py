"""Scoped timing of key operations, reported to the session log."""
from __future__ import annotations

import time
from types import TracebackType
from typing import Optional, Type

from .context import SessionContext


class Task:
    def __init__(self, instrumentation: "TaskInstrumentation", name: str) -> None:
        self._instrumentation = instrumentation
        self.name = name
        self._start = time.perf_counter()
        self._stopped = False
        instrumentation._emit(f"start: {name}", task=name, phase="start")

    def stop(self) -> float:
        """Log the end line once and return the elapsed milliseconds."""
        elapsed_ms = (time.perf_counter() - self._start) * 1000
        if not self._stopped:
            self._stopped = True
            self._instrumentation._emit(
                f"end: {self.name} ({elapsed_ms:.3f}ms)", task=self.name, phase="end", duration_ms=elapsed_ms
            )
        return elapsed_ms

    def __enter__(self) -> "Task":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.stop()


class TaskInstrumentation:
    """Emits ``start: <name>`` / ``end: <name> (<elapsed>ms)`` around operations.

    Disabling it removes the lines without changing any return value.
    """

    def __init__(self, context: SessionContext, *, enabled: bool = True) -> None:
        self._context = context
        self.enabled = enabled

    def task(self, name: str) -> Task:
        return Task(self, name)

    def _emit(self, line: str, **fields: object) -> None:
        if self.enabled:
            self._context.log(line, **fields)


__all__ = ["Task", "TaskInstrumentation"]
