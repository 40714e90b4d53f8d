from __future__ import annotations

import logging
import signal
import threading
from types import FrameType, TracebackType
from typing import Any, Callable, Protocol

from prmerge.engine.errors import WorkflowInterrupted

logger = logging.getLogger(__name__)

_TERMINATING_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


class EventEmitter(Protocol):
    def emit(self, event_type: str, **data: Any) -> None: ...


class CleanupGuard:
    """Stack of undo actions unwound in reverse order when the guarded block exits.

    Used as a context manager around a merge run. The unwind happens on normal
    return, on any exception (including ``KeyboardInterrupt``) and on SIGTERM or
    SIGHUP (terminal closed), which are turned into :class:`WorkflowInterrupted`
    while the guard is active.
    Each action is attempted even if an earlier one fails.
    """

    def __init__(self, emitter: EventEmitter | None = None) -> None:
        self._emitter = emitter
        self._actions: list[tuple[str, Callable[[], None]]] = []
        self._previous_handlers: dict[int, Any] = {}

    def register(self, description: str, action: Callable[[], None]) -> None:
        self._actions.append((description, action))

    @property
    def pending(self) -> list[str]:
        return [description for description, _ in self._actions]

    def unwind(self) -> None:
        while self._actions:
            description, action = self._actions.pop()
            try:
                action()
            except Exception:
                logger.warning("Cleanup action failed: %s", description, exc_info=True)

    def narrate(self, description: str) -> None:
        if self._emitter is not None:
            self._emitter.emit("CleanupActionRun", description=description)

    def __enter__(self) -> CleanupGuard:
        if threading.current_thread() is threading.main_thread():
            for signum in _TERMINATING_SIGNALS:
                self._previous_handlers[signum] = signal.signal(signum, self._on_signal)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.unwind()
        finally:
            for signum, handler in self._previous_handlers.items():
                if handler is not None:
                    signal.signal(signum, handler)
            self._previous_handlers.clear()

    def _on_signal(self, signum: int, frame: FrameType | None) -> None:
        raise WorkflowInterrupted(f"Merge interrupted by {signal.Signals(signum).name}")
