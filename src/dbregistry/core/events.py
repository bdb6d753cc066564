"""Minimal synchronous event emitter."""

from __future__ import annotations

import threading
from typing import Callable, Generic, List, TypeVar

from dbregistry.core.utils.logger import log_error

T = TypeVar("T")

Listener = Callable[[T], None]


class EventEmitter(Generic[T]):
    """
    Fan-out of a single event to registered listeners.

    Listeners run synchronously on the thread that fires the event. A
    listener that raises is logged and skipped so one broken subscriber
    cannot starve the others.
    """

    def __init__(self, name: str = "event"):
        self.name = name
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    __call__ = subscribe

    def fire(self, payload: T = None) -> None:  # type: ignore[assignment]
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(payload)
            except Exception as e:
                log_error("EVENTS", f"Listener for {self.name} failed: {e}", exception=e)

    def dispose(self) -> None:
        with self._lock:
            self._listeners.clear()
