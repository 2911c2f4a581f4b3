"""Observer registry fanning client events out to subscribers.

Subscribers are plain callables ``(event_name, payload)``. A failing
subscriber is logged and skipped so it cannot break delivery for the others or
for the per-call callback.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from lib_loggly.application.ports.observer import LogObserver

LOGGER = logging.getLogger(__name__)


class ObserverRegistry:
    """Thread-safe list of :class:`LogObserver` callables.

    Examples
    --------
    >>> seen = []
    >>> registry = ObserverRegistry()
    >>> unsubscribe = registry.subscribe(lambda name, payload: seen.append((name, payload)))
    >>> registry.emit("log", {"result": {"response": "ok"}})
    >>> unsubscribe()
    >>> registry.emit("log", {"result": None})
    >>> seen
    [('log', {'result': {'response': 'ok'}})]
    """

    def __init__(self) -> None:
        self._observers: list[LogObserver] = []
        self._lock = threading.Lock()

    def subscribe(self, observer: LogObserver) -> Callable[[], None]:
        """Register ``observer`` and return a callable removing it again."""

        if not callable(observer):
            raise TypeError("observer must be callable")
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        """Deliver ``event`` to every subscriber registered at call time."""

        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                observer(event, payload)
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Observer raised while handling %r; continuing", event, exc_info=exc)


__all__ = ["ObserverRegistry"]
