"""Port for subscribers interested in client-wide delivery events."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

LOG_EVENT = "log"
TRUNCATED_EVENT = "truncated"


@runtime_checkable
class LogObserver(Protocol):
    """Receive ``(event_name, payload)`` notifications.

    ``"log"`` carries ``{"result": <parsed acknowledgment>}``; ``"truncated"``
    carries ``{"index", "original_bytes", "max_bytes"}``.
    """

    def __call__(self, event: str, payload: dict[str, Any]) -> None: ...


__all__ = ["LOG_EVENT", "LogObserver", "TRUNCATED_EVENT"]
