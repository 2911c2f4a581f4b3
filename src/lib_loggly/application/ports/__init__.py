"""Protocols the application layer depends on."""

from __future__ import annotations

from .delivery import CompletionCallback, DeliveryPort
from .observer import LOG_EVENT, TRUNCATED_EVENT, LogObserver

__all__ = ["CompletionCallback", "DeliveryPort", "LOG_EVENT", "LogObserver", "TRUNCATED_EVENT"]
