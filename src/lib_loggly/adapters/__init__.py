"""Concrete transports implementing :class:`~lib_loggly.application.ports.DeliveryPort`."""

from __future__ import annotations

from .buffer import BufferedDeliveryAdapter
from .http import HttpxDeliveryAdapter

__all__ = ["BufferedDeliveryAdapter", "HttpxDeliveryAdapter"]
