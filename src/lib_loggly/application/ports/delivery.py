"""Delivery port describing the transport boundary.

Purpose
-------
Define the narrow contract the client uses to hand off assembled requests.
Network I/O, buffering, TLS and proxies live behind it.

Contents
--------
* :data:`CompletionCallback` – error-first continuation invoked by transports.
* :class:`DeliveryPort` – runtime-checkable protocol with ``deliver``/``close``.

System Role
-----------
Application-layer abstraction implemented by
:class:`~lib_loggly.adapters.http.HttpxDeliveryAdapter` and
:class:`~lib_loggly.adapters.buffer.BufferedDeliveryAdapter`; tests plug in
simple fakes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional, Protocol, runtime_checkable

from lib_loggly.domain.request import DeliveryRequest, DeliveryResponse

CompletionCallback = Callable[[Optional[BaseException], Optional[DeliveryResponse]], None]


@runtime_checkable
class DeliveryPort(Protocol):
    """Ship a :class:`DeliveryRequest` and report the outcome.

    Examples
    --------
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.sent = []
    ...     def deliver(self, request, on_complete):
    ...         self.sent.append(request.uri)
    ...         on_complete(None, DeliveryResponse(200, "OK", '{"response": "ok"}'))
    ...     def close(self):
    ...         pass
    >>> isinstance(Recorder(), DeliveryPort)
    True
    """

    def deliver(self, request: DeliveryRequest, on_complete: CompletionCallback) -> None:
        """Send ``request`` and invoke ``on_complete(error, response)`` exactly once."""

    def close(self) -> None:
        """Release transport resources, flushing pending requests."""


__all__ = ["CompletionCallback", "DeliveryPort"]
