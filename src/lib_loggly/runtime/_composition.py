"""Transport composition for the client façade.

Translate a :class:`ClientConfig` into the default transport stack: an
httpx transport, optionally behind the buffering worker.
"""

from __future__ import annotations

from lib_loggly.adapters import BufferedDeliveryAdapter, HttpxDeliveryAdapter
from lib_loggly.application.ports import DeliveryPort
from lib_loggly.domain import ClientConfig


def build_delivery(config: ClientConfig, *, buffered: bool = True) -> DeliveryPort:
    """Return the transport a client uses when none is injected.

    ``buffered=True`` puts :class:`BufferedDeliveryAdapter` (capacity from
    ``config.buffer_options.size``) in front of :class:`HttpxDeliveryAdapter`
    so ``log`` returns before the HTTP round-trip completes.
    """

    http = HttpxDeliveryAdapter(
        proxy=config.proxy,
        network_errors_on_console=config.network_errors_on_console,
    )
    if not buffered:
        return http
    return BufferedDeliveryAdapter(http, maxsize=config.buffer_options.size)


__all__ = ["build_delivery"]
