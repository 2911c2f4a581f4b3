"""Public package surface of the Loggly ingestion client.

``create_client`` builds a :class:`LogglyClient`; the pipeline building blocks
(:func:`prepare_payload`, :func:`resolve_tags`, :func:`build_dispatch`) are
exported for callers that assemble requests themselves.
"""

from __future__ import annotations

from . import __init__conf__
from .application.use_cases import build_dispatch, prepare_payload, resolve_effective_tags, stringify
from .domain import (
    BufferOptions,
    ClientConfig,
    ConfigurationError,
    DeliveryBufferFullError,
    DeliveryError,
    DeliveryRequest,
    DeliveryResponse,
    DeliveryStatusError,
    DeliveryTransportError,
    FormatMode,
    LogglyError,
    PreparedPayload,
    TagTransport,
    UnspecifiedDeliveryError,
    is_valid_tag,
    resolve_tags,
)
from .runtime import LogglyClient, create_client, summary_info

__version__ = __init__conf__.version

__all__ = [
    "BufferOptions",
    "ClientConfig",
    "ConfigurationError",
    "DeliveryBufferFullError",
    "DeliveryError",
    "DeliveryRequest",
    "DeliveryResponse",
    "DeliveryStatusError",
    "DeliveryTransportError",
    "FormatMode",
    "LogglyClient",
    "LogglyError",
    "PreparedPayload",
    "TagTransport",
    "UnspecifiedDeliveryError",
    "__version__",
    "build_dispatch",
    "create_client",
    "is_valid_tag",
    "prepare_payload",
    "resolve_effective_tags",
    "resolve_tags",
    "stringify",
    "summary_info",
]
