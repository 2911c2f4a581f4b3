"""Domain entities and value objects used by the preparation pipeline."""

from __future__ import annotations

from .config import BufferOptions, ClientConfig, FormatMode, TagTransport
from .errors import (
    ConfigurationError,
    DeliveryBufferFullError,
    DeliveryError,
    DeliveryStatusError,
    DeliveryTransportError,
    LogglyError,
    UnspecifiedDeliveryError,
)
from .message import LogMessage, ScalarMessage, StructuredMessage, TextMessage, to_log_message
from .payload import PreparedPayload
from .request import DeliveryRequest, DeliveryResponse
from .tags import TagSet, is_valid_tag, resolve_tags

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
    "LogMessage",
    "LogglyError",
    "PreparedPayload",
    "ScalarMessage",
    "StructuredMessage",
    "TagSet",
    "TagTransport",
    "TextMessage",
    "UnspecifiedDeliveryError",
    "is_valid_tag",
    "resolve_tags",
    "to_log_message",
]
