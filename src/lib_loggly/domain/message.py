"""Tagged union describing the value a caller hands to ``log``.

The kind of message is decided once, at the call boundary, so the payload
codec works on a closed set of variants instead of re-inspecting types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(slots=True, frozen=True)
class TextMessage:
    """Free text shipped as-is (or wrapped in ``{"message": ...}`` for JSON)."""

    text: str


@dataclass(slots=True, frozen=True)
class ScalarMessage:
    """Number, boolean, or ``None``; JSON mode ships it as ``{"message": value}``."""

    value: Union[int, float, bool, None]


@dataclass(slots=True, frozen=True)
class StructuredMessage:
    """Mapping, sequence, or other object serialised to a JSON document."""

    value: Any


LogMessage = Union[TextMessage, ScalarMessage, StructuredMessage]

_SCALARS = (int, float, bool, type(None))


def to_log_message(value: Any) -> LogMessage:
    """Classify ``value`` into a :data:`LogMessage` variant.

    Examples
    --------
    >>> to_log_message("hello")
    TextMessage(text='hello')
    >>> to_log_message({"a": 1})
    StructuredMessage(value={'a': 1})
    >>> to_log_message(5)
    ScalarMessage(value=5)
    >>> to_log_message(b"caf\\xc3\\xa9")
    TextMessage(text='café')
    """

    if isinstance(value, (TextMessage, ScalarMessage, StructuredMessage)):
        return value
    if isinstance(value, str):
        return TextMessage(value)
    if isinstance(value, (bytes, bytearray)):
        return TextMessage(bytes(value).decode("utf-8", errors="replace"))
    if isinstance(value, _SCALARS):
        return ScalarMessage(value)
    return StructuredMessage(value)


__all__ = ["LogMessage", "ScalarMessage", "StructuredMessage", "TextMessage", "to_log_message"]
