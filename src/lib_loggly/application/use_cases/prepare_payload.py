"""Payload codec turning caller messages into size-bounded request bodies.

Purpose
-------
Serialise one log message into the text the ingestion endpoint receives and
enforce the per-event byte limit before the body leaves the process.

Contents
--------
* :func:`stringify` – JSON encoder that never raises (cycle-safe fallback).
* :func:`truncate_text` – UTF-8 byte-boundary truncation.
* :func:`prepare_payload` – the full preparation pass.

System Role
-----------
Application-layer use case called by the client façade for every message (once
per element in bulk mode). Pure: no I/O, no shared state.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Set as AbstractSet
from typing import Any

from lib_loggly.domain.config import DEFAULT_MAX_EVENT_BYTES, FormatMode
from lib_loggly.domain.message import ScalarMessage, StructuredMessage, TextMessage, to_log_message
from lib_loggly.domain.payload import PreparedPayload
from lib_loggly.domain.request import WIRE_ERRORS

logger = logging.getLogger(__name__)

_SEPARATORS = (",", ":")
_MAX_DEPTH = 256
_JSON_SCALARS = (str, int, float, bool, type(None))


def stringify(value: Any) -> str:
    """Serialise ``value`` to compact JSON without ever raising.

    The primary encoder is :func:`json.dumps`. When it rejects the value
    (circular references, unsupported types, runaway nesting) the value is
    rebuilt by :func:`_decycle`, which replaces self-references with a
    ``"[Circular ~...]"`` marker and renders unknown objects with :func:`str`.

    Examples
    --------
    >>> stringify({"a": 1, "b": [True, None]})
    '{"a":1,"b":[true,null]}'
    >>> loop = {"name": "root"}
    >>> loop["self"] = loop
    >>> stringify(loop)
    '{"name":"root","self":"[Circular ~]"}'
    """

    try:
        return json.dumps(value, separators=_SEPARATORS, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError) as exc:
        logger.debug("Primary JSON encoding failed, using cycle-safe encoder", exc_info=exc)
    return json.dumps(_decycle(value, [], []), separators=_SEPARATORS, ensure_ascii=False)


def _decycle(value: Any, path: list[str], ancestors: list[tuple[int, int]]) -> Any:
    """Return a JSON-safe copy of ``value``.

    ``ancestors`` holds ``(id(container), depth)`` pairs for the containers on
    the current branch; revisiting one of them yields the circular marker that
    points at the ancestor's path.
    """

    if isinstance(value, _JSON_SCALARS):
        return value
    if len(path) >= _MAX_DEPTH:
        return "[Max depth]"
    for ancestor_id, depth in ancestors:
        if ancestor_id == id(value):
            return "[Circular ~" + "".join(f".{key}" for key in path[:depth]) + "]"
    branch = ancestors + [(id(value), len(path))]
    if isinstance(value, Mapping):
        return {str(key): _decycle(item, path + [str(key)], branch) for key, item in value.items()}
    if isinstance(value, (list, tuple, AbstractSet)):
        return [_decycle(item, path + [str(index)], branch) for index, item in enumerate(value)]
    return str(value)


def truncate_text(text: str, max_bytes: int) -> tuple[str, bool, int]:
    """Cut ``text`` at ``max_bytes`` UTF-8 bytes.

    Returns ``(text, truncated, original_bytes)``. The cut lands exactly on
    ``max_bytes``; the bytes of a multi-byte character split by the cut are kept
    as surrogate escapes (:data:`WIRE_ERRORS`) so they reach the wire unchanged.

    Examples
    --------
    >>> truncate_text("abcdef", 4)
    ('abcd', True, 6)
    >>> truncate_text("abc", 4)
    ('abc', False, 3)
    >>> truncate_text("aé", 2)
    ('a\\udcc3', True, 3)
    """

    if max_bytes <= 0:
        raise ValueError("max_bytes must be positive")
    encoded = text.encode("utf-8", WIRE_ERRORS)
    size = len(encoded)
    if size <= max_bytes:
        return text, False, size
    return encoded[:max_bytes].decode("utf-8", WIRE_ERRORS), True, size


def prepare_payload(
    message: Any,
    format_mode: FormatMode = FormatMode.PLAIN,
    max_bytes: int = DEFAULT_MAX_EVENT_BYTES,
) -> PreparedPayload:
    """Serialise, truncate, and wrap ``message`` for the configured format.

    Why
    ---
    The ingestion service rejects events above its size limit. Cutting the
    text locally keeps the event (flagged as truncated) instead of losing it.

    Parameters
    ----------
    message:
        Caller value; resolved into a text, scalar, or structured message first.
    format_mode:
        :class:`FormatMode` of the client. Structured mode wraps text in a
        ``{"message": ...}`` envelope; plain mode ships text verbatim.
    max_bytes:
        Byte limit applied to the serialised text.

    Returns
    -------
    PreparedPayload
        ``message`` (measured text), ``truncated`` flag, final ``body``, and the
        pre-truncation byte count.

    Examples
    --------
    >>> prepare_payload("hello").body
    'hello'
    >>> prepare_payload("hello", FormatMode.STRUCTURED).body
    '{"message":"hello"}'
    >>> prepare_payload({"a": 1}, FormatMode.STRUCTURED).body
    '{"a":1}'
    >>> prepare_payload(5, FormatMode.STRUCTURED).body
    '{"message":5}'
    >>> prepare_payload("x" * 10, max_bytes=4).truncated
    True
    """

    log_message = to_log_message(message)
    text = log_message.text if isinstance(log_message, TextMessage) else stringify(log_message.value)
    measured, truncated, original_bytes = truncate_text(text, max_bytes)

    if format_mode is not FormatMode.STRUCTURED:
        body = measured
    elif isinstance(log_message, StructuredMessage) and not truncated:
        body = measured
    elif isinstance(log_message, ScalarMessage) and not truncated:
        body = stringify({"message": log_message.value})
    else:
        # A cut JSON document is no longer valid JSON; ship it as text instead.
        body = stringify({"message": measured})

    return PreparedPayload(message=measured, truncated=truncated, body=body, original_bytes=original_bytes)


__all__ = ["prepare_payload", "stringify", "truncate_text"]
