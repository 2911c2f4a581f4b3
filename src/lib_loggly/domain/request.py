"""Request and response value objects exchanged with delivery transports.

Purpose
-------
Describe an HTTP exchange without binding the application layer to any HTTP
library. Transports translate :class:`DeliveryRequest` into real I/O and hand
back a :class:`DeliveryResponse`.

Contents
--------
* :class:`DeliveryRequest` – destination, method, headers and body.
* :class:`DeliveryResponse` – status line and decoded body text.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Union

RequestBody = Union[str, tuple[str, ...]]

BULK_SEPARATOR = "\n"

# Truncated text may end in the escaped bytes of a split character.
WIRE_ERRORS = "surrogateescape"


@dataclass(slots=True, frozen=True)
class DeliveryRequest:
    """Fully assembled request description.

    ``body`` is a single string for one event or a tuple of pre-serialised
    event bodies for the bulk endpoint; order is preserved.

    Examples
    --------
    >>> req = DeliveryRequest(uri="https://h/bulk/t", headers={"content-type": "text/plain"}, body=("a", "b"))
    >>> req.is_bulk, req.content()
    (True, b'a\\nb')
    >>> req.headers["content-type"]
    'text/plain'
    """

    uri: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: RequestBody | None = None
    method: str = "POST"
    auth: tuple[str, str] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        if isinstance(self.body, list):
            object.__setattr__(self, "body", tuple(self.body))

    @property
    def is_bulk(self) -> bool:
        return isinstance(self.body, tuple)

    def content(self) -> bytes:
        """Return the wire bytes, joining bulk bodies with newlines."""

        if self.body is None:
            return b""
        if isinstance(self.body, tuple):
            return BULK_SEPARATOR.join(self.body).encode("utf-8", WIRE_ERRORS)
        return self.body.encode("utf-8", WIRE_ERRORS)


@dataclass(slots=True, frozen=True)
class DeliveryResponse:
    """Status line and body text returned by the ingestion service."""

    status_code: int
    reason_phrase: str = ""
    body: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code == 200


__all__ = ["BULK_SEPARATOR", "DeliveryRequest", "DeliveryResponse", "RequestBody", "WIRE_ERRORS"]
