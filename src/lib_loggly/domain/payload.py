"""Prepared payload value object produced by the payload codec."""

from __future__ import annotations

from dataclasses import dataclass

from .request import WIRE_ERRORS


@dataclass(slots=True, frozen=True)
class PreparedPayload:
    """Wire-ready body plus truncation bookkeeping.

    Attributes
    ----------
    message:
        Text measured against the size limit, truncated when it was too long.
    truncated:
        ``True`` when ``message`` was cut at the byte limit.
    body:
        Final request body after the format-specific envelope pass.
    original_bytes:
        UTF-8 length of the text before truncation.
    """

    message: str
    truncated: bool
    body: str
    original_bytes: int

    @property
    def byte_length(self) -> int:
        return len(self.message.encode("utf-8", WIRE_ERRORS))


__all__ = ["PreparedPayload"]
