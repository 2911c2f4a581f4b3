"""Error taxonomy shared by the preparation pipeline and the transports.

Purpose
-------
Give callers one exception family to catch regardless of whether a failure
originated at construction time, while decoding the acknowledgment, or inside
the HTTP transport.

Contents
--------
* :class:`LogglyError` – common base class.
* :class:`ConfigurationError` – invalid or missing client options.
* :class:`DeliveryError` and its subclasses – failures reported through the
  error-first completion callback.

System Role
-----------
Domain layer; adapters wrap their library-specific exceptions into these types
so the application layer never depends on ``httpx``.
"""

from __future__ import annotations


UNSPECIFIED_ERROR_PREFIX = "Unspecified error from Loggly: "


class LogglyError(Exception):
    """Base class for every error raised or reported by :mod:`lib_loggly`."""


class ConfigurationError(LogglyError, ValueError):
    """Raised synchronously when client options are missing or malformed."""


class DeliveryError(LogglyError):
    """A delivery did not produce a usable acknowledgment."""


class DeliveryStatusError(DeliveryError):
    """The ingestion endpoint answered with a status other than 200.

    Examples
    --------
    >>> err = DeliveryStatusError(403, "Forbidden")
    >>> str(err)
    'Error Code- 403 "Forbidden"'
    >>> err.status_code
    403
    """

    def __init__(self, status_code: int, reason_phrase: str) -> None:
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        super().__init__(f'Error Code- {status_code} "{reason_phrase}"')


class UnspecifiedDeliveryError(DeliveryError):
    """The acknowledgment body could not be decoded."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"{UNSPECIFIED_ERROR_PREFIX}{cause}")


class DeliveryTransportError(DeliveryError):
    """The transport failed before any response arrived (DNS, TLS, timeout)."""


class DeliveryBufferFullError(DeliveryError):
    """A buffering transport discarded the request before sending it."""


__all__ = [
    "ConfigurationError",
    "DeliveryBufferFullError",
    "DeliveryError",
    "DeliveryStatusError",
    "DeliveryTransportError",
    "LogglyError",
    "UNSPECIFIED_ERROR_PREFIX",
    "UnspecifiedDeliveryError",
]
