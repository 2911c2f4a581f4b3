"""Immutable client configuration.

Purpose
-------
Capture everything a :class:`~lib_loggly.runtime.LogglyClient` needs to shape
requests, validated once at construction and never mutated afterwards.

Contents
--------
* :class:`FormatMode` – structured (JSON) vs. plain text bodies.
* :class:`TagTransport` – header vs. URL path tag attachment.
* :class:`BufferOptions` – settings forwarded opaquely to buffering transports.
* :class:`ClientConfig` – frozen aggregate plus derived endpoint URLs.

System Role
-----------
Domain layer. The dispatch builder reads it; transports receive the parts they
need (proxy, buffer options) from the client façade.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .. import __init__conf__
from .errors import ConfigurationError
from .tags import TagSet, resolve_tags

DEFAULT_HOST = "logs-01.loggly.com"
DEFAULT_API = "apiv2"
DEFAULT_MAX_EVENT_BYTES = 1000 * 1000
DEFAULT_BUFFER_SIZE = 500
DEFAULT_RETRIES_IN_MILLISECONDS = 30 * 1000


class FormatMode(Enum):
    """Serialization mode for request bodies."""

    STRUCTURED = "structured"
    PLAIN = "plain"

    @property
    def content_type(self) -> str:
        return "application/json" if self is FormatMode.STRUCTURED else "text/plain"


class TagTransport(Enum):
    """Where resolved tags travel on the wire."""

    HEADER = "header"
    URL_PATH = "url-path"


@dataclass(slots=True, frozen=True)
class BufferOptions:
    """Buffering hints consumed by :class:`~lib_loggly.adapters.buffer.BufferedDeliveryAdapter`.

    ``size`` bounds the number of pending requests; ``retries_in_milliseconds``
    is carried for transports that implement their own retry window.
    """

    size: int = DEFAULT_BUFFER_SIZE
    retries_in_milliseconds: int = DEFAULT_RETRIES_IN_MILLISECONDS

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ConfigurationError("buffer_options.size must be positive")
        if self.retries_in_milliseconds < 0:
            raise ConfigurationError("buffer_options.retries_in_milliseconds must not be negative")

    @classmethod
    def from_value(cls, value: "BufferOptions | Mapping[str, Any] | None") -> "BufferOptions":
        """Coerce ``None``, a mapping, or an instance into :class:`BufferOptions`.

        Examples
        --------
        >>> BufferOptions.from_value({"size": 10, "retriesInMilliSeconds": 5})
        BufferOptions(size=10, retries_in_milliseconds=5)
        >>> BufferOptions.from_value(None).size
        500
        """

        if value is None:
            return cls()
        if isinstance(value, BufferOptions):
            return value
        retries = value.get(
            "retries_in_milliseconds",
            value.get("retriesInMilliSeconds", value.get("retriesInMilliseconds", DEFAULT_RETRIES_IN_MILLISECONDS)),
        )
        try:
            size = int(value.get("size", DEFAULT_BUFFER_SIZE))
            retries = int(retries)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid buffer options: {value!r}") from exc
        return cls(size=size, retries_in_milliseconds=retries)


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """Validated, immutable settings for one client instance.

    Attributes
    ----------
    subdomain:
        Account subdomain used for the account API (``<subdomain>.loggly.com``).
    token:
        Customer ingestion token routing events to the account.
    host:
        Ingestion host; defaults to ``logs-01.loggly.com``.
    format_mode:
        :class:`FormatMode` selecting JSON or plain-text bodies.
    default_tags:
        Tags already filtered through :func:`~lib_loggly.domain.tags.resolve_tags`.
    is_bulk:
        Ship to the bulk endpoint; sequences passed to ``log`` become one
        newline-delimited request.
    tag_transport:
        :class:`TagTransport` deciding between header and URL path tags.
    max_event_bytes:
        Upper bound for a single event's text, in UTF-8 bytes.
    auth:
        Optional ``(username, password)`` for the account API.
    proxy:
        Optional proxy URL forwarded to the HTTP transport.
    app_name:
        Optional value of the ``appName`` header.
    buffer_options:
        :class:`BufferOptions` forwarded to buffering transports.
    network_errors_on_console:
        Ask transports to log network failures at WARNING level.
    api:
        Account API version segment.
    """

    subdomain: str
    token: str
    host: str = DEFAULT_HOST
    format_mode: FormatMode = FormatMode.PLAIN
    default_tags: TagSet = ()
    is_bulk: bool = False
    tag_transport: TagTransport = TagTransport.HEADER
    max_event_bytes: int = DEFAULT_MAX_EVENT_BYTES
    auth: tuple[str, str] | None = None
    proxy: str | None = None
    app_name: str | None = None
    buffer_options: BufferOptions = field(default_factory=BufferOptions)
    network_errors_on_console: bool = False
    api: str = DEFAULT_API

    def __post_init__(self) -> None:
        if not self.subdomain or not self.token:
            raise ConfigurationError("options.subdomain and options.token are required.")
        if self.max_event_bytes <= 0:
            raise ConfigurationError("max_event_bytes must be positive")
        object.__setattr__(self, "default_tags", resolve_tags(self.default_tags))

    @property
    def is_structured(self) -> bool:
        return self.format_mode is FormatMode.STRUCTURED

    @property
    def use_tag_header(self) -> bool:
        return self.tag_transport is TagTransport.HEADER

    @property
    def content_type(self) -> str:
        return self.format_mode.content_type

    @property
    def user_agent(self) -> str:
        return f"{__init__conf__.name} {__init__conf__.version}"

    @property
    def base_url(self) -> str:
        return f"https://{self.host}"

    @property
    def log_url(self) -> str:
        """Single-event endpoint.

        Examples
        --------
        >>> ClientConfig(subdomain="acme", token="tok").log_url
        'https://logs-01.loggly.com/inputs/tok'
        """

        return "/".join([self.base_url, "inputs", self.token])

    @property
    def bulk_url(self) -> str:
        return "/".join([self.base_url, "bulk", self.token])

    @property
    def api_url(self) -> str:
        """Account API root.

        Examples
        --------
        >>> ClientConfig(subdomain="acme", token="tok").api_url
        'https://acme.loggly.com/apiv2'
        """

        return f"https://{self.subdomain}.loggly.com/{self.api}"

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None) -> "ClientConfig":
        """Build a config from an options mapping.

        Accepts the snake_case keyword names as well as the camelCase keys used
        by existing Loggly client configurations (``useTagHeader``, ``isBulk``,
        ``bufferOptions``, ``appName``, ``maxEventBytes``,
        ``networkErrorsOnConsole``).

        Examples
        --------
        >>> cfg = ClientConfig.from_options({"subdomain": "acme", "token": "tok", "json": True, "useTagHeader": False})
        >>> cfg.format_mode.value, cfg.tag_transport.value
        ('structured', 'url-path')
        >>> ClientConfig.from_options({"token": "tok"})
        Traceback (most recent call last):
        ...
        lib_loggly.domain.errors.ConfigurationError: options.subdomain and options.token are required.
        """

        if not options or not options.get("subdomain") or not options.get("token"):
            raise ConfigurationError("options.subdomain and options.token are required.")

        def pick(snake: str, camel: str, default: Any) -> Any:
            if snake in options:
                return options[snake]
            return options.get(camel, default)

        use_tag_header = pick("use_tag_header", "useTagHeader", True)
        max_event_bytes = pick("max_event_bytes", "maxEventBytes", DEFAULT_MAX_EVENT_BYTES)
        try:
            max_event_bytes = int(max_event_bytes)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"max_event_bytes must be an integer, got {max_event_bytes!r}") from exc

        return cls(
            subdomain=str(options["subdomain"]),
            token=str(options["token"]),
            host=options.get("host") or DEFAULT_HOST,
            format_mode=FormatMode.STRUCTURED if options.get("json") else FormatMode.PLAIN,
            default_tags=resolve_tags(options.get("tags")),
            is_bulk=bool(pick("is_bulk", "isBulk", False)),
            tag_transport=TagTransport.HEADER if use_tag_header else TagTransport.URL_PATH,
            max_event_bytes=max_event_bytes,
            auth=_coerce_auth(options.get("auth")),
            proxy=options.get("proxy") or None,
            app_name=pick("app_name", "appName", None) or None,
            buffer_options=BufferOptions.from_value(pick("buffer_options", "bufferOptions", None)),
            network_errors_on_console=bool(pick("network_errors_on_console", "networkErrorsOnConsole", False)),
            api=options.get("api") or DEFAULT_API,
        )


def _coerce_auth(value: Any) -> tuple[str, str] | None:
    """Normalise ``auth`` given as a tuple or a ``{username, password}`` mapping."""

    if value is None:
        return None
    if isinstance(value, Mapping):
        try:
            return str(value["username"]), str(value["password"])
        except KeyError as exc:
            raise ConfigurationError("auth requires 'username' and 'password'") from exc
    username, password = value
    return str(username), str(password)


__all__ = [
    "BufferOptions",
    "ClientConfig",
    "DEFAULT_HOST",
    "DEFAULT_MAX_EVENT_BYTES",
    "FormatMode",
    "TagTransport",
]
