"""Client façade shipping log messages to Loggly.

Purpose
-------
Expose the public ``log`` operation and wire the domain/application pieces
(payload codec, tag resolution, dispatch builder, completion handling) to a
delivery transport.

Contents
--------
* :class:`LogglyClient` – per-account client with ``log``, ``subscribe``,
  ``customer``, ``api_url`` and ``close``.
* :func:`create_client` – option-mapping constructor.

System Role
-----------
Composition root for one client instance: configuration is frozen at
construction, each ``log`` call runs the pipeline synchronously and hands the
request to the transport, whose completion arrives through the callback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from types import TracebackType
from typing import Any

from lib_loggly.application.ports import TRUNCATED_EVENT, DeliveryPort, LogObserver
from lib_loggly.application.use_cases import (
    ObserverRegistry,
    build_dispatch,
    create_completion_handler,
    prepare_payload,
    resolve_effective_tags,
)
from lib_loggly.application.use_cases.complete_delivery import ResultCallback
from lib_loggly.domain import ClientConfig, DeliveryRequest, PreparedPayload

from ._composition import build_delivery

LOGGER = logging.getLogger(__name__)


class LogglyClient:
    """Prepare and deliver log events for one Loggly account.

    Why
    ---
    Keeps every decision that shapes the wire request (truncation, envelope,
    tags, endpoint) in one synchronous pass so transports only move bytes.

    Parameters
    ----------
    config:
        Frozen :class:`ClientConfig`.
    delivery:
        Transport implementing :class:`DeliveryPort`; defaults to the httpx
        transport built by :func:`build_delivery`.
    buffered:
        When no ``delivery`` is injected, choose between the buffered
        (background worker) and the inline httpx transport.

    Examples
    --------
    >>> from lib_loggly.domain import DeliveryResponse
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.requests = []
    ...     def deliver(self, request, on_complete):
    ...         self.requests.append(request)
    ...         on_complete(None, DeliveryResponse(200, "OK", '{"response": "ok"}'))
    ...     def close(self):
    ...         pass
    >>> transport = Recorder()
    >>> client = create_client({"subdomain": "acme", "token": "tok"}, delivery=transport)
    >>> client.log("hello") is client
    True
    >>> transport.requests[0].body, transport.requests[0].headers["content-type"]
    ('hello', 'text/plain')
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        delivery: DeliveryPort | None = None,
        buffered: bool = True,
    ) -> None:
        self.config = config
        self._observers = ObserverRegistry()
        self._delivery = delivery if delivery is not None else build_delivery(config, buffered=buffered)

    @property
    def delivery(self) -> DeliveryPort:
        return self._delivery

    def subscribe(self, observer: LogObserver) -> Callable[[], None]:
        """Register ``observer`` for ``"log"`` and ``"truncated"`` events.

        Returns a callable that removes the subscription.
        """

        return self._observers.subscribe(observer)

    def prepare(self, message: Any) -> tuple[PreparedPayload, ...]:
        """Run the payload codec for ``message``.

        In bulk mode a list or tuple is split into one payload per element, in
        order; otherwise the whole value is a single event. Every truncated
        payload is announced through the ``"truncated"`` observer event.
        """

        if self.config.is_bulk and isinstance(message, (list, tuple)):
            items: Sequence[Any] = message
        else:
            items = (message,)
        payloads = tuple(
            prepare_payload(item, self.config.format_mode, self.config.max_event_bytes) for item in items
        )
        for index, payload in enumerate(payloads):
            if payload.truncated:
                self._observers.emit(
                    TRUNCATED_EVENT,
                    {
                        "index": index,
                        "original_bytes": payload.original_bytes,
                        "max_bytes": self.config.max_event_bytes,
                    },
                )
        return payloads

    def build_request(self, message: Any, tags: Any = None) -> DeliveryRequest:
        """Return the request ``log`` would send, without sending it."""

        payloads = self.prepare(message)
        effective_tags = resolve_effective_tags(self.config, tags)
        return build_dispatch(payloads, effective_tags, self.config)

    def log(
        self,
        message: Any,
        tags: Any = None,
        callback: ResultCallback | None = None,
    ) -> "LogglyClient":
        """Ship ``message`` to the ingestion endpoint.

        Parameters
        ----------
        message:
            Text, bytes, or any JSON-like value. In bulk mode a list/tuple
            ships as several events in one request; an empty one sends nothing
            and completes the callback with ``(None, None)``.
        tags:
            Optional tag or tags extending the configured defaults. A callable
            passed here without ``callback`` is treated as the callback.
        callback:
            Optional ``callback(error, result)`` invoked once the transport
            completes; ``result`` is the decoded acknowledgment.

        Returns
        -------
        LogglyClient
            ``self`` so calls can be chained.
        """

        if callback is None and callable(tags):
            callback, tags = tags, None
        request = self.build_request(message, tags)
        if request.is_bulk and not request.body:
            LOGGER.debug("Empty bulk message; nothing to deliver")
            if callback is not None:
                callback(None, None)
            return self
        handler = create_completion_handler(callback, notify=self._observers.emit)
        self._delivery.deliver(request, handler)
        return self

    def api_url(self, *parts: str) -> str:
        """Join ``parts`` onto the account API root.

        Examples
        --------
        >>> client = create_client({"subdomain": "acme", "token": "tok"}, buffered=False)
        >>> client.api_url("customer")
        'https://acme.loggly.com/apiv2/customer'
        >>> client.close()
        """

        return "/".join([self.config.api_url, *parts])

    def customer(self, callback: ResultCallback) -> None:
        """Fetch the account information with the configured credentials."""

        request = DeliveryRequest(
            uri=self.api_url("customer"),
            method="GET",
            headers={"accept": "application/json", "user-agent": self.config.user_agent},
            auth=self.config.auth,
        )
        self._delivery.deliver(request, create_completion_handler(callback))

    def close(self) -> None:
        """Flush pending deliveries and release the transport."""

        self._delivery.close()

    def __enter__(self) -> "LogglyClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def create_client(
    options: Mapping[str, Any] | None = None,
    *,
    delivery: DeliveryPort | None = None,
    buffered: bool = True,
    **overrides: Any,
) -> LogglyClient:
    """Create a :class:`LogglyClient` from an options mapping and keyword overrides.

    Recognised options: ``subdomain`` and ``token`` (required), ``host``,
    ``json``, ``auth``, ``proxy``, ``use_tag_header``, ``is_bulk``,
    ``buffer_options``, ``tags``, ``app_name``, ``max_event_bytes``,
    ``network_errors_on_console``, ``api`` (camelCase spellings accepted).

    Raises
    ------
    ConfigurationError
        When ``subdomain`` or ``token`` is missing.
    """

    merged = dict(options or {})
    merged.update(overrides)
    return LogglyClient(ClientConfig.from_options(merged), delivery=delivery, buffered=buffered)


__all__ = ["LogglyClient", "create_client"]
