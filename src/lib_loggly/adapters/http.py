"""httpx-backed transport implementing :class:`DeliveryPort`.

Purpose
-------
Execute :class:`DeliveryRequest` objects over HTTPS and convert the outcome
into the ``(error, response)`` continuation expected by the application layer.

Contents
--------
* :class:`HttpxDeliveryAdapter` – synchronous transport around ``httpx.Client``.

System Role
-----------
Outermost adapter. Proxy and timeout settings live here; retries, pooling
policy and rate limiting are left to httpx defaults.
"""

from __future__ import annotations

import logging

import httpx

from lib_loggly.application.ports.delivery import CompletionCallback, DeliveryPort
from lib_loggly.domain.errors import DeliveryTransportError
from lib_loggly.domain.request import DeliveryRequest, DeliveryResponse

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class HttpxDeliveryAdapter(DeliveryPort):
    """Send requests with :class:`httpx.Client` and report the response.

    Examples
    --------
    >>> transport = httpx.MockTransport(lambda request: httpx.Response(200, text='{"response": "ok"}'))
    >>> adapter = HttpxDeliveryAdapter(transport=transport)
    >>> seen = []
    >>> adapter.deliver(DeliveryRequest(uri="https://logs-01.loggly.com/inputs/tok", body="hi"), lambda err, res: seen.append(res.status_code))
    >>> adapter.close()
    >>> seen
    [200]
    """

    def __init__(
        self,
        *,
        client: httpx.Client | None = None,
        proxy: str | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        network_errors_on_console: bool = False,
    ) -> None:
        """Wrap ``client`` or build one from ``proxy``/``timeout``/``transport``.

        A client passed in by the caller stays open on :meth:`close`; a client
        built here is closed with the adapter.
        """

        if client is None:
            client = httpx.Client(proxy=proxy, timeout=timeout, transport=transport)
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client
        self._network_errors_on_console = network_errors_on_console

    def deliver(self, request: DeliveryRequest, on_complete: CompletionCallback) -> None:
        """Perform ``request`` and call ``on_complete`` with the outcome.

        Network failures and header values httpx cannot encode both complete
        with :class:`DeliveryTransportError`.
        """

        try:
            response = self._client.request(
                request.method,
                request.uri,
                headers=dict(request.headers),
                content=request.content() if request.body is not None else None,
                auth=request.auth,
            )
        except (httpx.HTTPError, UnicodeEncodeError) as exc:
            if self._network_errors_on_console:
                LOGGER.warning("Network error while sending to %s: %s", request.uri, exc)
            failure = DeliveryTransportError(f"{type(exc).__name__}: {exc}")
            failure.__cause__ = exc
            on_complete(failure, None)
            return
        on_complete(
            None,
            DeliveryResponse(
                status_code=response.status_code,
                reason_phrase=response.reason_phrase,
                body=response.text,
            ),
        )

    def close(self) -> None:
        """Close the underlying client when this adapter created it."""

        if self._owns_client:
            self._client.close()


__all__ = ["DEFAULT_TIMEOUT", "HttpxDeliveryAdapter"]
