"""Completion handling for delivery round-trips.

Purpose
-------
Translate the transport's ``(error, response)`` continuation into the
client's error-first callback contract and the ``"log"`` observer event.

Contents
--------
* :data:`ResultCallback` – caller-facing ``(error, result)`` callback type.
* :func:`create_completion_handler` – factory returning the transport
  continuation for one request.

System Role
-----------
Application-layer use case. Every failure reaches the callback as a typed
:class:`~lib_loggly.domain.errors.DeliveryError` (or the transport's own
exception) so callers handle one taxonomy; non-200 answers are additionally
logged because callers without a callback would otherwise never see them.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, Optional

from lib_loggly.application.ports.delivery import CompletionCallback
from lib_loggly.application.ports.observer import LOG_EVENT
from lib_loggly.domain.errors import DeliveryError, DeliveryStatusError, DeliveryTransportError, UnspecifiedDeliveryError
from lib_loggly.domain.request import DeliveryResponse

logger = logging.getLogger(__name__)

ResultCallback = Callable[[Optional[BaseException], Any], None]
Notify = Callable[[str, dict[str, Any]], None]


def create_completion_handler(
    callback: ResultCallback | None = None,
    *,
    notify: Notify | None = None,
) -> CompletionCallback:
    """Build the continuation a transport invokes when a request finishes.

    Parameters
    ----------
    callback:
        Optional error-first callback of the ``log`` call. Exceptions it raises
        propagate to the transport.
    notify:
        Optional observer fan-out receiving ``("log", {"result": ...})`` after
        a successfully decoded acknowledgment.

    Returns
    -------
    CompletionCallback
        Callable accepting ``(error, response)``.

    Examples
    --------
    >>> outcome = []
    >>> handler = create_completion_handler(lambda err, res: outcome.append((err, res)))
    >>> handler(None, DeliveryResponse(200, "OK", '{"response": "ok"}'))
    >>> outcome
    [(None, {'response': 'ok'})]
    """

    def finish(error: BaseException | None, result: Any) -> None:
        if callback is not None:
            callback(error, result)
        elif error is not None:
            logger.warning("Loggly delivery failed: %s", error)

    def on_complete(error: BaseException | None, response: DeliveryResponse | None) -> None:
        if error is not None:
            finish(error, None)
            return
        if response is None:
            finish(DeliveryTransportError("transport completed without a response"), None)
            return
        if response.status_code != 200:
            failure = DeliveryStatusError(response.status_code, response.reason_phrase)
            logger.warning("%s", failure)
            if callback is not None:
                callback(failure, None)
            return
        if not response.body:
            finish(None, None)
            return
        try:
            result = json.loads(response.body)
        except ValueError as exc:
            parse_failure: DeliveryError = UnspecifiedDeliveryError(exc)
            parse_failure.__cause__ = exc
            finish(parse_failure, None)
            return
        if notify is not None:
            notify(LOG_EVENT, {"result": result})
        finish(None, result)

    return on_complete


__all__ = ["ResultCallback", "create_completion_handler"]
