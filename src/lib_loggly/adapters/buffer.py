"""Thread-based buffering wrapper around another :class:`DeliveryPort`.

Purpose
-------
Keep ``LogglyClient.log`` non-blocking: requests are queued and a background
worker hands them to the wrapped transport, whose completion then runs on the
worker thread.

Contents
--------
* :class:`BufferedDeliveryAdapter` - bounded queue plus worker thread.

System Role
-----------
Default transport composition of the client façade
(``BufferedDeliveryAdapter(HttpxDeliveryAdapter(...))``). The queue capacity
comes from :class:`~lib_loggly.domain.config.BufferOptions`.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Optional, Tuple

from lib_loggly.application.ports.delivery import CompletionCallback, DeliveryPort
from lib_loggly.domain.errors import DeliveryBufferFullError
from lib_loggly.domain.request import DeliveryRequest


LOGGER = logging.getLogger(__name__)

_Item = Optional[Tuple[DeliveryRequest, CompletionCallback]]


class BufferedDeliveryAdapter(DeliveryPort):
    """Deliver requests on a background thread.

    Examples
    --------
    >>> from lib_loggly.domain.request import DeliveryResponse
    >>> class Inline:
    ...     def deliver(self, request, on_complete):
    ...         on_complete(None, DeliveryResponse(200, "OK", "{}"))
    ...     def close(self):
    ...         pass
    >>> done = []
    >>> adapter = BufferedDeliveryAdapter(Inline())
    >>> adapter.deliver(DeliveryRequest(uri="https://h/inputs/t", body="x"), lambda err, res: done.append(res.status_code))
    True
    >>> adapter.close()
    >>> done
    [200]
    """

    def __init__(
        self,
        inner: DeliveryPort,
        *,
        maxsize: int = 500,
        drop_policy: str = "block",
        timeout: float | None = 1.0,
        stop_timeout: float | None = 5.0,
    ) -> None:
        """Create the buffer in front of ``inner``.

        Parameters
        ----------
        inner:
            Transport performing the actual I/O.
        maxsize:
            Maximum number of pending requests before back-pressure or drops.
        drop_policy:
            ``"block"`` (producers wait up to ``timeout``) or ``"drop"`` (new
            requests are rejected immediately when the buffer is full).
        timeout:
            Producer wait under the blocking policy; ``None`` waits forever.
        stop_timeout:
            Default drain deadline for :meth:`stop`; ``None`` waits forever.

        Rejected requests complete with :class:`DeliveryBufferFullError`.
        """

        policy = drop_policy.lower()
        if policy not in {"block", "drop"}:
            raise ValueError("drop_policy must be 'block' or 'drop'")
        self._inner = inner
        self._queue: queue.Queue[_Item] = queue.Queue(maxsize=maxsize)
        self._thread: threading.Thread | None = None
        self._start_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._drop_pending = False
        self._drain_event = threading.Event()
        self._drain_event.set()
        self._drop_policy = policy
        self._timeout = timeout
        self._stop_timeout = stop_timeout
        self._worker_failed = False

    def start(self) -> None:
        """Start the worker thread if it is not already running."""

        with self._start_lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stop_event.clear()
            self._drop_pending = False
            self._worker_failed = False
            self._thread = threading.Thread(target=self._run, name="lib_loggly-delivery", daemon=True)
            self._thread.start()

    def deliver(self, request: DeliveryRequest, on_complete: CompletionCallback) -> bool:
        """Enqueue ``request``; returns ``False`` when the buffer rejected it."""

        self.start()
        item = (request, on_complete)
        try:
            if self._drop_policy == "drop":
                self._queue.put(item, block=False)
            else:
                self._queue.put(item, timeout=self._timeout)
        except queue.Full:
            self._reject(item)
            return False
        self._drain_event.clear()
        return True

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until every queued request was handed to the inner transport.

        The worker signals the moment the queue runs empty; returns ``False``
        when ``timeout`` elapses first.
        """

        if self._queue.unfinished_tasks == 0:
            return True
        return self._drain_event.wait(timeout)

    @property
    def worker_failed(self) -> bool:
        """``True`` once the inner transport or a callback raised on the worker."""

        return self._worker_failed

    def stop(self, *, drain: bool = True, timeout: float | None = None) -> None:
        """Stop the worker, optionally delivering everything still queued.

        Raises
        ------
        RuntimeError
            When the worker does not finish within the deadline.
        """

        thread = self._thread
        if thread is None:
            return
        effective_timeout = timeout if timeout is not None else self._stop_timeout
        deadline = time.monotonic() + effective_timeout if effective_timeout is not None else None

        def remaining_time() -> float | None:
            if deadline is None:
                return None
            return max(0.0, deadline - time.monotonic())

        if not drain:
            self._drop_pending = True
        self._stop_event.set()
        self._enqueue_stop_signal(deadline)

        if drain and not self.wait_until_idle(remaining_time()):
            self._drop_pending = True
            self._drain_pending_items()

        thread.join(remaining_time())
        if thread.is_alive():
            raise RuntimeError("Delivery worker failed to stop within the allotted timeout")
        self._thread = None
        self._drain_pending_items()

    def close(self) -> None:
        """Drain pending requests, stop the worker, and close the inner transport."""

        try:
            self.stop(drain=True)
        finally:
            self._inner.close()

    def _run(self) -> None:
        """Worker loop forwarding queued requests to the inner transport."""

        while True:
            item = self._queue.get()
            try:
                if item is None:
                    if self._stop_event.is_set():
                        break
                    continue
                if self._drop_pending:
                    self._reject(item)
                    continue
                request, on_complete = item
                try:
                    self._inner.deliver(request, on_complete)
                except Exception as exc:  # noqa: BLE001
                    self._worker_failed = True
                    LOGGER.error("Delivery worker raised for %s; continuing", request.uri, exc_info=exc)
            finally:
                self._queue.task_done()
                self._mark_idle_if_empty()

            if self._stop_event.is_set() and self._queue.empty():
                break

    def _mark_idle_if_empty(self) -> None:
        if self._queue.unfinished_tasks == 0:
            self._drain_event.set()

    def _reject(self, item: _Item) -> None:
        """Complete a request the buffer could not accept or had to discard."""

        if item is None:
            return
        request, on_complete = item
        LOGGER.warning("Delivery buffer dropped request for %s", request.uri)
        try:
            on_complete(DeliveryBufferFullError(f"delivery buffer dropped request for {request.uri}"), None)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Completion callback raised while reporting a dropped request", exc_info=exc)

    def _drain_pending_items(self) -> None:
        """Reject whatever is left in the queue after a non-draining stop."""

        while True:
            try:
                dropped = self._queue.get_nowait()
            except queue.Empty:
                break
            else:
                self._reject(dropped)
                self._queue.task_done()
                self._mark_idle_if_empty()

    def _enqueue_stop_signal(self, deadline: float | None) -> None:
        """Ensure the worker wakes up to observe the stop event."""

        while True:
            try:
                if deadline is None:
                    self._queue.put(None)
                else:
                    self._queue.put(None, timeout=max(0.0, deadline - time.monotonic()))
                self._drain_event.clear()
                break
            except queue.Full:
                try:
                    dropped = self._queue.get_nowait()
                except queue.Empty:
                    continue
                else:
                    self._reject(dropped)
                    self._queue.task_done()
                    self._mark_idle_if_empty()


__all__ = ["BufferedDeliveryAdapter"]
