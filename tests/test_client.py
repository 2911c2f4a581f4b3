"""End-to-end behaviour of the client façade against a recording transport."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from lib_loggly import ConfigurationError, DeliveryStatusError, LogglyClient, create_client
from lib_loggly.adapters import BufferedDeliveryAdapter, HttpxDeliveryAdapter
from lib_loggly.domain import DeliveryResponse
from lib_loggly.runtime import build_delivery
from tests.fakes import RecordingDelivery, ResultRecorder

ACCOUNT = {"subdomain": "acme", "token": "tok-123"}


def _client(delivery: RecordingDelivery, **options: Any) -> LogglyClient:
    return create_client(ACCOUNT, delivery=delivery, **options)


def test_plain_text_event(delivery: RecordingDelivery, results: ResultRecorder) -> None:
    _client(delivery).log("hello", callback=results)

    (request,) = delivery.requests
    assert request.method == "POST"
    assert request.uri == "https://logs-01.loggly.com/inputs/tok-123"
    assert request.body == "hello"
    assert request.headers["content-type"] == "text/plain"
    assert "X-LOGGLY-TAG" not in request.headers
    assert results.calls == [(None, {"response": "ok"})]


def test_structured_event_with_tag_header(delivery: RecordingDelivery) -> None:
    _client(delivery, json=True).log({"a": 1}, ["Foo-1"])

    (request,) = delivery.requests
    assert json.loads(request.body) == {"a": 1}
    assert request.headers["content-type"] == "application/json"
    assert request.headers["X-LOGGLY-TAG"] == "Foo-1"


def test_invalid_tags_are_dropped_silently(delivery: RecordingDelivery) -> None:
    _client(delivery, tags=["base"]).log("x", ["ok", "bad tag!", "y" * 65])
    assert delivery.requests[0].headers["X-LOGGLY-TAG"] == "base,ok"


def test_oversized_event_is_truncated_and_announced(delivery: RecordingDelivery) -> None:
    events: list[tuple[str, dict[str, Any]]] = []
    client = _client(delivery)
    client.subscribe(lambda event, payload: events.append((event, payload)))

    client.log("x" * 2_000_000)

    (request,) = delivery.requests
    assert len(request.content()) == 1_000_000
    assert ("truncated", {"index": 0, "original_bytes": 2_000_000, "max_bytes": 1_000_000}) in events
    assert ("log", {"result": {"response": "ok"}}) in events


def test_max_event_bytes_is_per_client(delivery: RecordingDelivery) -> None:
    _client(delivery, max_event_bytes=8).log("0123456789")
    _client(delivery).log("0123456789")
    assert [request.body for request in delivery.requests] == ["01234567", "0123456789"]


def test_bulk_sequence_keeps_order(delivery: RecordingDelivery) -> None:
    _client(delivery, is_bulk=True).log(["a", "b", {"c": 3}])

    (request,) = delivery.requests
    assert request.uri == "https://logs-01.loggly.com/bulk/tok-123"
    assert request.body == ("a", "b", '{"c":3}')
    assert request.content() == b'a\nb\n{"c":3}'


def test_bulk_truncation_reports_element_index(delivery: RecordingDelivery) -> None:
    events: list[dict[str, Any]] = []
    client = _client(delivery, is_bulk=True, max_event_bytes=4)
    client.subscribe(lambda event, payload: events.append(payload) if event == "truncated" else None)

    client.log(["ok", "too long"])

    assert delivery.requests[0].body == ("ok", "too ")
    assert events == [{"index": 1, "original_bytes": 8, "max_bytes": 4}]


def test_list_in_single_mode_is_one_structured_event(delivery: RecordingDelivery) -> None:
    _client(delivery, json=True).log(["a", "b"])
    assert delivery.requests[0].body == '["a","b"]'


def test_url_path_tags(delivery: RecordingDelivery) -> None:
    _client(delivery, use_tag_header=False).log("x", ["a", "b"])
    (request,) = delivery.requests
    assert request.uri == "https://logs-01.loggly.com/inputs/tok-123/tag/a,b/"
    assert "X-LOGGLY-TAG" not in request.headers


def test_callable_tags_argument_is_the_callback(delivery: RecordingDelivery, results: ResultRecorder) -> None:
    client = _client(delivery, tags=["base"])
    assert client.log("x", results) is client
    assert results.calls == [(None, {"response": "ok"})]
    assert delivery.requests[0].headers["X-LOGGLY-TAG"] == "base"


def test_status_error_reaches_callback(results: ResultRecorder) -> None:
    delivery = RecordingDelivery(response=DeliveryResponse(403, "Forbidden"))
    _client(delivery).log("x", callback=results)
    (error, result), = results.calls
    assert isinstance(error, DeliveryStatusError)
    assert result is None


def test_log_without_callback_never_raises_on_failure() -> None:
    delivery = RecordingDelivery(response=DeliveryResponse(500, "Internal Server Error"))
    _client(delivery).log("x")
    assert len(delivery.requests) == 1


def test_customer_fetches_account_with_auth(results: ResultRecorder) -> None:
    delivery = RecordingDelivery(response=DeliveryResponse(200, "OK", '{"subdomain": "acme"}'))
    client = _client(delivery, auth={"username": "user", "password": "secret"})

    client.customer(results)

    (request,) = delivery.requests
    assert request.method == "GET"
    assert request.uri == "https://acme.loggly.com/apiv2/customer"
    assert request.auth == ("user", "secret")
    assert request.body is None
    assert results.calls == [(None, {"subdomain": "acme"})]


def test_missing_credentials_fail_synchronously(delivery: RecordingDelivery) -> None:
    with pytest.raises(ConfigurationError, match="options.subdomain and options.token are required."):
        create_client({"subdomain": "acme"}, delivery=delivery)
    assert delivery.requests == []


def test_overrides_win_over_options(delivery: RecordingDelivery) -> None:
    client = create_client({**ACCOUNT, "host": "a.example"}, delivery=delivery, host="b.example")
    assert client.config.host == "b.example"


def test_context_manager_closes_transport(delivery: RecordingDelivery) -> None:
    with _client(delivery) as client:
        client.log("x")
    assert delivery.closed is True


def test_unsubscribed_observer_is_silent(delivery: RecordingDelivery) -> None:
    events: list[str] = []
    client = _client(delivery)
    unsubscribe = client.subscribe(lambda event, payload: events.append(event))
    unsubscribe()
    client.log("x")
    assert events == []


def test_default_transport_stack_is_buffered_httpx() -> None:
    client = create_client(ACCOUNT, bufferOptions={"size": 7})
    try:
        assert isinstance(client.delivery, BufferedDeliveryAdapter)
    finally:
        client.close()
    inline = build_delivery(client.config, buffered=False)
    try:
        assert isinstance(inline, HttpxDeliveryAdapter)
    finally:
        inline.close()


def test_buffered_client_delivers_over_http() -> None:
    seen: list[httpx.Request] = []

    def server(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text='{"response": "ok"}')

    results = ResultRecorder()
    http = HttpxDeliveryAdapter(transport=httpx.MockTransport(server))
    client = create_client(ACCOUNT, delivery=BufferedDeliveryAdapter(http), json=True)
    client.log({"event": "signup"}, ["web"], results)
    client.close()

    (request,) = seen
    assert request.headers["x-loggly-tag"] == "web"
    assert request.headers["user-agent"].startswith("lib_loggly ")
    assert json.loads(request.content) == {"event": "signup"}
    assert results.calls == [(None, {"response": "ok"})]


@pytest.mark.parametrize("empty", [[], ()])
def test_empty_bulk_message_sends_nothing(empty: Any, delivery: RecordingDelivery, results: ResultRecorder) -> None:
    client = _client(delivery, is_bulk=True)
    assert client.log(empty, results) is client
    assert delivery.requests == []
    assert results.calls == [(None, None)]


def test_non_ascii_tags_never_reach_the_transport(delivery: RecordingDelivery, results: ResultRecorder) -> None:
    _client(delivery).log("hello", ["café", "ok-1"], results)
    assert delivery.requests[0].headers["X-LOGGLY-TAG"] == "ok-1"
    assert results.calls == [(None, {"response": "ok"})]


def test_scalar_in_json_mode_ships_envelope(delivery: RecordingDelivery) -> None:
    _client(delivery, json=True).log(5)
    assert delivery.requests[0].body == '{"message":5}'
