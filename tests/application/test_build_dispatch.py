from __future__ import annotations

from collections.abc import Callable

import pytest

from lib_loggly.application.use_cases.build_dispatch import (
    APP_NAME_HEADER,
    TAG_HEADER,
    build_dispatch,
    build_headers,
    resolve_effective_tags,
)
from lib_loggly.domain import ClientConfig, PreparedPayload


def _payload(body: str) -> PreparedPayload:
    return PreparedPayload(message=body, truncated=False, body=body, original_bytes=len(body.encode("utf-8")))


def test_single_event_targets_inputs_endpoint(plain_config: ClientConfig) -> None:
    request = build_dispatch(_payload("hello"), (), plain_config)
    assert request.method == "POST"
    assert request.uri == "https://logs-01.loggly.com/inputs/tok-123"
    assert request.body == "hello"
    assert TAG_HEADER not in request.headers


def test_fixed_headers_are_present(plain_config: ClientConfig) -> None:
    headers = build_headers(plain_config)
    assert headers["host"] == "logs-01.loggly.com"
    assert headers["accept"] == "*/*"
    assert headers["user-agent"] == plain_config.user_agent
    assert headers["content-type"] == "text/plain"
    assert APP_NAME_HEADER not in headers


def test_app_name_header_is_added_when_configured(make_config: Callable[..., ClientConfig]) -> None:
    request = build_dispatch(_payload("x"), (), make_config(app_name="billing"))
    assert request.headers[APP_NAME_HEADER] == "billing"


def test_tags_travel_in_header_by_default(make_config: Callable[..., ClientConfig]) -> None:
    request = build_dispatch(_payload('{"a":1}'), ("Foo-1",), make_config(json=True))
    assert request.headers[TAG_HEADER] == "Foo-1"
    assert request.headers["content-type"] == "application/json"
    assert request.uri.endswith("/inputs/tok-123")


def test_tags_travel_in_url_path_when_header_disabled(make_config: Callable[..., ClientConfig]) -> None:
    request = build_dispatch(_payload("x"), ("a", "b"), make_config(use_tag_header=False))
    assert request.uri == "https://logs-01.loggly.com/inputs/tok-123/tag/a,b/"
    assert TAG_HEADER not in request.headers


def test_empty_tags_leave_url_untouched(make_config: Callable[..., ClientConfig]) -> None:
    request = build_dispatch(_payload("x"), (), make_config(use_tag_header=False))
    assert request.uri == "https://logs-01.loggly.com/inputs/tok-123"


def test_bulk_mode_keeps_payload_order(make_config: Callable[..., ClientConfig]) -> None:
    request = build_dispatch([_payload("a"), _payload("b")], ("t1",), make_config(is_bulk=True))
    assert request.uri == "https://logs-01.loggly.com/bulk/tok-123"
    assert request.body == ("a", "b")
    assert request.content() == b"a\nb"
    assert request.headers[TAG_HEADER] == "t1"


def test_single_mode_refuses_several_payloads(plain_config: ClientConfig) -> None:
    with pytest.raises(ValueError, match="is_bulk"):
        build_dispatch([_payload("a"), _payload("b")], (), plain_config)


def test_custom_host_changes_uri_and_host_header(make_config: Callable[..., ClientConfig]) -> None:
    request = build_dispatch(_payload("x"), (), make_config(host="logs-02.example.net"))
    assert request.uri == "https://logs-02.example.net/inputs/tok-123"
    assert request.headers["host"] == "logs-02.example.net"


def test_call_tags_extend_configured_defaults(make_config: Callable[..., ClientConfig]) -> None:
    config = make_config(tags=["base", "not valid"])
    assert resolve_effective_tags(config) == ("base",)
    assert resolve_effective_tags(config, "extra") == ("base", "extra")
    assert resolve_effective_tags(config, ["x y"]) == ("base",)
