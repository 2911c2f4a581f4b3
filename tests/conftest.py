from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from lib_loggly.domain import ClientConfig
from tests.fakes import RecordingDelivery, ResultRecorder


@pytest.fixture
def delivery() -> RecordingDelivery:
    return RecordingDelivery()


@pytest.fixture
def results() -> ResultRecorder:
    return ResultRecorder()


@pytest.fixture
def plain_config() -> ClientConfig:
    return ClientConfig(subdomain="acme", token="tok-123")


@pytest.fixture
def make_config() -> Callable[..., ClientConfig]:
    def _make(**overrides: Any) -> ClientConfig:
        options: dict[str, Any] = {"subdomain": "acme", "token": "tok-123"}
        options.update(overrides)
        return ClientConfig.from_options(options)

    return _make
