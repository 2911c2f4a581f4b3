"""CLI behaviour coverage for the click command group."""

from __future__ import annotations

import sys
from typing import Any, Callable

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner

from lib_loggly import __init__conf__
from lib_loggly import cli as cli_mod
from lib_loggly.domain import DeliveryResponse
from lib_loggly.runtime import create_client, summary_info
from tests.fakes import RecordingDelivery

ACCOUNT_ARGS = ["--subdomain", "acme", "--token", "tok-123"]


@pytest.fixture(autouse=True)
def _clean_loggly_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "LOGGLY_SUBDOMAIN",
        "LOGGLY_TOKEN",
        "LOGGLY_HOST",
        "LOGGLY_APP_NAME",
        "LOGGLY_PROXY",
        "LOGGLY_JSON",
        "LOGGLY_USE_TAG_HEADER",
        "LOGGLY_BULK",
        "LOGGLY_NETWORK_ERRORS_ON_CONSOLE",
        "LOGGLY_TAGS",
        "LOGGLY_MAX_EVENT_BYTES",
        "LOGGLY_BUFFER_SIZE",
        "LOGGLY_USE_DOTENV",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def recording(monkeypatch: pytest.MonkeyPatch) -> RecordingDelivery:
    """Route clients built by the CLI through a recording transport."""

    delivery = RecordingDelivery()

    def fake_create_client(options: Any = None, **kwargs: Any) -> Any:
        kwargs.pop("delivery", None)
        return create_client(options, delivery=delivery, **kwargs)

    monkeypatch.setattr(cli_mod, "create_client", fake_create_client)
    return delivery


def run_cli(args: list[str] | None = None, env: dict[str, str] | None = None) -> tuple[int, str, BaseException | None]:
    """Invoke the click command with ``CliRunner`` and capture output."""

    runner = CliRunner()
    original_argv = sys.argv
    sys.argv = [__init__conf__.shell_command]
    try:
        result = runner.invoke(cli_mod.cli, args or [], prog_name=__init__conf__.shell_command, env=env)
    finally:
        sys.argv = original_argv
    return result.exit_code, result.output, result.exception


def test_cli_without_subcommand_prints_summary() -> None:
    exit_code, stdout, _ = run_cli()

    assert exit_code == 0
    assert stdout == summary_info()


def test_cli_info_command_matches_summary() -> None:
    exit_code, stdout, _ = run_cli(["info"])

    assert exit_code == 0
    assert stdout == summary_info()


def test_cli_version_option() -> None:
    exit_code, stdout, _ = run_cli(["--version"])

    assert exit_code == 0
    assert stdout.strip() == f"{__init__conf__.shell_command} version {__init__conf__.version}"


def test_cli_no_traceback_option(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    exit_code, _stdout, _exception = run_cli(["--no-traceback", "info"])

    assert exit_code == 0
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False


def test_cli_tags_reports_kept_and_dropped() -> None:
    exit_code, stdout, _ = run_cli(["tags", "Foo-1", "bad tag!"])

    assert exit_code == 0
    assert "Foo-1" in stdout
    assert "kept" in stdout
    assert "dropped" in stdout


def test_cli_send_plain_message(recording: RecordingDelivery) -> None:
    exit_code, stdout, exception = run_cli(["send", *ACCOUNT_ARGS, "hello"])

    assert exit_code == 0, exception
    assert stdout.strip() == '{"response": "ok"}'
    (request,) = recording.requests
    assert request.uri == "https://logs-01.loggly.com/inputs/tok-123"
    assert request.body == "hello"


def test_cli_send_structured_bulk_with_tags(recording: RecordingDelivery) -> None:
    exit_code, _stdout, exception = run_cli(
        ["send", *ACCOUNT_ARGS, "--json", "--structured", "--bulk", "--tag", "web", "--tag", "bad tag", '{"a": 1}', '"two"']
    )

    assert exit_code == 0, exception
    (request,) = recording.requests
    assert request.uri == "https://logs-01.loggly.com/bulk/tok-123"
    assert request.body == ('{"a":1}', '{"message":"two"}')
    assert request.headers["X-LOGGLY-TAG"] == "web"


def test_cli_send_reads_account_from_environment(recording: RecordingDelivery) -> None:
    env = {"LOGGLY_SUBDOMAIN": "acme", "LOGGLY_TOKEN": "env-token", "LOGGLY_TAGS": "svc,api"}
    exit_code, _stdout, exception = run_cli(["send", "--url-tags", "hi"], env=env)

    assert exit_code == 0, exception
    (request,) = recording.requests
    assert request.uri == "https://logs-01.loggly.com/inputs/env-token/tag/svc,api/"


def test_cli_send_dry_run_prints_request(recording: RecordingDelivery) -> None:
    exit_code, stdout, exception = run_cli(
        ["send", *ACCOUNT_ARGS, "--app-name", "billing", "--max-event-bytes", "3", "--dry-run", "hello"]
    )

    assert exit_code == 0, exception
    assert recording.requests == []
    lines = stdout.splitlines()
    assert lines[0] == "POST https://logs-01.loggly.com/inputs/tok-123"
    assert "appName: billing" in lines
    assert "content-type: text/plain" in lines
    assert lines[-1] == "hel"


def test_cli_send_several_messages_need_bulk(recording: RecordingDelivery) -> None:
    exit_code, stdout, _ = run_cli(["send", *ACCOUNT_ARGS, "one", "two"])

    assert exit_code == 2
    assert "--bulk" in stdout
    assert recording.requests == []


def test_cli_send_rejects_invalid_json(recording: RecordingDelivery) -> None:
    exit_code, stdout, _ = run_cli(["send", *ACCOUNT_ARGS, "--structured", "{nope"])

    assert exit_code == 2
    assert "not a JSON document" in stdout


def test_cli_send_reports_delivery_failure(recording: RecordingDelivery) -> None:
    recording.response = DeliveryResponse(403, "Forbidden")

    exit_code, stdout, _ = run_cli(["send", *ACCOUNT_ARGS, "hello"])

    assert exit_code == 1
    assert 'Error Code- 403 "Forbidden"' in stdout


def test_cli_send_without_credentials_fails() -> None:
    exit_code, stdout, _ = run_cli(["send", "hello"])

    assert exit_code == 2
    assert "options.subdomain and options.token are required." in stdout


def test_main_restores_traceback_preferences(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    recorded: dict[str, bool] = {}

    def fake_run_cli(command: Callable[..., int], argv: list[str] | None = None, *, prog_name: str | None = None, **_: object) -> int:
        runner = CliRunner()
        result = runner.invoke(command, ["info"] if argv is None else argv)
        if result.exception is not None:
            raise result.exception
        recorded["traceback"] = lib_cli_exit_tools.config.traceback
        recorded["traceback_force_color"] = lib_cli_exit_tools.config.traceback_force_color
        return result.exit_code

    monkeypatch.setattr(lib_cli_exit_tools, "run_cli", fake_run_cli)

    exit_code = cli_mod.main(["--no-traceback", "info"])

    assert exit_code == 0
    assert recorded == {"traceback": False, "traceback_force_color": False}
    assert lib_cli_exit_tools.config.traceback is True
    assert lib_cli_exit_tools.config.traceback_force_color is True


def test_main_consumes_sys_argv(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", False, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", False, raising=False)
    monkeypatch.setattr(sys, "argv", [__init__conf__.shell_command, "info"], raising=False)

    exit_code = cli_mod.main()
    captured = capsys.readouterr()

    assert exit_code == 0
    assert "Info for lib_loggly" in captured.out
