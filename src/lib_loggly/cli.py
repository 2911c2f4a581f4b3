"""Command-line interface for shipping and inspecting Loggly events.

Purpose
-------
Offer a scriptable way to send a message, preview the exact request the
client would issue, and check which tags survive validation.

Contents
--------
* :func:`cli` – Click group with global ``--traceback`` / ``--use-dotenv``.
* ``info`` / ``send`` / ``tags`` – subcommands.
* :func:`main` – entry point delegating to :func:`lib_cli_exit_tools.run_cli`.

System Role
-----------
Presentation layer. Builds clients through :func:`create_client` exactly like
library callers, layering CLI options over ``LOGGLY_*`` environment values.
"""

from __future__ import annotations

import json
import os
import threading
from typing import Any, Sequence

import click
import lib_cli_exit_tools
from rich.console import Console
from rich.table import Table

from . import __init__conf__
from . import config as config_module
from .domain import ConfigurationError, DeliveryRequest, is_valid_tag
from .runtime import LogglyClient, create_client, summary_info

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
SEND_TIMEOUT_SECONDS = 30.0


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from the nearest .env (default from {config_module.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command storing global flags and loading ``.env`` when asked."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    env_toggle = os.getenv(config_module.DOTENV_ENV_VAR)
    if config_module.should_use_dotenv(explicit=explicit, env_value=env_toggle):
        config_module.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print resolved metadata so users can inspect installation details."""

    click.echo(summary_info(), nl=False)


@cli.command("tags", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("candidates", nargs=-1, required=True)
def cli_tags(candidates: tuple[str, ...]) -> None:
    """Show which CANDIDATES are valid Loggly tags."""

    table = Table(title="Tag validation")
    table.add_column("tag")
    table.add_column("status")
    for candidate in candidates:
        table.add_row(candidate, "kept" if is_valid_tag(candidate) else "dropped")
    Console(soft_wrap=True).print(table)


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("messages", nargs=-1, required=True)
@click.option("--subdomain", help="Account subdomain (LOGGLY_SUBDOMAIN).")
@click.option("--token", help="Customer ingestion token (LOGGLY_TOKEN).")
@click.option("--host", help="Ingestion host (LOGGLY_HOST).")
@click.option("--tag", "tags", multiple=True, help="Tag to attach; repeatable.")
@click.option("--json/--plain", "json_mode", default=None, help="Ship structured JSON or plain text bodies.")
@click.option("--structured", is_flag=True, help="Parse each MESSAGE as a JSON document.")
@click.option("--bulk/--single", "bulk", default=None, help="Use the bulk endpoint (one request for all MESSAGES).")
@click.option("--url-tags", is_flag=True, help="Send tags in the URL path instead of the X-LOGGLY-TAG header.")
@click.option("--app-name", help="Value of the appName header.")
@click.option("--max-event-bytes", type=click.IntRange(min=1), help="Per-event byte limit.")
@click.option("--dry-run", is_flag=True, help="Print the assembled request instead of sending it.")
def cli_send(
    messages: tuple[str, ...],
    subdomain: str | None,
    token: str | None,
    host: str | None,
    tags: tuple[str, ...],
    json_mode: bool | None,
    structured: bool,
    bulk: bool | None,
    url_tags: bool,
    app_name: str | None,
    max_event_bytes: int | None,
    dry_run: bool,
) -> None:
    """Ship MESSAGES to Loggly (or preview the request with --dry-run)."""

    options = config_module.client_options_from_env()
    explicit: dict[str, Any] = {
        "subdomain": subdomain,
        "token": token,
        "host": host,
        "json": json_mode,
        "is_bulk": bulk,
        "app_name": app_name,
        "max_event_bytes": max_event_bytes,
    }
    options.update({key: value for key, value in explicit.items() if value is not None})
    if url_tags:
        options["use_tag_header"] = False
    if len(messages) > 1 and not options.get("is_bulk"):
        raise click.UsageError("several MESSAGES need --bulk")

    values = [_parse_message(message) if structured else message for message in messages]
    payload: Any = values if options.get("is_bulk") else values[0]
    call_tags = list(tags) if tags else None

    try:
        client = create_client(options, buffered=False)
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc
    try:
        if dry_run:
            _render_request(client.build_request(payload, call_tags))
            return
        result = _send_and_wait(client, payload, call_tags)
    finally:
        client.close()
    click.echo(json.dumps(result, sort_keys=True) if result is not None else "sent")


def _parse_message(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise click.BadParameter(f"not a JSON document: {raw!r}", param_hint="MESSAGES") from exc


def _send_and_wait(client: LogglyClient, payload: Any, tags: list[str] | None) -> Any:
    """Log ``payload`` and block until the completion callback fired."""

    done = threading.Event()
    outcome: dict[str, Any] = {}

    def on_result(error: BaseException | None, result: Any) -> None:
        outcome["error"] = error
        outcome["result"] = result
        done.set()

    client.log(payload, tags, on_result)
    if not done.wait(SEND_TIMEOUT_SECONDS):
        raise click.ClickException("timed out waiting for Loggly to acknowledge the event")
    if outcome["error"] is not None:
        raise click.ClickException(str(outcome["error"]))
    return outcome["result"]


def _render_request(request: DeliveryRequest) -> None:
    console = Console(soft_wrap=True, highlight=False)
    console.print(f"{request.method} {request.uri}", markup=False)
    for name, value in request.headers.items():
        console.print(f"{name}: {value}", markup=False)
    console.print("")
    console.print(request.content().decode("utf-8", errors="replace"), markup=False)


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with error handling and return the exit code.

    Parameters
    ----------
    argv:
        Optional argument list; ``None`` reads ``sys.argv``.
    restore_traceback:
        Restore the global traceback preferences changed by ``--traceback``
        once the command finished.
    """

    previous_traceback = lib_cli_exit_tools.config.traceback
    previous_force_color = lib_cli_exit_tools.config.traceback_force_color
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
