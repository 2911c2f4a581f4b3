"""Environment and ``.env`` configuration helpers.

Purpose
-------
Let deployments configure the client through ``LOGGLY_*`` environment
variables, optionally seeded from the nearest ``.env`` file.

Contents
--------
* :data:`DOTENV_ENV_VAR` – toggle consulted by the CLI.
* :func:`should_use_dotenv` / :func:`enable_dotenv` – ``.env`` loading.
* :func:`client_options_from_env` – ``LOGGLY_*`` variables → option mapping.

System Role
-----------
Outer configuration layer. Produces plain option mappings consumed by
:func:`lib_loggly.create_client`; explicit arguments always win over the
environment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from lib_loggly.domain.errors import ConfigurationError

DOTENV_ENV_VAR = "LOGGLY_USE_DOTENV"
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_DOTENV_LOADED: Path | None = None


def _env_bool(value: str | None, default: bool) -> bool:
    """Interpret ``1/true/yes/on`` style strings.

    Examples
    --------
    >>> _env_bool(None, default=True)
    True
    >>> _env_bool("off", default=True)
    False
    >>> _env_bool(" YES ", default=False)
    True
    """

    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` should be loaded.

    An explicit CLI choice wins; otherwise ``LOGGLY_USE_DOTENV`` decides.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="true")
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    normalised = env_value.strip().lower()
    if normalised in _FALSY:
        return False
    return normalised in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding existing variables.

    Parameters
    ----------
    search_from:
        Directory to start the upward search from; defaults to the current
        working directory.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, or ``None`` when no file exists.
        Repeated calls return the first loaded path.
    """

    global _DOTENV_LOADED
    if _DOTENV_LOADED is not None:
        return _DOTENV_LOADED
    if search_from is None:
        found = find_dotenv(usecwd=True)
    else:
        found = _find_upwards(Path(search_from))
    if not found:
        return None
    path = Path(found).resolve()
    load_dotenv(path, override=False)
    _DOTENV_LOADED = path
    return path


def _find_upwards(start: Path) -> str:
    for directory in (start.resolve(), *start.resolve().parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return str(candidate)
    return ""


def _reset_dotenv_state_for_testing() -> None:
    """Forget which ``.env`` file was loaded."""

    global _DOTENV_LOADED
    _DOTENV_LOADED = None


def _env_int(environ: Mapping[str, str], name: str) -> int | None:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def client_options_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Translate ``LOGGLY_*`` variables into :func:`create_client` options.

    Only variables that are present end up in the result so the mapping can
    be layered under explicit arguments.

    Examples
    --------
    >>> client_options_from_env({"LOGGLY_TOKEN": "tok", "LOGGLY_TAGS": "a, b", "LOGGLY_JSON": "1"})
    {'token': 'tok', 'json': True, 'tags': ['a', 'b']}
    >>> client_options_from_env({"LOGGLY_MAX_EVENT_BYTES": "zero"})
    Traceback (most recent call last):
    ...
    lib_loggly.domain.errors.ConfigurationError: LOGGLY_MAX_EVENT_BYTES must be an integer, got 'zero'
    """

    env = os.environ if environ is None else environ
    options: dict[str, Any] = {}
    for key, name in (
        ("subdomain", "LOGGLY_SUBDOMAIN"),
        ("token", "LOGGLY_TOKEN"),
        ("host", "LOGGLY_HOST"),
        ("app_name", "LOGGLY_APP_NAME"),
        ("proxy", "LOGGLY_PROXY"),
    ):
        value = env.get(name)
        if value:
            options[key] = value.strip()
    for key, name in (
        ("json", "LOGGLY_JSON"),
        ("use_tag_header", "LOGGLY_USE_TAG_HEADER"),
        ("is_bulk", "LOGGLY_BULK"),
        ("network_errors_on_console", "LOGGLY_NETWORK_ERRORS_ON_CONSOLE"),
    ):
        if name in env:
            options[key] = _env_bool(env[name], default=False)
    tags = env.get("LOGGLY_TAGS")
    if tags:
        options["tags"] = [chunk.strip() for chunk in tags.split(",") if chunk.strip()]
    max_event_bytes = _env_int(env, "LOGGLY_MAX_EVENT_BYTES")
    if max_event_bytes is not None:
        options["max_event_bytes"] = max_event_bytes
    buffer_size = _env_int(env, "LOGGLY_BUFFER_SIZE")
    if buffer_size is not None:
        options["buffer_options"] = {"size": buffer_size}
    return options


__all__ = [
    "DOTENV_ENV_VAR",
    "client_options_from_env",
    "enable_dotenv",
    "should_use_dotenv",
]
