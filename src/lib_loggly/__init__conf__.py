"""Static package metadata surfaced by the CLI banner and the user-agent header."""

from __future__ import annotations

from typing import Callable

name = "lib_loggly"
title = "Loggly ingestion client with payload truncation, tag filtering and bulk shaping"
version = "1.0.0"
homepage = "https://github.com/bitranox/lib_loggly"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_loggly"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Emit the metadata banner line by line.

    Parameters
    ----------
    writer:
        Callable receiving each rendered line (newline included). Defaults to
        :func:`print` without an extra newline.

    Examples
    --------
    >>> captured = []
    >>> print_info(writer=captured.append)
    >>> captured[0]
    'Info for lib_loggly:\\n'
    """

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:\n", "\n"]
    lines.extend(f"    {label.ljust(pad)} = {value}\n" for label, value in fields)
    emit = writer if writer is not None else (lambda text: print(text, end=""))
    for line in lines:
        emit(line)
