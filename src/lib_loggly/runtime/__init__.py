"""Runtime façade exposing the client and the metadata banner.

Purpose
-------
Give host applications one import location for :class:`LogglyClient`,
:func:`create_client`, and :func:`summary_info` so the inner layers stay an
implementation detail.
"""

from __future__ import annotations

from ._client import LogglyClient, create_client
from ._composition import build_delivery


def summary_info() -> str:
    """Return the metadata banner used by the CLI ``info`` command.

    Outputs
    -------
    str
        Multi-line banner ending with a newline.
    """

    from .. import __init__conf__

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


__all__ = ["LogglyClient", "build_delivery", "create_client", "summary_info"]
