"""Dispatch builder assembling delivery requests from prepared payloads.

Purpose
-------
Combine prepared bodies, resolved tags, and the client configuration into a
side-effect-free :class:`DeliveryRequest` that any transport can execute.

Contents
--------
* :func:`resolve_effective_tags` – merge config defaults with call tags.
* :func:`build_headers` – the fixed header set for ingestion requests.
* :func:`build_dispatch` – single vs. bulk request shaping.

System Role
-----------
Application-layer use case invoked by the client façade after the payload
codec. The URI and header layout are the ingestion service's wire contract.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from lib_loggly.domain.config import ClientConfig
from lib_loggly.domain.payload import PreparedPayload
from lib_loggly.domain.request import DeliveryRequest
from lib_loggly.domain.tags import TagSet, resolve_tags

TAG_HEADER = "X-LOGGLY-TAG"
APP_NAME_HEADER = "appName"


def resolve_effective_tags(config: ClientConfig, call_tags: Any = None) -> TagSet:
    """Return the tags a single ``log`` call ships with.

    Call tags extend the configured defaults; without call tags the defaults
    apply unchanged.

    Examples
    --------
    >>> cfg = ClientConfig(subdomain="s", token="t", default_tags=("base",))
    >>> resolve_effective_tags(cfg, ["extra", "bad tag!"])
    ('base', 'extra')
    >>> resolve_effective_tags(cfg)
    ('base',)
    """

    if call_tags is None:
        return config.default_tags
    return config.default_tags + resolve_tags(call_tags)


def build_headers(config: ClientConfig) -> dict[str, str]:
    """Return the base header mapping shared by every ingestion request."""

    headers = {
        "host": config.host,
        "accept": "*/*",
        "user-agent": config.user_agent,
        "content-type": config.content_type,
    }
    if config.app_name:
        headers[APP_NAME_HEADER] = config.app_name
    return headers


def build_dispatch(
    payloads: PreparedPayload | Sequence[PreparedPayload],
    tags: TagSet,
    config: ClientConfig,
) -> DeliveryRequest:
    """Assemble the request for one ``log`` call.

    Parameters
    ----------
    payloads:
        One payload for the single-event endpoint, or the ordered payloads of
        a bulk call.
    tags:
        Effective, already validated tags; an empty set attaches nothing
        because the service rejects an empty ``X-LOGGLY-TAG`` header.
    config:
        Client configuration selecting endpoint, format, and tag transport.

    Returns
    -------
    DeliveryRequest
        ``POST`` request with URI, headers, and body.

    Examples
    --------
    >>> from lib_loggly.domain.config import TagTransport
    >>> cfg = ClientConfig(subdomain="s", token="tok", tag_transport=TagTransport.URL_PATH)
    >>> body = PreparedPayload(message="hi", truncated=False, body="hi", original_bytes=2)
    >>> build_dispatch(body, ("a", "b"), cfg).uri
    'https://logs-01.loggly.com/inputs/tok/tag/a,b/'
    """

    uri = config.bulk_url if config.is_bulk else config.log_url
    headers = build_headers(config)

    if isinstance(payloads, PreparedPayload):
        items: Sequence[PreparedPayload] = (payloads,)
    else:
        items = tuple(payloads)

    if config.is_bulk:
        body: str | tuple[str, ...] = tuple(item.body for item in items)
    else:
        if len(items) != 1:
            raise ValueError("single-event mode expects exactly one payload; enable is_bulk to ship sequences")
        body = items[0].body

    if tags:
        joined = ",".join(tags)
        if config.use_tag_header:
            headers[TAG_HEADER] = joined
        else:
            uri += f"/tag/{joined}/"

    return DeliveryRequest(uri=uri, method="POST", headers=headers, body=body)


__all__ = ["APP_NAME_HEADER", "TAG_HEADER", "build_dispatch", "build_headers", "resolve_effective_tags"]
