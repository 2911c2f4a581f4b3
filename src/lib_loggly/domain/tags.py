"""Tag validation for the ``X-LOGGLY-TAG`` header and ``/tag/`` path segment.

Loggly accepts short word-like labels only. Anything else is dropped silently
so one malformed tag never costs the caller the whole event.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

MAX_TAG_LENGTH = 64

_TAG_PATTERN = re.compile(r"\w[\w\-.]+", re.ASCII)

TagSet = tuple[str, ...]


def is_valid_tag(candidate: Any) -> bool:
    """Return ``True`` when ``candidate`` is safe to send as a tag.

    Examples
    --------
    >>> is_valid_tag("ok-1")
    True
    >>> is_valid_tag("bad tag!")
    False
    >>> is_valid_tag("x" * 65)
    False
    >>> is_valid_tag("caf\u00e9")
    False
    """

    if not isinstance(candidate, str) or not candidate:
        return False
    if len(candidate) > MAX_TAG_LENGTH:
        return False
    return _TAG_PATTERN.fullmatch(candidate) is not None


def resolve_tags(candidates: Any) -> TagSet:
    """Filter ``candidates`` down to the valid tags, keeping input order.

    A lone value is treated as a one-element sequence; ``None`` resolves to an
    empty set.

    Examples
    --------
    >>> resolve_tags(["ok-1", "bad tag!"])
    ('ok-1',)
    >>> resolve_tags("solo")
    ('solo',)
    >>> resolve_tags(None)
    ()
    """

    if candidates is None:
        return ()
    if isinstance(candidates, (str, bytes)) or not isinstance(candidates, Iterable):
        candidates = [candidates]
    return tuple(tag for tag in candidates if is_valid_tag(tag))


__all__ = ["MAX_TAG_LENGTH", "TagSet", "is_valid_tag", "resolve_tags"]
