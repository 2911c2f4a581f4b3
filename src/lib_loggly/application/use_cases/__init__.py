"""Use cases composing the preparation and dispatch pipeline."""

from __future__ import annotations

from .build_dispatch import build_dispatch, resolve_effective_tags
from .complete_delivery import create_completion_handler
from .notify import ObserverRegistry
from .prepare_payload import prepare_payload, stringify, truncate_text

__all__ = [
    "ObserverRegistry",
    "build_dispatch",
    "create_completion_handler",
    "prepare_payload",
    "resolve_effective_tags",
    "stringify",
    "truncate_text",
]
