"""Small helpers for test authors."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def count_keys(obj: Any) -> int:
    """Return the number of entries of a mapping (or attributes of an object)."""

    if isinstance(obj, Mapping):
        return len(obj)
    if hasattr(obj, "__dict__"):
        return len(vars(obj))
    raise TypeError(f"count_keys() expects a mapping, got {type(obj).__name__}")
