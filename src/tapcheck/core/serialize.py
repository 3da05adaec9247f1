"""Render assertion operands for TAP diagnostics and JSON reports."""
from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping, Set
from typing import Any

import numpy as np

from .capture import CapturedFailure, NormalValue
from .models import MISSING


def jsonify(value: Any) -> Any:
    """Convert ``value`` into plain JSON-compatible data."""

    return _jsonify(value, set())


def serialize(value: Any) -> str:
    """Single-line text form of ``value`` (JSON, so also a YAML flow scalar)."""

    if value is MISSING:
        return "undefined"
    return json.dumps(jsonify(value), ensure_ascii=False, sort_keys=False)


def _jsonify(value: Any, seen: set[int]) -> Any:
    if isinstance(value, NormalValue):
        return _jsonify(value.value, seen)
    if value is MISSING:
        return None
    if isinstance(value, BaseException):
        value = CapturedFailure.from_exception(value)
    if isinstance(value, CapturedFailure):
        return {"kind": value.kind, "message": value.message}
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, np.generic):
        return value.item()
    if id(value) in seen:
        return "[Circular]"
    seen = seen | {id(value)}
    if isinstance(value, np.ndarray):
        return _jsonify(value.tolist(), seen)
    if isinstance(value, Mapping):
        return {str(key): _jsonify(val, seen) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify(item, seen) for item in value]
    if isinstance(value, Set):
        return sorted((_jsonify(item, seen) for item in value), key=repr)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonify(getattr(value, f.name), seen) for f in dataclasses.fields(value)}
    return repr(value)
