"""Structural deep equality used by every assertion."""
from __future__ import annotations

import dataclasses
import numbers
from collections.abc import Mapping, Sequence, Set
from typing import Any

import numpy as np

from .capture import CapturedFailure, NormalValue
from .models import MISSING

_Pair = tuple[int, int]


def equals(actual: Any, expected: Any) -> bool:
    """Return True when ``actual`` and ``expected`` are structurally equal."""

    return _equals(actual, expected, set())


def _normalize(value: Any) -> Any:
    while isinstance(value, NormalValue):
        value = value.value
    if isinstance(value, BaseException):
        return CapturedFailure.from_exception(value)
    if isinstance(value, np.generic):
        return value.item()
    return value


def _equals(actual: Any, expected: Any, visited: set[_Pair]) -> bool:
    actual = _normalize(actual)
    expected = _normalize(expected)
    if actual is expected:
        return True
    if actual is None or expected is None or actual is MISSING or expected is MISSING:
        return False
    if isinstance(actual, CapturedFailure) or isinstance(expected, CapturedFailure):
        return (
            isinstance(actual, CapturedFailure)
            and isinstance(expected, CapturedFailure)
            and actual.kind == expected.kind
            and actual.message == expected.message
        )
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    if isinstance(actual, numbers.Number) or isinstance(expected, numbers.Number):
        return _numbers_equal(actual, expected)
    if isinstance(actual, (str, bytes, bytearray)) or isinstance(expected, (str, bytes, bytearray)):
        return type(actual) is type(expected) and actual == expected

    pair = (id(actual), id(expected))
    if pair in visited:
        return True
    visited.add(pair)

    if isinstance(actual, np.ndarray) or isinstance(expected, np.ndarray):
        return _arrays_equal(actual, expected, visited)
    if isinstance(actual, Mapping) or isinstance(expected, Mapping):
        if not (isinstance(actual, Mapping) and isinstance(expected, Mapping)):
            return False
        return _mappings_equal(actual, expected, visited)
    if isinstance(actual, Set) or isinstance(expected, Set):
        if not (isinstance(actual, Set) and isinstance(expected, Set)):
            return False
        return _sets_equal(actual, expected, visited)
    if isinstance(actual, Sequence) or isinstance(expected, Sequence):
        if type(actual) is not type(expected):
            return False
        return _sequences_equal(actual, expected, visited)
    if type(actual) is not type(expected):
        return False
    fields_a = _object_fields(actual)
    fields_e = _object_fields(expected)
    if fields_a is not None and fields_e is not None:
        return _mappings_equal(fields_a, fields_e, visited)
    return bool(actual == expected)


def _numbers_equal(actual: Any, expected: Any) -> bool:
    if not (isinstance(actual, numbers.Number) and isinstance(expected, numbers.Number)):
        return False
    if actual != actual and expected != expected:
        # NaN on both sides.
        return True
    return bool(actual == expected)


def _arrays_equal(actual: Any, expected: Any, visited: set[_Pair]) -> bool:
    if not (isinstance(actual, np.ndarray) and isinstance(expected, np.ndarray)):
        return False
    if actual.shape != expected.shape:
        return False
    return _sequences_equal(actual.tolist(), expected.tolist(), visited)


def _mappings_equal(actual: Mapping[Any, Any], expected: Mapping[Any, Any], visited: set[_Pair]) -> bool:
    if set(actual.keys()) != set(expected.keys()):
        return False
    return all(_equals(actual[key], expected[key], visited) for key in actual)


def _sets_equal(actual: Set[Any], expected: Set[Any], visited: set[_Pair]) -> bool:
    if len(actual) != len(expected):
        return False
    unmatched = list(expected)
    for item in actual:
        for index, candidate in enumerate(unmatched):
            if _equals(item, candidate, visited):
                del unmatched[index]
                break
        else:
            return False
    return True


def _sequences_equal(actual: Sequence[Any], expected: Sequence[Any], visited: set[_Pair]) -> bool:
    if len(actual) != len(expected):
        return False
    return all(_equals(a, e, visited) for a, e in zip(actual, expected))


def _object_fields(value: Any) -> Mapping[str, Any] | None:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    # Types with their own __eq__ keep their semantics.
    if type(value).__eq__ is not object.__eq__ or callable(value):
        return None
    if hasattr(value, "__dict__"):
        return vars(value)
    return None
