"""Turns ``assert`` calls into numbered, streamed assertion results."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from .context import RunContext
from .equality import equals
from .errors import AuthoringError
from .models import MISSING, Assertion, AssertionResult, CaseState, ErrorKind, TestCase
from .serialize import serialize

logger = logging.getLogger(__name__)

ASSERTION_KEYS = ("given", "should", "actual", "expected")
DEFAULT_GIVEN = "no given"
DEFAULT_SHOULD = "no should"

_NO_SPEC: Any = object()


def build_assertion(spec: Any = _NO_SPEC, **fields: Any) -> Assertion:
    """Validate the argument of an ``assert`` call.

    Accepts a mapping, keyword fields, or both (keywords win). Raises
    :class:`AuthoringError` for a non-mapping argument (``None`` included), a
    call with no argument at all, unknown keys, or a ``given``/``should`` that
    is not a string.
    """

    if spec is _NO_SPEC:
        if not fields:
            raise AuthoringError(f"assert() requires a mapping or keyword fields ({', '.join(ASSERTION_KEYS)})")
        spec = {}
    if not isinstance(spec, Mapping):
        raise AuthoringError(
            f"assert() expects a mapping with keys {', '.join(ASSERTION_KEYS)}; "
            f"got {type(spec).__name__}"
        )
    data = dict(spec)
    data.update(fields)
    unknown = sorted(str(key) for key in data if key not in ASSERTION_KEYS)
    if unknown:
        raise AuthoringError(f"assert() got unexpected keys: {', '.join(unknown)}")
    for key, default in (("given", DEFAULT_GIVEN), ("should", DEFAULT_SHOULD)):
        if key not in data:
            logger.warning("assert() called without '%s'; using %r", key, default)
            data[key] = default
        elif not isinstance(data[key], str):
            raise AuthoringError(f"assert() '{key}' must be a string, got {type(data[key]).__name__}")
    return Assertion(
        given=data["given"],
        should=data["should"],
        actual=data.get("actual", MISSING),
        expected=data.get("expected", MISSING),
    )


class AssertionRecorder:
    """Compares, numbers and forwards assertions for one run context."""

    def __init__(self, context: RunContext) -> None:
        self._context = context

    def record(self, case: TestCase, assertion: Assertion) -> Optional[AssertionResult]:
        if case.state is not CaseState.RUNNING:
            self._context.report_error(
                case,
                ErrorKind.AUTHORING,
                f"assert() called after the test finished: Given {assertion.given}: should {assertion.should}",
            )
            return None
        passed = equals(assertion.actual, assertion.expected)
        diagnostic = None
        if not passed:
            diagnostic = {
                "actual": serialize(assertion.actual),
                "expected": serialize(assertion.expected),
            }
        result = AssertionResult(
            seq=self._context.next_sequence(),
            unit=case.unit,
            given=assertion.given,
            should=assertion.should,
            actual=assertion.actual,
            expected=assertion.expected,
            passed=passed,
            diagnostic=diagnostic,
        )
        case.results.append(result)
        self._context.emit_assertion(result)
        return result

    def bind(self, case: TestCase) -> "BoundAssert":
        return BoundAssert(self, case)


class BoundAssert:
    """The ``assert`` callable handed to a test function."""

    def __init__(self, recorder: AssertionRecorder, case: TestCase) -> None:
        self._recorder = recorder
        self._case = case

    def __call__(self, spec: Any = _NO_SPEC, /, **fields: Any) -> None:
        self._recorder.record(self._case, build_assertion(spec, **fields))
