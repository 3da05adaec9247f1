"""Object-mode sink producing one structured event per lifecycle event."""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional

from tapcheck.core.models import AssertionResult, CaseError, RunSummary, TestCase

from .base import Sink

Event = Dict[str, Any]


def case_event(case: TestCase) -> Event:
    return {"type": "test", "unit": case.unit, "mode": case.mode.value}


def skip_event(case: TestCase) -> Event:
    return {"type": "skip", "unit": case.unit}


def assertion_event(result: AssertionResult) -> Event:
    return {
        "type": "assert",
        "seq": result.seq,
        "unit": result.unit,
        "given": result.given,
        "should": result.should,
        "pass": result.passed,
        "actual": result.actual,
        "expected": result.expected,
    }


def error_event(error: CaseError) -> Event:
    return {
        "type": "error",
        "unit": error.unit,
        "kind": error.kind.value,
        "message": error.message,
    }


def summary_event(summary: RunSummary) -> Event:
    return {
        "type": "summary",
        "total": summary.total,
        "pass": summary.passed,
        "fail": summary.failed,
        "errors": summary.errors,
        "skipped": summary.skipped,
        "ok": summary.ok,
        "exit_status": summary.exit_status,
    }


class ObjectSink(Sink):
    """Collects events in order; optionally forwards each one to a callback."""

    def __init__(self, on_event: Optional[Callable[[Event], None]] = None) -> None:
        self._events: List[Event] = []
        self._on_event = on_event

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def assertions(self) -> List[Event]:
        return [event for event in self._events if event["type"] == "assert"]

    def summary(self) -> Optional[Event]:
        for event in reversed(self._events):
            if event["type"] == "summary":
                return event
        return None

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)

    def on_case(self, case: TestCase) -> None:
        self._push(case_event(case))

    def on_skip(self, case: TestCase) -> None:
        self._push(skip_event(case))

    def on_assertion(self, result: AssertionResult) -> None:
        self._push(assertion_event(result))

    def on_error(self, error: CaseError) -> None:
        self._push(error_event(error))

    def on_summary(self, summary: RunSummary) -> None:
        self._push(summary_event(summary))

    def _push(self, event: Event) -> None:
        self._events.append(event)
        if self._on_event is not None:
            self._on_event(event)
