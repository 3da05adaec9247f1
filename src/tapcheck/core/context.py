"""Run context: the sequence counter, attached sinks and registered cases."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from tapcheck.reporting.base import Sink, SinkManager
from tapcheck.reporting.tap import TapSink

from .models import (
    AssertionResult,
    CaseError,
    CaseState,
    ErrorKind,
    RegistrationMode,
    RunSummary,
    TestCase,
)

logger = logging.getLogger(__name__)


class RunContext:
    """State shared by every case of one run.

    All mutation happens from synchronous calls on a single event loop, so
    each call runs to completion before another case can observe the state.
    """

    def __init__(self, sinks: Sequence[Sink] = ()) -> None:
        self._sinks = SinkManager(sinks)
        self._sequence = 0
        self._cases: List[TestCase] = []
        self._errors: List[Tuple[TestCase, CaseError]] = []
        self._started = False
        self._summary: Optional[RunSummary] = None

    @property
    def started(self) -> bool:
        return self._started

    @property
    def summary(self) -> Optional[RunSummary]:
        return self._summary

    @property
    def cases(self) -> List[TestCase]:
        return list(self._cases)

    @property
    def errors(self) -> List[CaseError]:
        return [error for _, error in self._errors]

    @property
    def has_exclusive(self) -> bool:
        return any(case.mode is RegistrationMode.ONLY for case in self._cases)

    def attach(self, sink: Sink) -> Sink:
        self._sinks.attach(sink)
        return sink

    def sinks(self) -> List[Sink]:
        return self._sinks.sinks()

    def next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def register(self, case: TestCase) -> None:
        if self._summary is not None:
            raise RuntimeError(f"Cannot register '{case.unit}': the run has already finished")
        self._cases.append(case)
        logger.debug("registered %r (%s)", case.unit, case.mode.value)

    def start(self) -> None:
        if self._started:
            raise RuntimeError("Run already started")
        if not len(self._sinks):
            self._sinks.attach(TapSink.console())
        self._started = True
        self._sinks.start()

    def open_case(self, case: TestCase) -> None:
        case.state = CaseState.RUNNING

    def announce_case(self, case: TestCase) -> None:
        self._sinks.case(case)

    def skip_case(self, case: TestCase) -> None:
        case.state = CaseState.SKIPPED
        logger.debug("skipped %r", case.unit)
        self._sinks.skip(case)

    def emit_assertion(self, result: AssertionResult) -> None:
        self._sinks.assertion(result)

    def report_error(self, case: TestCase, kind: ErrorKind, message: str) -> CaseError:
        error = CaseError(unit=case.unit, kind=kind, message=message)
        if case.error is None:
            case.error = error
        self._errors.append((case, error))
        logger.debug("%s error in %r: %s", kind.value, case.unit, message)
        self._sinks.error(error)
        return error

    def finish(self) -> RunSummary:
        if self._summary is not None:
            return self._summary
        pending = [case.unit for case in self._cases if not case.finished]
        if pending:
            raise RuntimeError(f"Cannot summarize while cases are pending: {', '.join(pending)}")
        counted = self._counted_cases()
        results = [result for case in counted for result in case.results]
        passed = sum(1 for result in results if result.passed)
        counted_ids = {id(case) for case in counted}
        errors = sum(1 for case, _ in self._errors if id(case) in counted_ids)
        self._summary = RunSummary(
            total=len(results),
            passed=passed,
            failed=len(results) - passed,
            errors=errors,
            skipped=sum(1 for case in self._cases if case.state is CaseState.SKIPPED),
        )
        self._sinks.summary(self._summary)
        return self._summary

    def _counted_cases(self) -> List[TestCase]:
        exclusive = self.has_exclusive
        return [
            case
            for case in self._cases
            if case.state is CaseState.FINALIZED and (not exclusive or case.mode is RegistrationMode.ONLY)
        ]
