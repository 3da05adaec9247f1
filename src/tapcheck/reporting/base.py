"""Sink interface definitions."""
from __future__ import annotations

from typing import List, Sequence

from tapcheck.core.models import AssertionResult, CaseError, RunSummary, TestCase


class Sink:
    """Interface for output destinations of a run.

    Every hook has a no-op default so a sink only overrides what it renders.
    """

    def on_start(self) -> None:
        pass

    def on_case(self, case: TestCase) -> None:
        pass

    def on_skip(self, case: TestCase) -> None:
        pass

    def on_assertion(self, result: AssertionResult) -> None:
        pass

    def on_error(self, error: CaseError) -> None:
        pass

    def on_summary(self, summary: RunSummary) -> None:
        pass


class SinkManager:
    """Dispatches lifecycle callbacks to multiple sinks."""

    def __init__(self, sinks: Sequence[Sink] = ()) -> None:
        self._sinks = list(sinks)

    def attach(self, sink: Sink) -> None:
        if sink not in self._sinks:
            self._sinks.append(sink)

    def start(self) -> None:
        for sink in self._sinks:
            sink.on_start()

    def case(self, case: TestCase) -> None:
        for sink in self._sinks:
            sink.on_case(case)

    def skip(self, case: TestCase) -> None:
        for sink in self._sinks:
            sink.on_skip(case)

    def assertion(self, result: AssertionResult) -> None:
        for sink in self._sinks:
            sink.on_assertion(result)

    def error(self, error: CaseError) -> None:
        for sink in self._sinks:
            sink.on_error(error)

    def summary(self, summary: RunSummary) -> None:
        for sink in self._sinks:
            sink.on_summary(summary)

    def sinks(self) -> List[Sink]:
        return list(self._sinks)

    def __len__(self) -> int:
        return len(self._sinks)
