"""Terminal reporter rendering human-readable, colored progress."""
from __future__ import annotations

import time

import click

from tapcheck.core.models import AssertionResult, CaseError, RunSummary, TestCase

from .base import Sink


STATUS_COLORS = {
    "pass": "green",
    "fail": "red",
    "error": "yellow",
    "skip": "blue",
}


class TerminalReporter(Sink):
    """Human-readable sink that streams to stdout; not TAP."""

    def __init__(self, *, use_color: bool = True) -> None:
        self._use_color = use_color
        self._start_time = 0.0
        self._failures: list[AssertionResult] = []

    def on_start(self) -> None:
        self._start_time = time.perf_counter()
        self._failures.clear()

    def on_case(self, case: TestCase) -> None:
        click.echo(self._styled(case.unit, force_color="cyan"))

    def on_skip(self, case: TestCase) -> None:
        click.echo(f"{self._styled('SKIP', force_color=STATUS_COLORS['skip'])} {case.unit}")

    def on_assertion(self, result: AssertionResult) -> None:
        status = "pass" if result.passed else "fail"
        label = self._styled(status.upper(), force_color=STATUS_COLORS[status])
        click.echo(f"  [{result.seq}] {label} {result.description()}")
        if not result.passed:
            self._failures.append(result)
            self._print_failure_details(result)

    def on_error(self, error: CaseError) -> None:
        label = self._styled("ERROR", force_color=STATUS_COLORS["error"])
        click.echo(f"{label} [{error.kind.value}] {error.unit}: {error.message}")

    def on_summary(self, summary: RunSummary) -> None:
        duration = time.perf_counter() - self._start_time
        click.echo(
            self._styled(
                f"Summary: total={summary.total} passed={summary.passed} failed={summary.failed} "
                f"errors={summary.errors} skipped={summary.skipped} duration={duration:.2f}s",
                force_color="green" if summary.ok else "red",
            )
        )
        if self._failures:
            click.echo(self._styled("Failure details:", force_color="red"))
            for result in self._failures:
                click.echo(f"  [{result.seq}] {result.unit}: {result.description()}")
                self._print_failure_details(result, indent="    ")

    def _styled(self, text: str, *, force_color: str | None = None) -> str:
        if not self._use_color or not force_color:
            return text
        return click.style(text, fg=force_color)

    def _print_failure_details(self, result: AssertionResult, *, indent: str = "      ") -> None:
        diagnostic = result.diagnostic or {}
        for key, value in diagnostic.items():
            click.echo(f"{indent}{key}: {value}")
