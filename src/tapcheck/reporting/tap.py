"""TAP v13 encoder and the text-mode sink."""
from __future__ import annotations

import io
from typing import Callable, List, Optional

import click

from tapcheck.core.models import AssertionResult, CaseError, RunSummary, TestCase

from .base import Sink

TAP_VERSION = "TAP version 13"

Writer = Callable[[str], None]


def encode_version() -> List[str]:
    return [TAP_VERSION]


def encode_header(unit: str) -> List[str]:
    return [f"# {unit}"]


def encode_skip(unit: str) -> List[str]:
    return [f"# SKIP {unit}"]


def encode_assertion(result: AssertionResult) -> List[str]:
    status = "ok" if result.passed else "not ok"
    lines = [f"{status} {result.seq} {result.description()}"]
    if not result.passed:
        diagnostic = result.diagnostic or {}
        lines.append("  ---")
        for key, value in diagnostic.items():
            lines.append(f"  {key}: {value}")
        lines.append("  ---")
    return lines


def encode_error(error: CaseError) -> List[str]:
    message_lines = error.message.splitlines() or [""]
    lines = [f"# ERROR [{error.kind.value}] {error.unit}: {message_lines[0]}"]
    lines.extend(f"#   {line}" for line in message_lines[1:])
    return lines


def encode_summary(summary: RunSummary) -> List[str]:
    lines = [
        "",
        f"1..{summary.total}",
        f"# tests {summary.total}",
        f"# pass  {summary.passed}",
    ]
    if summary.failed:
        lines.append(f"# fail  {summary.failed}")
    if summary.errors:
        lines.append(f"# errors {summary.errors}")
    if summary.ok:
        lines.extend(["", "# ok"])
    return lines


class TapSink(Sink):
    """Writes the TAP text stream line by line.

    Without a writer the lines are kept in memory and can be read back with
    :meth:`getvalue`.
    """

    def __init__(self, writer: Optional[Writer] = None) -> None:
        self._buffer: io.StringIO | None = None
        if writer is None:
            buffer = self._buffer = io.StringIO()

            def write_line(line: str) -> None:
                buffer.write(line + "\n")

            writer = write_line
        self._writer = writer

    @classmethod
    def console(cls) -> "TapSink":
        return cls(click.echo)

    def getvalue(self) -> str:
        if self._buffer is None:
            raise RuntimeError("TapSink writes to an external writer; nothing is buffered")
        return self._buffer.getvalue()

    def lines(self) -> List[str]:
        return self.getvalue().splitlines()

    def on_start(self) -> None:
        self._emit(encode_version())

    def on_case(self, case: TestCase) -> None:
        self._emit(encode_header(case.unit))

    def on_skip(self, case: TestCase) -> None:
        self._emit(encode_skip(case.unit))

    def on_assertion(self, result: AssertionResult) -> None:
        self._emit(encode_assertion(result))

    def on_error(self, error: CaseError) -> None:
        self._emit(encode_error(error))

    def on_summary(self, summary: RunSummary) -> None:
        self._emit(encode_summary(summary))

    def _emit(self, lines: List[str]) -> None:
        for line in lines:
            self._writer(line)
