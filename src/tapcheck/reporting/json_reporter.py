"""JSON reporter emitting structured run results."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
import time
from typing import Any, Dict, List, Optional

import click
from jsonschema import validate

from tapcheck.core.models import CaseError, CaseState, RunSummary, TestCase
from tapcheck.core.serialize import jsonify

from .base import Sink
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION


class JsonReporter(Sink):
    """Writes the run to a JSON document validated against the schema.

    Without a path the document is echoed to stdout.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = pathlib.Path(path) if path else None
        self._cases: List[TestCase] = []
        self._errors: List[CaseError] = []
        self._start_time = 0.0

    def on_start(self) -> None:
        self._cases.clear()
        self._errors.clear()
        self._start_time = time.perf_counter()

    def on_case(self, case: TestCase) -> None:
        self._cases.append(case)

    def on_skip(self, case: TestCase) -> None:
        self._cases.append(case)

    def on_error(self, error: CaseError) -> None:
        self._errors.append(error)

    def on_summary(self, summary: RunSummary) -> None:
        payload = {
            "schema_version": SCHEMA_VERSION,
            "generated_at": dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "summary": _build_summary(summary, time.perf_counter() - self._start_time),
            "cases": [_case_to_dict(case) for case in self._cases],
            "errors": [
                {"unit": error.unit, "kind": error.kind.value, "message": error.message}
                for error in self._errors
            ],
        }
        validate(instance=payload, schema=JSON_SCHEMA_V1)
        text = json.dumps(payload, indent=2)
        if self._path is None:
            click.echo(text)
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(text, encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem protection
            raise RuntimeError(f"Failed to write JSON report to {self._path}: {exc}") from exc
        click.echo(f"JSON report written to {self._path}", err=True)


def _build_summary(summary: RunSummary, duration: float) -> Dict[str, Any]:
    return {
        "total": summary.total,
        "passed": summary.passed,
        "failed": summary.failed,
        "errors": summary.errors,
        "skipped": summary.skipped,
        "ok": summary.ok,
        "duration_s": duration,
    }


def _case_status(case: TestCase) -> str:
    if case.state is CaseState.SKIPPED:
        return "skipped"
    if case.error is not None:
        return "error"
    return "passed" if case.passed else "failed"


def _case_to_dict(case: TestCase) -> Dict[str, Any]:
    return {
        "unit": case.unit,
        "mode": case.mode.value,
        "status": _case_status(case),
        "assertions": [
            {
                "seq": result.seq,
                "given": result.given,
                "should": result.should,
                "pass": result.passed,
                "actual": jsonify(result.actual),
                "expected": jsonify(result.expected),
            }
            for result in case.results
        ],
    }
