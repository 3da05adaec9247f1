from __future__ import annotations

import json
from unittest import mock

from tapcheck.core import CaseError, ErrorKind, RunSummary
from tapcheck.core.models import AssertionResult, CaseState, RegistrationMode, TestCase
from tapcheck.reporting import JsonReporter, ObjectSink, SinkManager, TapSink, TerminalReporter
from tapcheck.reporting.tap import encode_assertion, encode_error, encode_summary


def _result(seq: int, passed: bool, actual=1, expected=1) -> AssertionResult:
    return AssertionResult(
        seq=seq,
        unit="sum()",
        given="two numbers",
        should="add them",
        actual=actual,
        expected=expected,
        passed=passed,
        diagnostic=None if passed else {"actual": json.dumps(actual), "expected": json.dumps(expected)},
    )


def test_encode_failing_assertion_block() -> None:
    assert encode_assertion(_result(3, False, actual=[1, 2], expected="x")) == [
        "not ok 3 Given two numbers: should add them",
        "  ---",
        '  actual: [1, 2]',
        '  expected: "x"',
        "  ---",
    ]


def test_encode_summary_variants() -> None:
    assert encode_summary(RunSummary(total=3, passed=2, failed=1)) == [
        "",
        "1..3",
        "# tests 3",
        "# pass  2",
        "# fail  1",
    ]
    assert encode_summary(RunSummary(total=0, passed=0, failed=0, errors=2))[-1] == "# errors 2"
    assert encode_summary(RunSummary(total=1, passed=1, failed=0))[-2:] == ["", "# ok"]


def test_encode_multiline_error() -> None:
    error = CaseError(unit="io()", kind=ErrorKind.UNCAUGHT, message="OSError: first\nsecond")
    assert encode_error(error) == ["# ERROR [uncaught] io(): OSError: first", "#   second"]


def test_sink_manager_fans_out_to_every_sink() -> None:
    first, second = ObjectSink(), ObjectSink()
    manager = SinkManager([first, second])
    manager.assertion(_result(1, True))
    assert first.events == second.events
    assert first.assertions()[0]["seq"] == 1


def test_object_sink_callback_and_summary() -> None:
    seen = []
    sink = ObjectSink(on_event=seen.append)
    sink.on_summary(RunSummary(total=1, passed=1, failed=0))
    assert seen == sink.events
    assert sink.summary()["exit_status"] == 0


def test_tap_sink_with_external_writer() -> None:
    lines: list[str] = []
    sink = TapSink(lines.append)
    sink.on_start()
    sink.on_assertion(_result(1, True))
    assert lines == ["TAP version 13", "ok 1 Given two numbers: should add them"]


def test_json_reporter_writes_file(tmp_path) -> None:
    case = TestCase(unit="sum()", test_function=None, mode=RegistrationMode.NORMAL)
    case.results.append(_result(1, True))
    case.state = CaseState.FINALIZED
    skipped = TestCase(unit="later", test_function=None, mode=RegistrationMode.SKIP, state=CaseState.SKIPPED)
    output_path = tmp_path / "reports" / "report.json"
    reporter = JsonReporter(path=str(output_path))
    reporter.on_start()
    reporter.on_case(case)
    reporter.on_skip(skipped)
    with mock.patch("pathlib.Path.mkdir") as mock_mkdir, mock.patch("pathlib.Path.write_text") as mock_write:
        reporter.on_summary(RunSummary(total=1, passed=1, failed=0, skipped=1))
        mock_mkdir.assert_called()
        mock_write.assert_called_once()
        payload = json.loads(mock_write.call_args.args[0])
    assert payload["summary"]["total"] == 1
    assert payload["cases"][0]["assertions"][0]["given"] == "two numbers"
    assert [c["status"] for c in payload["cases"]] == ["passed", "skipped"]
    assert payload["generated_at"].endswith("Z")


def test_terminal_reporter_renders_failure_details(capsys) -> None:
    case = TestCase(unit="sum()", test_function=None)
    reporter = TerminalReporter(use_color=False)
    reporter.on_start()
    reporter.on_case(case)
    reporter.on_assertion(_result(1, False, actual=1, expected=2))
    reporter.on_summary(RunSummary(total=1, passed=0, failed=1))
    output = capsys.readouterr().out
    assert "[1] FAIL Given two numbers: should add them" in output
    assert "Failure details:" in output
    assert "actual: 1" in output
    assert "expected: 2" in output
    assert "Summary: total=1 passed=0 failed=1" in output
