from __future__ import annotations

import asyncio

import pytest

from tapcheck.core import (
    AuthoringError,
    CaseState,
    ErrorKind,
    RegistrationMode,
    Try,
    TestRunner,
)


def _sum(*values):
    return sum(values)


def _parse_age(text):
    value = int(text)
    if value < 0:
        raise ValueError("age must be positive")
    return value


def test_scenarios_produce_tap_lines(runner, tap_sink, run_all) -> None:
    def sum_cases(check):
        check(given="no arguments", should="return 0", actual=_sum(), expected=0)
        check(given="negative numbers", should="return the correct sum", actual=_sum(-1, -2), expected=-3)

    runner.describe("sum()", sum_cases)
    summary = run_all(runner)

    assert tap_sink.lines() == [
        "TAP version 13",
        "# sum()",
        "ok 1 Given no arguments: should return 0",
        "ok 2 Given negative numbers: should return the correct sum",
        "",
        "1..2",
        "# tests 2",
        "# pass  2",
        "",
        "# ok",
    ]
    assert summary.exit_status == 0


def test_mismatch_records_diagnostic_and_fails_run(runner, tap_sink, run_all) -> None:
    runner.describe("mismatch", lambda check: check({"given": "mismatch", "should": "fail", "actual": 1, "expected": 2}))
    summary = run_all(runner)

    lines = tap_sink.lines()
    assert "not ok 1 Given mismatch: should fail" in lines
    start = lines.index("not ok 1 Given mismatch: should fail")
    assert lines[start + 1 : start + 5] == ["  ---", "  actual: 1", "  expected: 2", "  ---"]
    assert lines[-1] == "# fail  1"
    assert "# ok" not in lines
    assert summary.failed == 1
    assert summary.exit_status == 1


def test_captured_failure_matches_expected_error(runner, object_sink, run_all) -> None:
    def parse_cases(check):
        check(
            given="a negative age",
            should="raise a ValueError",
            actual=Try(_parse_age, "-1"),
            expected=ValueError("age must be positive"),
        )
        check(given="a valid age", should="return the number", actual=Try(_parse_age, "42"), expected=42)

    runner.describe("parse_age()", parse_cases)
    summary = run_all(runner)

    assert [event["pass"] for event in object_sink.assertions()] == [True, True]
    assert summary.ok


def test_sequence_numbers_are_global_across_interleaved_cases(runner, object_sink, run_all) -> None:
    async def first(check):
        check(given="a", should="1", actual=1, expected=1)
        await asyncio.sleep(0)
        check(given="a", should="3", actual=1, expected=1)

    async def second(check):
        check(given="b", should="2", actual=1, expected=1)
        await asyncio.sleep(0)
        check(given="b", should="4", actual=1, expected=2)

    runner.describe("first", first)
    runner.describe("second", second)
    summary = run_all(runner)

    events = object_sink.assertions()
    assert [event["seq"] for event in events] == [1, 2, 3, 4]
    assert [event["unit"] for event in events] == ["first", "second", "first", "second"]
    assert (summary.total, summary.passed, summary.failed) == (4, 3, 1)


def test_headers_precede_assertions(runner, object_sink, run_all) -> None:
    runner.describe("alpha", lambda check: check(given="x", should="y", actual=1, expected=1))
    run_all(runner)
    types = [event["type"] for event in object_sink.events]
    assert types == ["test", "assert", "summary"]


def test_each_header_sits_above_its_own_assertions(runner, tap_sink, run_all) -> None:
    runner.describe("A", lambda check: check(given="a", should="pass", actual=1, expected=1))
    runner.describe("B", lambda check: check(given="b", should="pass", actual=2, expected=2))
    run_all(runner)

    assert tap_sink.lines()[1:5] == [
        "# A",
        "ok 1 Given a: should pass",
        "# B",
        "ok 2 Given b: should pass",
    ]


def test_only_restricts_execution_and_totals(runner, object_sink, run_all) -> None:
    calls = []

    def normal(check):
        calls.append("normal")
        check(given="n", should="n", actual=1, expected=2)

    def exclusive(check):
        calls.append("only")
        check(given="o", should="o", actual=1, expected=1)

    runner.describe("normal", normal)
    runner.only("exclusive", exclusive)
    summary = run_all(runner)

    assert calls == ["only"]
    assert (summary.total, summary.passed, summary.failed, summary.skipped) == (1, 1, 0, 1)
    assert [event["unit"] for event in object_sink.assertions()] == ["exclusive"]


def test_skip_never_invokes_function(runner, tap_sink, run_all) -> None:
    called = []
    case = runner.skip("later", lambda check: called.append(True))
    summary = run_all(runner)

    assert called == []
    assert case.state is CaseState.SKIPPED
    assert "# SKIP later" in tap_sink.lines()
    assert summary.total == 0
    assert summary.skipped == 1


def test_describe_works_as_decorator(runner, run_all) -> None:
    @runner.describe("decorated")
    def decorated(check):
        check(given="a decorator", should="register", actual=True, expected=True)

    summary = run_all(runner)
    assert summary.total == 1
    assert runner.context.cases[0].mode is RegistrationMode.NORMAL


def test_uncaught_failure_is_reported_without_stopping_siblings(runner, object_sink, run_all) -> None:
    async def broken(check):
        check(given="before", should="record", actual=1, expected=1)
        raise RuntimeError("boom")

    runner.describe("broken", broken)
    runner.describe("healthy", lambda check: check(given="sibling", should="run", actual=1, expected=1))
    summary = run_all(runner)

    errors = [event for event in object_sink.events if event["type"] == "error"]
    assert errors == [{"type": "error", "unit": "broken", "kind": "uncaught", "message": "RuntimeError: boom"}]
    assert summary.total == 2
    assert summary.failed == 0
    assert summary.errors == 1
    assert summary.exit_status == 1


def test_cancelled_case_is_reported_as_uncaught(runner, object_sink, run_all) -> None:
    async def cancelled(check):
        check(given="before", should="record", actual=1, expected=1)
        future = asyncio.get_running_loop().create_future()
        future.cancel()
        await future

    runner.describe("cancelled", cancelled)
    summary = run_all(runner)

    errors = [event for event in object_sink.events if event["type"] == "error"]
    assert errors == [
        {"type": "error", "unit": "cancelled", "kind": "uncaught", "message": "CancelledError: test was cancelled"}
    ]
    assert runner.context.cases[0].state is CaseState.FINALIZED
    assert summary.errors == 1
    assert summary.exit_status == 1


def test_authoring_error_for_non_mapping_argument(runner, tap_sink, run_all) -> None:
    runner.describe("bad assert", lambda check: check(["not", "a", "mapping"]))
    summary = run_all(runner)

    assert runner.context.errors[0].kind is ErrorKind.AUTHORING
    assert any(line.startswith("# ERROR [authoring] bad assert: assert() expects a mapping") for line in tap_sink.lines())
    assert "# errors 1" in tap_sink.lines()
    assert summary.exit_status == 1


def test_none_argument_is_an_authoring_error(runner, tap_sink, run_all) -> None:
    runner.describe("none assert", lambda check: check(None))
    summary = run_all(runner)

    assert runner.context.errors[0].kind is ErrorKind.AUTHORING
    assert "got NoneType" in runner.context.errors[0].message
    assert summary.total == 0
    assert summary.exit_status == 1


def test_assert_without_arguments_is_rejected() -> None:
    from tapcheck.core import build_assertion

    with pytest.raises(AuthoringError, match="requires a mapping"):
        build_assertion()


def test_unknown_assert_keys_are_rejected() -> None:
    from tapcheck.core import build_assertion

    with pytest.raises(AuthoringError):
        build_assertion({"given": "a", "should": "b", "actaul": 1})


def test_missing_operands_compare_as_missing(runner, object_sink, run_all) -> None:
    def partial(check):
        check(given="nothing", should="be equal")
        check(given="only actual", should="fail", actual=None)

    runner.describe("missing", partial)
    run_all(runner)
    assert [event["pass"] for event in object_sink.assertions()] == [True, False]


def test_missing_descriptions_use_fallbacks(runner, tap_sink, run_all) -> None:
    runner.describe("fallbacks", lambda check: check(actual=1, expected=1))
    run_all(runner)
    assert "ok 1 Given no given: should no should" in tap_sink.lines()


def test_hanging_case_is_reported_incomplete(tap_sink, object_sink, run_all) -> None:
    from tapcheck.core import RunContext

    runner = TestRunner(RunContext([tap_sink, object_sink]), timeout=0.05)

    async def hangs(check):
        await asyncio.get_running_loop().create_future()

    runner.describe("hangs", hangs)
    runner.describe("finishes", lambda check: check(given="a", should="b", actual=1, expected=1))
    summary = run_all(runner)

    (error,) = runner.context.errors
    assert error.kind is ErrorKind.INCOMPLETE
    assert "did not complete" in error.message
    assert summary.total == 1
    assert summary.exit_status == 1


def test_returned_future_is_the_completion_signal(runner, object_sink, run_all) -> None:
    def with_future(check):
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def finish():
            check(given="a callback", should="record before settling", actual=2, expected=2)
            future.set_result(None)

        loop.call_soon(finish)
        return future

    runner.describe("callback style", with_future)
    summary = run_all(runner)
    assert summary.total == 1
    assert runner.context.cases[0].state is CaseState.FINALIZED


def test_assert_after_completion_is_an_authoring_error(runner, run_all) -> None:
    leaked = []

    def leaks(check):
        leaked.append(check)

    runner.describe("leaky", leaks)

    async def late(check):
        await asyncio.sleep(0.01)
        leaked[0](given="late", should="not record", actual=1, expected=1)

    runner.describe("late caller", late)
    summary = run_all(runner)

    assert runner.context.cases[0].results == []
    assert runner.context.errors[0].kind is ErrorKind.AUTHORING
    assert summary.total == 0
    assert summary.exit_status == 1


def test_nested_describe_starts_immediately(runner, object_sink, run_all) -> None:
    async def outer(check):
        runner.describe("inner", lambda inner_check: inner_check(given="nested", should="run", actual=1, expected=1))
        check(given="outer", should="run", actual=1, expected=1)

    runner.describe("outer", outer)
    summary = run_all(runner)
    assert summary.total == 2
    assert sorted(event["unit"] for event in object_sink.assertions()) == ["inner", "outer"]


def test_runner_cannot_run_twice(runner, run_all) -> None:
    run_all(runner)
    with pytest.raises(RuntimeError):
        run_all(runner)


def test_invalid_timeout_rejected() -> None:
    with pytest.raises(ValueError):
        TestRunner(timeout=0)
