import asyncio

import pytest

from tapcheck import api
from tapcheck.core import RunContext, TestRunner
from tapcheck.reporting import ObjectSink, TapSink


@pytest.fixture
def tap_sink() -> TapSink:
    return TapSink()


@pytest.fixture
def object_sink() -> ObjectSink:
    return ObjectSink()


@pytest.fixture
def runner(tap_sink: TapSink, object_sink: ObjectSink) -> TestRunner:
    """A runner writing to an in-memory TAP sink and an object sink."""

    return TestRunner(RunContext([tap_sink, object_sink]), timeout=1.0)


@pytest.fixture
def run_all():
    def _run(runner: TestRunner):
        return asyncio.run(runner.run())

    return _run


@pytest.fixture(autouse=True)
def fresh_default_runner():
    """Isolate the module-level ``describe`` registry between tests."""

    api.reset()
    yield
    api.reset()
