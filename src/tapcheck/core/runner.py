"""Test runner registering cases and driving them on the event loop."""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, List, Optional

from .context import RunContext
from .errors import AuthoringError
from .models import CaseState, ErrorKind, RegistrationMode, RunSummary, TestCase
from .recorder import AssertionRecorder

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

TestFunction = Callable[..., Any]


class TestRunner:
    """Registers test cases and awaits each one's completion signal.

    Cases registered before :meth:`run` start together when the run begins;
    cases registered while the run is active start right away. ``timeout`` is
    the number of seconds a case may take to settle before it is reported as
    incomplete (``None`` waits forever).
    """

    __test__ = False

    def __init__(self, context: Optional[RunContext] = None, *, timeout: Optional[float] = DEFAULT_TIMEOUT) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive or None")
        self.context = context or RunContext()
        self.timeout = timeout
        self._recorder = AssertionRecorder(self.context)
        self._tasks: List[asyncio.Task[None]] = []
        self._running = False

    def describe(
        self,
        unit: str,
        test_function: Optional[TestFunction] = None,
        *,
        mode: RegistrationMode = RegistrationMode.NORMAL,
    ) -> Any:
        """Register ``test_function`` under ``unit``.

        Without ``test_function`` this returns a decorator.
        """

        if test_function is None:

            def decorator(fn: TestFunction) -> TestFunction:
                self.describe(unit, fn, mode=mode)
                return fn

            return decorator
        if not isinstance(unit, str):
            raise TypeError(f"describe() unit must be a string, got {type(unit).__name__}")
        if not callable(test_function):
            raise TypeError("describe() test_function must be callable")
        case = TestCase(unit=unit, test_function=test_function, mode=RegistrationMode(mode))
        self.context.register(case)
        if self._running:
            self._schedule(case)
        return case

    def only(self, unit: str, test_function: Optional[TestFunction] = None) -> Any:
        return self.describe(unit, test_function, mode=RegistrationMode.ONLY)

    def skip(self, unit: str, test_function: Optional[TestFunction] = None) -> Any:
        return self.describe(unit, test_function, mode=RegistrationMode.SKIP)

    async def run(self) -> RunSummary:
        """Execute every registered case and return the run summary."""

        if self._running or self.context.started:
            raise RuntimeError("This runner has already been started")
        self._running = True
        self.context.start()
        for case in self.context.cases:
            self._schedule(case)
        try:
            while True:
                pending = [task for task in self._tasks if not task.done()]
                if not pending:
                    break
                await asyncio.wait(pending)
        finally:
            self._running = False
        return self.context.finish()

    def run_sync(self) -> int:
        """Run on a fresh event loop and return the process exit status."""

        return asyncio.run(self.run()).exit_status

    def _schedule(self, case: TestCase) -> None:
        if case.state is not CaseState.REGISTERED:
            return
        if case.mode is RegistrationMode.SKIP or (
            self.context.has_exclusive and case.mode is not RegistrationMode.ONLY
        ):
            self.context.skip_case(case)
            return
        self.context.open_case(case)
        self._tasks.append(asyncio.get_running_loop().create_task(self._execute(case)))

    async def _execute(self, case: TestCase) -> None:
        signal = asyncio.ensure_future(self._invoke(case))
        try:
            done, _ = await asyncio.wait({signal}, timeout=self.timeout)
            if not done:
                signal.cancel()
                self.context.report_error(
                    case,
                    ErrorKind.INCOMPLETE,
                    f"did not complete: completion signal not settled within {self.timeout:g}s",
                )
            elif signal.cancelled():
                self.context.report_error(case, ErrorKind.UNCAUGHT, "CancelledError: test was cancelled")
            else:
                signal.result()
        except AuthoringError as exc:
            self.context.report_error(case, ErrorKind.AUTHORING, str(exc))
        except Exception as exc:
            self.context.report_error(case, ErrorKind.UNCAUGHT, f"{type(exc).__name__}: {exc}")
        finally:
            self._settle(case)

    async def _invoke(self, case: TestCase) -> None:
        # Runs as the case's own task: the header lands right before its assertions.
        self.context.announce_case(case)
        outcome = case.test_function(self._recorder.bind(case))
        if inspect.isawaitable(outcome):
            await outcome

    def _settle(self, case: TestCase) -> None:
        # _execute is the only caller and runs once per case.
        case.state = CaseState.COMPLETED
        logger.debug("completed %r (%s)", case.unit, "pass" if case.passed else "fail")
        case.state = CaseState.FINALIZED
