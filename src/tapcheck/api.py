"""Module-level entry points backed by a default runner.

Test modules call :data:`describe` at import time; the CLI (or
:func:`run`) then executes everything registered on the default runner.
A script that registers cases but never calls :func:`run` has them run at
interpreter exit, and a failing run sets the process exit status.
"""
from __future__ import annotations

import atexit
import logging
import os
import sys
from typing import Any, Optional

from tapcheck.core import DEFAULT_TIMEOUT, RegistrationMode, TestRunner
from tapcheck.reporting import ObjectSink, Sink, TapSink

_default_runner: Optional[TestRunner] = None
_exit_hook_installed = False


def get_runner() -> TestRunner:
    """Return the default runner, creating it on first use."""

    global _default_runner
    if _default_runner is None:
        _default_runner = TestRunner()
    return _default_runner


def reset(*, timeout: Optional[float] = DEFAULT_TIMEOUT) -> TestRunner:
    """Replace the default runner with a fresh one (new counter, no sinks)."""

    global _default_runner
    _default_runner = TestRunner(timeout=timeout)
    return _default_runner


class Describe:
    """Callable registering test cases on the default runner.

    ``describe(unit, fn)`` registers a normal case, ``describe.only`` an
    exclusive one and ``describe.skip`` one that never runs. Each form can
    also be used as a decorator by omitting ``fn``.
    """

    def __call__(self, unit: str, test_function: Any = None) -> Any:
        _install_exit_hook()
        return get_runner().describe(unit, test_function, mode=RegistrationMode.NORMAL)

    def only(self, unit: str, test_function: Any = None) -> Any:
        _install_exit_hook()
        return get_runner().describe(unit, test_function, mode=RegistrationMode.ONLY)

    def skip(self, unit: str, test_function: Any = None) -> Any:
        _install_exit_hook()
        return get_runner().describe(unit, test_function, mode=RegistrationMode.SKIP)


describe = Describe()


def create_stream(*, object_mode: bool = False) -> Sink:
    """Attach and return a new sink on the default runner.

    Once any sink is attached the default console output is not used.
    """

    sink: Sink = ObjectSink() if object_mode else TapSink()
    return get_runner().context.attach(sink)


def attach(sink: Sink) -> Sink:
    return get_runner().context.attach(sink)


def run() -> int:
    """Run every case registered on the default runner; returns the exit status."""

    return get_runner().run_sync()


def _install_exit_hook() -> None:
    global _exit_hook_installed
    if not _exit_hook_installed:
        atexit.register(_run_at_exit)
        _exit_hook_installed = True


def _run_at_exit() -> None:
    runner = _default_runner
    if runner is None or runner.context.started or not runner.context.cases:
        return
    status = runner.run_sync()
    if status:
        # atexit handlers cannot change the exit status any other way.
        sys.stdout.flush()
        sys.stderr.flush()
        logging.shutdown()
        os._exit(status)
