"""Core models and helpers exposed at the package level."""
from .models import (
    MISSING,
    Assertion,
    AssertionResult,
    CaseError,
    CaseState,
    ErrorKind,
    RegistrationMode,
    RunSummary,
    TestCase,
)
from .capture import CapturedFailure, NormalValue, Try, try_invoke
from .equality import equals
from .errors import AuthoringError, ConfigError, HarnessError
from .context import RunContext
from .recorder import AssertionRecorder, BoundAssert, build_assertion
from .runner import DEFAULT_TIMEOUT, TestRunner
from .utils import count_keys

__all__ = [
    "MISSING",
    "Assertion",
    "AssertionRecorder",
    "AssertionResult",
    "AuthoringError",
    "BoundAssert",
    "CapturedFailure",
    "CaseError",
    "CaseState",
    "ConfigError",
    "DEFAULT_TIMEOUT",
    "ErrorKind",
    "HarnessError",
    "NormalValue",
    "RegistrationMode",
    "RunContext",
    "RunSummary",
    "TestCase",
    "TestRunner",
    "Try",
    "build_assertion",
    "count_keys",
    "equals",
    "try_invoke",
]
