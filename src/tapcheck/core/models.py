"""Core dataclasses shared across tapcheck subsystems."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional


class _Missing:
    """Marker for an ``actual``/``expected`` key that was never supplied."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class RegistrationMode(str, Enum):
    NORMAL = "normal"
    ONLY = "only"
    SKIP = "skip"


class CaseState(str, Enum):
    REGISTERED = "registered"
    RUNNING = "running"
    COMPLETED = "completed"
    FINALIZED = "finalized"
    SKIPPED = "skipped"


class ErrorKind(str, Enum):
    AUTHORING = "authoring"
    UNCAUGHT = "uncaught"
    INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class Assertion:
    """Validated input of a single ``assert`` call."""

    given: str
    should: str
    actual: Any = MISSING
    expected: Any = MISSING


@dataclass(frozen=True)
class AssertionResult:
    """Recorded outcome of one ``assert`` call."""

    seq: int
    unit: str
    given: str
    should: str
    actual: Any
    expected: Any
    passed: bool
    diagnostic: Optional[Mapping[str, str]] = None

    def description(self) -> str:
        return f"Given {self.given}: should {self.should}"


@dataclass(frozen=True)
class CaseError:
    """A harness-level failure attributed to one test case."""

    unit: str
    kind: ErrorKind
    message: str


@dataclass
class TestCase:
    """One registered unit of test execution (a ``describe`` call)."""

    __test__ = False

    unit: str
    test_function: Optional[Callable[..., Any]]
    mode: RegistrationMode = RegistrationMode.NORMAL
    results: List[AssertionResult] = field(default_factory=list)
    state: CaseState = CaseState.REGISTERED
    error: Optional[CaseError] = None

    @property
    def passed(self) -> bool:
        return self.error is None and all(result.passed for result in self.results)

    @property
    def finished(self) -> bool:
        return self.state in (CaseState.FINALIZED, CaseState.SKIPPED)


@dataclass(frozen=True)
class RunSummary:
    """Totals computed once every registered case has been finalized."""

    total: int
    passed: int
    failed: int
    errors: int = 0
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0 and self.errors == 0

    @property
    def exit_status(self) -> int:
        return 0 if self.ok else 1
