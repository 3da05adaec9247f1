"""Invoke a callable and return its failure as a value instead of raising."""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union


@dataclass(frozen=True)
class NormalValue:
    """Outcome of a call that returned normally."""

    value: Any


@dataclass(frozen=True)
class CapturedFailure:
    """Outcome of a call that raised; compared by kind and message only."""

    kind: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "CapturedFailure":
        return cls(kind=type(exc).__name__, message=str(exc))


CapturedOutcome = Union[NormalValue, CapturedFailure]


def try_invoke(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call ``fn(*args, **kwargs)`` and capture an ``Exception`` as a value.

    Returns a :class:`NormalValue` or a :class:`CapturedFailure`. When ``fn``
    returns an awaitable, a coroutine is returned instead; awaiting it yields
    the captured outcome of the awaited result.
    """

    try:
        result = fn(*args, **kwargs)
    except Exception as exc:
        return CapturedFailure.from_exception(exc)
    if inspect.isawaitable(result):
        return _capture_awaitable(result)
    return NormalValue(result)


async def _capture_awaitable(awaitable: Awaitable[Any]) -> CapturedOutcome:
    try:
        value = await awaitable
    except Exception as exc:
        return CapturedFailure.from_exception(exc)
    return NormalValue(value)


Try = try_invoke
