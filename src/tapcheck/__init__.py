"""tapcheck package initialization."""
from __future__ import annotations

import importlib
import os
from typing import Iterable

from .api import attach, create_stream, describe, get_runner, reset, run
from .core import MISSING, CapturedFailure, NormalValue, Try, count_keys, equals, try_invoke
from .version import __version__

countKeys = count_keys
createStream = create_stream

__all__ = [
    "__version__",
    "MISSING",
    "CapturedFailure",
    "NormalValue",
    "Try",
    "attach",
    "bootstrap",
    "countKeys",
    "count_keys",
    "createStream",
    "create_stream",
    "describe",
    "equals",
    "get_runner",
    "reset",
    "run",
    "try_invoke",
]

REQUIRES_ENV = "TAPCHECK_REQUIRES"


def bootstrap(requires: Iterable[str] = ()) -> None:
    """Import modules that must load before any test file.

    Modules come from ``requires`` and from the comma-separated
    ``TAPCHECK_REQUIRES`` environment variable; a module-level ``register()``
    is called when present.
    """

    names = list(requires)
    plugin_env = os.environ.get(REQUIRES_ENV, "")
    names.extend(plugin_env.split(","))
    for item in names:
        module_name = item.strip()
        if not module_name:
            continue
        module = importlib.import_module(module_name)
        register = getattr(module, "register", None)
        if callable(register):
            register()
