"""Locate test files and load them as modules."""
from __future__ import annotations

import glob
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterable, List


def discover(patterns: Iterable[str], *, base: Path | None = None) -> List[Path]:
    """Expand glob ``patterns`` (``**`` recurses) into a sorted, de-duplicated file list."""

    root = base or Path.cwd()
    found: dict[Path, None] = {}
    for pattern in patterns:
        text = pattern if Path(pattern).is_absolute() else str(root / pattern)
        matches = sorted(glob.glob(text, recursive=True))
        if not matches and Path(text).is_file():
            matches = [text]
        for match in matches:
            path = Path(match).resolve()
            if path.is_file() and path.suffix == ".py":
                found.setdefault(path, None)
    return list(found)


def load_test_module(source: Path) -> ModuleType:
    """Execute the Python file at ``source`` so its ``describe`` calls register."""

    path = source.expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Test file not found: {path}")
    module_name = f"tapcheck_tests_{path.stem}_{hash(str(path)) & 0xFFFF:x}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Unable to load module from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module
