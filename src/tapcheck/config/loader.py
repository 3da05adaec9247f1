"""YAML loader and validation for tapcheck configuration files."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from jsonschema import Draft7Validator

from tapcheck.core.errors import ConfigError

from .models import REPORT_FORMATS, HarnessConfig

DEFAULT_CONFIG_NAME = "tapcheck.yaml"

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "patterns": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "requires": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "timeout": {"type": ["number", "null"], "exclusiveMinimum": 0},
        "report": {"type": "string", "enum": list(REPORT_FORMATS)},
        "report_path": {"type": ["string", "null"]},
        "color": {"type": "boolean"},
    },
}

_validator = Draft7Validator(CONFIG_SCHEMA)


def load_config(path: str) -> HarnessConfig:
    """Load and validate a configuration file."""

    config_path = Path(path).expanduser().resolve()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    return parse_config(raw, base=config_path.parent)


def find_default_config(start: Path | None = None) -> Path | None:
    candidate = (start or Path.cwd()) / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


def parse_config(raw: Any, *, base: Path | None = None) -> HarnessConfig:
    if not isinstance(raw, Mapping):
        raise ConfigError("Config file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ConfigError(f"Config schema validation failed: {messages}")
    patterns = tuple(_resolve_pattern(p, base) for p in raw.get("patterns", []))
    timeout = raw.get("timeout", HarnessConfig.timeout)
    return HarnessConfig(
        patterns=patterns,
        requires=tuple(raw.get("requires", [])),
        timeout=float(timeout) if timeout is not None else None,
        report=raw.get("report", "tap"),
        report_path=raw.get("report_path"),
        color=bool(raw.get("color", True)),
    )


def _resolve_pattern(pattern: str, base: Path | None) -> str:
    if base is None or Path(pattern).is_absolute():
        return pattern
    return str(base / pattern)
