"""Harness-level error types."""
from __future__ import annotations


class HarnessError(Exception):
    """Base class for errors raised by the harness itself."""


class AuthoringError(HarnessError):
    """The test itself is malformed (bad ``assert`` input, double settle, ...)."""


class ConfigError(HarnessError, ValueError):
    """Invalid harness configuration."""
