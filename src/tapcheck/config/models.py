"""Configuration dataclasses."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from tapcheck.core.runner import DEFAULT_TIMEOUT

REPORT_FORMATS = ("tap", "json", "terminal")


@dataclass(frozen=True)
class HarnessConfig:
    patterns: Sequence[str] = field(default_factory=tuple)
    requires: Sequence[str] = field(default_factory=tuple)
    timeout: Optional[float] = DEFAULT_TIMEOUT
    report: str = "tap"
    report_path: Optional[str] = None
    color: bool = True


@dataclass(frozen=True)
class RunOptions:
    """Command-line overrides; ``None``/empty means "keep the file value"."""

    patterns: Sequence[str] = field(default_factory=tuple)
    requires: Sequence[str] = field(default_factory=tuple)
    timeout: Optional[float] = None
    no_timeout: bool = False
    report: Optional[str] = None
    report_path: Optional[str] = None
    color: Optional[bool] = None

    def apply(self, config: HarnessConfig) -> HarnessConfig:
        timeout = config.timeout
        if self.no_timeout:
            timeout = None
        elif self.timeout is not None:
            timeout = self.timeout
        return replace(
            config,
            patterns=tuple(self.patterns) or tuple(config.patterns),
            requires=tuple(config.requires) + tuple(self.requires),
            timeout=timeout,
            report=self.report or config.report,
            report_path=self.report_path or config.report_path,
            color=config.color if self.color is None else self.color,
        )
