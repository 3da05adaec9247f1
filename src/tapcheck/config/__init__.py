"""Configuration loading."""
from .loader import DEFAULT_CONFIG_NAME, find_default_config, load_config, parse_config
from .models import REPORT_FORMATS, HarnessConfig, RunOptions

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "HarnessConfig",
    "REPORT_FORMATS",
    "RunOptions",
    "find_default_config",
    "load_config",
    "parse_config",
]
