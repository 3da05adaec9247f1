"""Reporting exports."""
from .base import Sink, SinkManager
from .json_reporter import JsonReporter
from .objects import ObjectSink
from .tap import TapSink
from .terminal import TerminalReporter

__all__ = [
    "JsonReporter",
    "ObjectSink",
    "Sink",
    "SinkManager",
    "TapSink",
    "TerminalReporter",
]
