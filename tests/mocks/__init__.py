"""
Mock implementations for testing dotkit components.

This package provides mock implementations of external dependencies and
system interactions to enable isolated, deterministic testing.
"""

from .host import CORE_COMMANDS, CommandRule, FakeHost, RecordedCall
from .network import MockDownloader, MockResponse, script_body

__all__ = [
    "CORE_COMMANDS",
    "CommandRule",
    "FakeHost",
    "RecordedCall",
    "MockDownloader",
    "MockResponse",
    "script_body",
]
