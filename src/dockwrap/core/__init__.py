"""Execution core shared by every command type."""

from __future__ import annotations

from .environment import InvocationEnvironment, default_environment, reset_default_environment
from .executor import Executor, LineHandler
from .output import CommandOutput, OutputLine, ParsedOutput
from .raw_args import RawArgs, normalize_flag

__all__ = [
    "CommandOutput",
    "Executor",
    "InvocationEnvironment",
    "LineHandler",
    "OutputLine",
    "ParsedOutput",
    "RawArgs",
    "default_environment",
    "normalize_flag",
    "reset_default_environment",
]
