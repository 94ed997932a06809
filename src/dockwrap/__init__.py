"""Typed construction and execution of container CLI invocations."""

from __future__ import annotations

__version__ = "0.1.0"

from .command import (
    BuildCommand,
    ComposeConfig,
    ComposeDownCommand,
    ComposePsCommand,
    ComposeUpCommand,
    DockerCommand,
    ExecCommand,
    GenericCommand,
    PsCommand,
    PullCommand,
    RmCommand,
    RunCommand,
    StopCommand,
    VersionCommand,
)
from .core import CommandOutput, Executor, InvocationEnvironment, OutputLine, RawArgs
from .errors import CommandFailed, CommandTimeout, DockwrapError, InvalidConfiguration, ParseError, SpawnFailed

__all__ = [
    "__version__",
    "BuildCommand",
    "CommandFailed",
    "CommandOutput",
    "CommandTimeout",
    "ComposeConfig",
    "ComposeDownCommand",
    "ComposePsCommand",
    "ComposeUpCommand",
    "DockerCommand",
    "DockwrapError",
    "ExecCommand",
    "Executor",
    "GenericCommand",
    "InvalidConfiguration",
    "InvocationEnvironment",
    "OutputLine",
    "ParseError",
    "PsCommand",
    "PullCommand",
    "RawArgs",
    "RmCommand",
    "RunCommand",
    "SpawnFailed",
    "StopCommand",
    "VersionCommand",
]
