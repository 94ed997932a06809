"""Command builders sharing the `DockerCommand` capability set."""

from __future__ import annotations

from .base import DockerCommand
from .build import BuildCommand, BuildOutput
from .compose import (
    AnsiMode,
    ComposeCommand,
    ComposeConfig,
    ComposeDownCommand,
    ComposePsCommand,
    ComposePsOutput,
    ComposeUpCommand,
    ProgressType,
)
from .container import ContainerIdsOutput, RmCommand, StopCommand
from .exec import ExecCommand
from .generic import GenericCommand
from .options import PortMapping, Protocol
from .ps import ContainerInfo, PsCommand, PsOutput
from .pull import PullCommand, PullOutput
from .run import RunCommand, RunOutput
from .version import ComponentVersion, VersionCommand, VersionInfo, VersionOutput

__all__ = [
    "AnsiMode",
    "BuildCommand",
    "BuildOutput",
    "ComponentVersion",
    "ComposeCommand",
    "ComposeConfig",
    "ComposeDownCommand",
    "ComposePsCommand",
    "ComposePsOutput",
    "ComposeUpCommand",
    "ContainerIdsOutput",
    "ContainerInfo",
    "DockerCommand",
    "ExecCommand",
    "GenericCommand",
    "PortMapping",
    "ProgressType",
    "Protocol",
    "PsCommand",
    "PsOutput",
    "PullCommand",
    "PullOutput",
    "RmCommand",
    "RunCommand",
    "RunOutput",
    "StopCommand",
    "VersionCommand",
    "VersionInfo",
    "VersionOutput",
]
