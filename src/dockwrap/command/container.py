"""Commands that act on a list of existing containers."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.output import CommandOutput, ParsedOutput
from .base import DockerCommand, optional_flag, optional_option, require


@dataclass(frozen=True)
class ContainerIdsOutput(ParsedOutput):
    ids: list[str] = field(default_factory=list)


def _ids(output: CommandOutput) -> ContainerIdsOutput:
    return ContainerIdsOutput(output=output, ids=[line.strip() for line in output.stdout_lines() if line.strip()])


@dataclass
class StopCommand(DockerCommand[ContainerIdsOutput]):
    subcommand = "stop"

    containers: list[str] = field(default_factory=list)
    time: int | None = None
    signal: str | None = None

    def subcommand_args(self) -> list[str]:
        return optional_option("--time", self.time) + optional_option("--signal", self.signal)

    def positional_args(self) -> list[str]:
        return list(self.containers)

    def validate(self) -> None:
        require(self.containers, "stop needs at least one container")

    def parse_output(self, output: CommandOutput) -> ContainerIdsOutput:
        return _ids(output)


@dataclass
class RmCommand(DockerCommand[ContainerIdsOutput]):
    subcommand = "rm"

    containers: list[str] = field(default_factory=list)
    force: bool = False
    volumes: bool = False
    link: bool = False

    def subcommand_args(self) -> list[str]:
        return optional_flag("--force", self.force) + optional_flag("--volumes", self.volumes) + optional_flag("--link", self.link)

    def positional_args(self) -> list[str]:
        return list(self.containers)

    def validate(self) -> None:
        require(self.containers, "rm needs at least one container")

    def parse_output(self, output: CommandOutput) -> ContainerIdsOutput:
        return _ids(output)
