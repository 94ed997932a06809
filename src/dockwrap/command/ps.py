from __future__ import annotations

import json
from dataclasses import dataclass, field

from ..core.output import CommandOutput, ParsedOutput
from .base import DockerCommand, optional_flag, optional_option, repeat_option

JSON_FORMATS = {"json", "{{json .}}"}


@dataclass(frozen=True)
class ContainerInfo:
    id: str
    image: str = ""
    command: str = ""
    created: str = ""
    status: str = ""
    state: str = ""
    ports: str = ""
    names: str = ""


@dataclass(frozen=True)
class PsOutput(ParsedOutput):
    containers: list[ContainerInfo] = field(default_factory=list)


def parse_ps_json_lines(stdout: str) -> list[ContainerInfo]:
    containers: list[ContainerInfo] = []
    for line in stdout.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            row = json.loads(line)
        except json.JSONDecodeError:
            continue
        if not isinstance(row, dict) or not row.get("ID"):
            continue
        containers.append(
            ContainerInfo(
                id=str(row["ID"]),
                image=str(row.get("Image", "")),
                command=str(row.get("Command", "")),
                created=str(row.get("CreatedAt", "")),
                status=str(row.get("Status", "")),
                state=str(row.get("State", "")),
                ports=str(row.get("Ports", "")),
                names=str(row.get("Names", "")),
            )
        )
    return containers


@dataclass
class PsCommand(DockerCommand[PsOutput]):
    subcommand = "ps"

    all: bool = False
    filters: list[str] = field(default_factory=list)
    last: int | None = None
    latest: bool = False
    no_trunc: bool = False
    quiet: bool = False
    size: bool = False
    format: str | None = None

    def subcommand_args(self) -> list[str]:
        args = optional_flag("--all", self.all)
        args += repeat_option("--filter", self.filters)
        args += optional_option("--last", self.last)
        args += optional_flag("--latest", self.latest)
        args += optional_flag("--no-trunc", self.no_trunc)
        args += optional_flag("--quiet", self.quiet)
        args += optional_flag("--size", self.size)
        args += optional_option("--format", self.format)
        return args

    def parse_output(self, output: CommandOutput) -> PsOutput:
        if self.quiet:
            containers = [ContainerInfo(id=line.strip()) for line in output.stdout_lines() if line.strip()]
        elif self.format in JSON_FORMATS:
            containers = parse_ps_json_lines(output.stdout)
        else:
            containers = []
        return PsOutput(output=output, containers=containers)
