"""`docker compose` commands.

The executor only sees `compose` in the subcommand slot; the global compose
options and the compose subcommand token (`up`, `down`, ...) are ordinary
leading arguments assembled here.
"""

from __future__ import annotations

import json
from abc import abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, TypeVar

from ..core.output import CommandOutput, ParsedOutput
from .base import DockerCommand, optional_flag, optional_option, repeat_option
from .ps import ContainerInfo

T = TypeVar("T")


class ProgressType(str, Enum):
    AUTO = "auto"
    TTY = "tty"
    PLAIN = "plain"
    JSON = "json"
    QUIET = "quiet"


class AnsiMode(str, Enum):
    NEVER = "never"
    ALWAYS = "always"
    AUTO = "auto"


@dataclass
class ComposeConfig:
    files: list[str] = field(default_factory=list)
    project_name: str | None = None
    project_directory: str | None = None
    profiles: list[str] = field(default_factory=list)
    env_file: str | None = None
    compatibility: bool = False
    dry_run: bool = False
    progress: ProgressType | None = None
    ansi: AnsiMode | None = None
    parallel: int | None = None

    def global_args(self) -> list[str]:
        args = repeat_option("--file", self.files)
        args += optional_option("--project-name", self.project_name)
        args += optional_option("--project-directory", self.project_directory)
        args += repeat_option("--profile", self.profiles)
        args += optional_option("--env-file", self.env_file)
        args += optional_flag("--compatibility", self.compatibility)
        args += optional_flag("--dry-run", self.dry_run)
        args += optional_option("--progress", self.progress.value if self.progress else None)
        args += optional_option("--ansi", self.ansi.value if self.ansi else None)
        args += optional_option("--parallel", self.parallel)
        return args


@dataclass
class ComposeCommand(DockerCommand[T]):
    subcommand = "compose"
    compose_subcommand: ClassVar[str] = ""

    config: ComposeConfig = field(default_factory=ComposeConfig, kw_only=True)

    @abstractmethod
    def compose_args(self) -> list[str]:
        """Options of the compose subcommand itself."""

    def subcommand_args(self) -> list[str]:
        return [*self.config.global_args(), self.compose_subcommand, *self.compose_args()]


@dataclass
class ComposeUpCommand(ComposeCommand[CommandOutput]):
    compose_subcommand = "up"

    services: list[str] = field(default_factory=list)
    detach: bool = False
    build: bool = False
    no_build: bool = False
    force_recreate: bool = False
    no_recreate: bool = False
    remove_orphans: bool = False
    wait: bool = False
    timeout: int | None = None
    scale: dict[str, int] = field(default_factory=dict)

    def compose_args(self) -> list[str]:
        args = optional_flag("--detach", self.detach)
        args += optional_flag("--build", self.build)
        args += optional_flag("--no-build", self.no_build)
        args += optional_flag("--force-recreate", self.force_recreate)
        args += optional_flag("--no-recreate", self.no_recreate)
        args += optional_flag("--remove-orphans", self.remove_orphans)
        args += optional_flag("--wait", self.wait)
        args += optional_option("--timeout", self.timeout)
        args += repeat_option("--scale", [f"{svc}={n}" for svc, n in self.scale.items()])
        return args

    def positional_args(self) -> list[str]:
        return list(self.services)


@dataclass
class ComposeDownCommand(ComposeCommand[CommandOutput]):
    compose_subcommand = "down"

    remove_orphans: bool = False
    volumes: bool = False
    rmi: str | None = None
    timeout: int | None = None

    def compose_args(self) -> list[str]:
        args = optional_flag("--remove-orphans", self.remove_orphans)
        args += optional_flag("--volumes", self.volumes)
        args += optional_option("--rmi", self.rmi)
        args += optional_option("--timeout", self.timeout)
        return args


@dataclass(frozen=True)
class ComposePsOutput(ParsedOutput):
    containers: list[ContainerInfo] = field(default_factory=list)


def parse_compose_ps_json(stdout: str) -> list[ContainerInfo]:
    text = stdout.strip()
    if not text:
        return []
    # older compose releases print one array, newer ones one object per line
    try:
        parsed = json.loads(text)
        rows = parsed if isinstance(parsed, list) else [parsed]
    except json.JSONDecodeError:
        rows = []
        for line in text.splitlines():
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError:
                continue
    out: list[ContainerInfo] = []
    for row in rows:
        if not isinstance(row, dict) or not row.get("ID"):
            continue
        out.append(
            ContainerInfo(
                id=str(row["ID"]),
                image=str(row.get("Image", "")),
                command=str(row.get("Command", "")),
                created=str(row.get("CreatedAt", "")),
                status=str(row.get("Status", "")),
                state=str(row.get("State", "")),
                ports=str(row.get("Ports", "")),
                names=str(row.get("Name", row.get("Names", ""))),
            )
        )
    return out


@dataclass
class ComposePsCommand(ComposeCommand[ComposePsOutput]):
    compose_subcommand = "ps"

    services: list[str] = field(default_factory=list)
    all: bool = False
    quiet: bool = False
    format: str | None = None
    status: list[str] = field(default_factory=list)

    def compose_args(self) -> list[str]:
        args = optional_flag("--all", self.all)
        args += optional_flag("--quiet", self.quiet)
        args += optional_option("--format", self.format)
        args += repeat_option("--status", self.status)
        return args

    def positional_args(self) -> list[str]:
        return list(self.services)

    def parse_output(self, output: CommandOutput) -> ComposePsOutput:
        if self.quiet:
            containers = [ContainerInfo(id=line.strip()) for line in output.stdout_lines() if line.strip()]
        elif self.format == "json":
            containers = parse_compose_ps_json(output.stdout)
        else:
            containers = []
        return ComposePsOutput(output=output, containers=containers)
