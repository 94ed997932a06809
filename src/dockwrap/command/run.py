from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..core.output import CommandOutput, ParsedOutput
from .base import DockerCommand, optional_flag, optional_option, repeat_option, require
from .options import PortMapping, env_args, label_args, port_args

_CONTAINER_ID_RE = re.compile(r"^[0-9a-f]{12,64}$")


@dataclass(frozen=True)
class RunOutput(ParsedOutput):
    container_id: str | None = None


def extract_container_id(stdout: str) -> str | None:
    lines = [line.strip() for line in stdout.splitlines() if line.strip()]
    if not lines:
        return None
    # pull progress may precede the id; the id is the last line
    candidate = lines[-1]
    return candidate if _CONTAINER_ID_RE.match(candidate) else None


@dataclass
class RunCommand(DockerCommand[RunOutput]):
    subcommand = "run"

    image: str
    command: list[str] = field(default_factory=list)
    name: str | None = None
    detach: bool = False
    rm: bool = False
    interactive: bool = False
    tty: bool = False
    env: dict[str, str] = field(default_factory=dict)
    ports: list[PortMapping] = field(default_factory=list)
    volumes: list[str] = field(default_factory=list)
    network: str | None = None
    workdir: str | None = None
    entrypoint: str | None = None
    user: str | None = None
    labels: dict[str, str] = field(default_factory=dict)
    platform: str | None = None
    pull: str | None = None

    def subcommand_args(self) -> list[str]:
        args = optional_option("--name", self.name)
        args += optional_flag("--detach", self.detach)
        args += optional_flag("--rm", self.rm)
        args += optional_flag("--interactive", self.interactive)
        args += optional_flag("--tty", self.tty)
        args += env_args(self.env)
        args += port_args(self.ports)
        args += repeat_option("--volume", self.volumes)
        args += optional_option("--network", self.network)
        args += optional_option("--workdir", self.workdir)
        args += optional_option("--entrypoint", self.entrypoint)
        args += optional_option("--user", self.user)
        args += label_args(self.labels)
        args += optional_option("--platform", self.platform)
        args += optional_option("--pull", self.pull)
        return args

    def positional_args(self) -> list[str]:
        return [self.image, *self.command]

    def validate(self) -> None:
        require(self.image, "run needs an image")

    def parse_output(self, output: CommandOutput) -> RunOutput:
        container_id = extract_container_id(output.stdout) if self.detach else None
        return RunOutput(output=output, container_id=container_id)
