from __future__ import annotations

from dataclasses import dataclass, field

from ..core.output import CommandOutput
from .base import DockerCommand, optional_flag, optional_option, require
from .options import env_args


@dataclass
class ExecCommand(DockerCommand[CommandOutput]):
    subcommand = "exec"

    container: str
    command: list[str] = field(default_factory=list)
    detach: bool = False
    interactive: bool = False
    tty: bool = False
    privileged: bool = False
    env: dict[str, str] = field(default_factory=dict)
    workdir: str | None = None
    user: str | None = None

    def subcommand_args(self) -> list[str]:
        args = optional_flag("--detach", self.detach)
        args += optional_flag("--interactive", self.interactive)
        args += optional_flag("--tty", self.tty)
        args += optional_flag("--privileged", self.privileged)
        args += env_args(self.env)
        args += optional_option("--workdir", self.workdir)
        args += optional_option("--user", self.user)
        return args

    def positional_args(self) -> list[str]:
        return [self.container, *self.command]

    def validate(self) -> None:
        require(self.container, "exec needs a container")
        require(self.command, "exec needs a command to run")
