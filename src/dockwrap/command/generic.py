from __future__ import annotations

from dataclasses import dataclass, field

from ..core.output import CommandOutput
from .base import DockerCommand, require


@dataclass
class GenericCommand(DockerCommand[CommandOutput]):
    """Any subcommand, including plugins (`scout`, `buildx`) and future ones.

    `args` are treated as positional operands, so escape-hatch flags added
    with `add_flag`/`add_option` land before them.
    """

    command: str
    args: list[str] = field(default_factory=list)

    def subcommand_name(self) -> str:
        return self.command

    def subcommand_args(self) -> list[str]:
        return []

    def positional_args(self) -> list[str]:
        return list(self.args)

    def validate(self) -> None:
        require(self.command, "generic command needs a subcommand name")
