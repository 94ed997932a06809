from __future__ import annotations

from dataclasses import dataclass

from ..core.output import CommandOutput, ParsedOutput
from .base import DockerCommand, optional_flag, optional_option, require


@dataclass(frozen=True)
class PullOutput(ParsedOutput):
    digest: str | None = None


def extract_digest(stdout: str) -> str | None:
    for line in stdout.splitlines():
        if line.startswith("Digest:"):
            value = line.split(":", 1)[1].strip()
            return value or None
    return None


@dataclass
class PullCommand(DockerCommand[PullOutput]):
    subcommand = "pull"

    image: str
    all_tags: bool = False
    platform: str | None = None
    quiet: bool = False
    disable_content_trust: bool = False

    def subcommand_args(self) -> list[str]:
        args = optional_flag("--all-tags", self.all_tags)
        args += optional_option("--platform", self.platform)
        args += optional_flag("--quiet", self.quiet)
        args += optional_flag("--disable-content-trust", self.disable_content_trust)
        return args

    def positional_args(self) -> list[str]:
        return [self.image]

    def validate(self) -> None:
        require(self.image, "pull needs an image")

    def parse_output(self, output: CommandOutput) -> PullOutput:
        return PullOutput(output=output, digest=extract_digest(output.stdout))
