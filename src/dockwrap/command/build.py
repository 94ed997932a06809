from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..core.output import CommandOutput, ParsedOutput
from .base import DockerCommand, optional_flag, optional_option, repeat_option, require
from .options import label_args

_SHA_RE = re.compile(r"sha256:[0-9a-f]{12,64}")


@dataclass(frozen=True)
class BuildOutput(ParsedOutput):
    image_id: str | None = None


def extract_image_id(text: str) -> str | None:
    for line in text.splitlines():
        if "Successfully built " in line:
            candidate = line.split("Successfully built ", 1)[1].strip()
            if candidate:
                return candidate
        stripped = line.strip()
        if stripped.startswith("sha256:"):
            return stripped
        # BuildKit: "#8 writing image sha256:... done"
        if "writing image" in stripped:
            match = _SHA_RE.search(stripped)
            if match:
                return match.group(0)
    return None


@dataclass
class BuildCommand(DockerCommand[BuildOutput]):
    subcommand = "build"

    context: str = "."
    tags: list[str] = field(default_factory=list)
    file: str | None = None
    build_args: dict[str, str] = field(default_factory=dict)
    target: str | None = None
    platform: str | None = None
    labels: dict[str, str] = field(default_factory=dict)
    cache_from: list[str] = field(default_factory=list)
    network: str | None = None
    progress: str | None = None
    no_cache: bool = False
    pull: bool = False
    quiet: bool = False
    load: bool = False
    push: bool = False

    def subcommand_args(self) -> list[str]:
        args = repeat_option("--tag", self.tags)
        args += optional_option("--file", self.file)
        args += repeat_option("--build-arg", [f"{k}={v}" for k, v in self.build_args.items()])
        args += optional_option("--target", self.target)
        args += optional_option("--platform", self.platform)
        args += label_args(self.labels)
        args += repeat_option("--cache-from", self.cache_from)
        args += optional_option("--network", self.network)
        args += optional_option("--progress", self.progress)
        args += optional_flag("--no-cache", self.no_cache)
        args += optional_flag("--pull", self.pull)
        args += optional_flag("--quiet", self.quiet)
        args += optional_flag("--load", self.load)
        args += optional_flag("--push", self.push)
        return args

    def positional_args(self) -> list[str]:
        return [self.context]

    def validate(self) -> None:
        require(self.context, "build needs a context path or URL")

    def parse_output(self, output: CommandOutput) -> BuildOutput:
        if self.quiet:
            image_id = output.stdout.strip() or None
        else:
            image_id = extract_image_id(output.combined_output)
        return BuildOutput(output=output, image_id=image_id)
