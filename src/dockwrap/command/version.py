from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ..core.output import CommandOutput, ParsedOutput
from .base import DockerCommand, optional_option

_TABLE_KEYS = {
    "Version": "version",
    "API version": "api_version",
    "Minimum API version": "min_api_version",
    "Git commit": "git_commit",
    "Built": "built",
    "Go version": "go_version",
    "OS/Arch": "os",
    "Kernel Version": "kernel_version",
    "Experimental": "experimental",
}


@dataclass(frozen=True)
class ComponentVersion:
    version: str = ""
    api_version: str = ""
    min_api_version: str = ""
    git_commit: str = ""
    built: str = ""
    go_version: str = ""
    os: str = ""
    arch: str = ""
    kernel_version: str = ""
    experimental: bool = False


@dataclass(frozen=True)
class VersionInfo:
    client: ComponentVersion
    server: ComponentVersion | None = None


@dataclass(frozen=True)
class VersionOutput(ParsedOutput):
    version_info: VersionInfo | None = None


def _component_from_json(data: dict[str, Any]) -> ComponentVersion:
    def text(key: str) -> str:
        value = data.get(key)
        return value if isinstance(value, str) else ""

    return ComponentVersion(
        version=text("Version"),
        api_version=text("ApiVersion"),
        min_api_version=text("MinAPIVersion"),
        git_commit=text("GitCommit"),
        built=text("BuildTime") or text("Built"),
        go_version=text("GoVersion"),
        os=text("Os"),
        arch=text("Arch"),
        kernel_version=text("KernelVersion"),
        experimental=data.get("Experimental") is True,
    )


def parse_version_json(stdout: str) -> VersionInfo | None:
    try:
        parsed = json.loads(stdout)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict) or not isinstance(parsed.get("Client"), dict):
        return None
    server = parsed.get("Server")
    return VersionInfo(
        client=_component_from_json(parsed["Client"]),
        server=_component_from_json(server) if isinstance(server, dict) else None,
    )


def parse_version_table(stdout: str) -> VersionInfo | None:
    sections: dict[str, dict[str, str]] = {"client": {}, "server": {}}
    current: str | None = None
    for line in stdout.splitlines():
        trimmed = line.strip()
        if trimmed.startswith("Client"):
            current = "client"
            continue
        if trimmed.startswith("Server"):
            current = "server"
            continue
        if current is None or ":" not in trimmed:
            continue
        key, value = trimmed.split(":", 1)
        field_name = _TABLE_KEYS.get(key.strip())
        # first match wins: component sub-sections repeat "Version"
        if field_name and field_name not in sections[current]:
            sections[current][field_name] = value.strip()
    if not sections["client"]:
        return None

    def build(values: dict[str, str]) -> ComponentVersion:
        experimental = values.pop("experimental", "false") == "true"
        return ComponentVersion(**values, experimental=experimental)

    return VersionInfo(
        client=build(dict(sections["client"])),
        server=build(dict(sections["server"])) if sections["server"] else None,
    )


@dataclass
class VersionCommand(DockerCommand[VersionOutput]):
    subcommand = "version"

    format: str | None = None

    def subcommand_args(self) -> list[str]:
        return optional_option("--format", self.format)

    def parse_output(self, output: CommandOutput) -> VersionOutput:
        if self.format == "json":
            info = parse_version_json(output.stdout)
        elif self.format is None:
            info = parse_version_table(output.stdout)
        else:
            # custom Go templates have no known shape
            info = None
        return VersionOutput(output=output, version_info=info)
