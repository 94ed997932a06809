from __future__ import annotations

from dataclasses import dataclass

from .core.environment import InvocationEnvironment
from .core.executor import Executor
from .core.platform import Platform
from .errors import CommandFailed, ParseError

MINIMUM_VERSION = "20.10.0"


@dataclass(frozen=True, order=True)
class DockerVersion:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> DockerVersion:
        clean = text.strip().lstrip("v")
        parts = clean.split("-", 1)[0].split("+", 1)[0].split(".")
        if len(parts) < 3:
            raise ParseError(f"invalid version format: {text!r}")
        numbers: list[int] = []
        for label, part in zip(("major", "minor", "patch"), parts[:3]):
            try:
                numbers.append(int(part))
            except ValueError:
                raise ParseError(f"invalid {label} version: {part!r}") from None
        return cls(*numbers)

    def meets_minimum(self, minimum: DockerVersion) -> bool:
        return self >= minimum

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class DoctorReport:
    binary: str
    client_version: str | None
    server_version: str | None
    minimum_version: str
    meets_minimum: bool
    platform: str
    is_wsl: bool

    @property
    def daemon_running(self) -> bool:
        return self.server_version is not None

    @property
    def ok(self) -> bool:
        return self.meets_minimum and self.daemon_running

    def to_payload(self) -> dict[str, object]:
        return {
            "binary": self.binary,
            "client_version": self.client_version,
            "server_version": self.server_version,
            "daemon_running": self.daemon_running,
            "minimum_version": self.minimum_version,
            "meets_minimum": self.meets_minimum,
            "platform": self.platform,
            "is_wsl": self.is_wsl,
        }


async def check_prerequisites(environment: InvocationEnvironment, minimum: str = MINIMUM_VERSION) -> DoctorReport:
    """Probe the configured binary for client and server versions.

    A missing binary propagates as `SpawnFailed`. An unreachable daemon is
    not an error here: it shows up as `server_version=None`.
    """
    executor = Executor(environment)
    client = await executor.run("version", ["--format", "{{.Client.Version}}"])
    client_version = client.stdout.strip() or None
    try:
        server = await executor.run("version", ["--format", "{{.Server.Version}}"])
        server_version = server.stdout.strip() or None
    except CommandFailed:
        server_version = None
    required = DockerVersion.parse(minimum)
    meets = False
    if client_version:
        try:
            meets = DockerVersion.parse(client_version).meets_minimum(required)
        except ParseError:
            meets = False
    host = Platform.detect()
    return DoctorReport(
        binary=environment.binary,
        client_version=client_version,
        server_version=server_version,
        minimum_version=str(required),
        meets_minimum=meets,
        platform=host.value,
        is_wsl=host.is_wsl(),
    )


__all__ = ["DockerVersion", "DoctorReport", "MINIMUM_VERSION", "check_prerequisites"]
