"""Host platform and container runtime detection."""

from __future__ import annotations

import os
import platform as _platform
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..errors import SpawnFailed
from .environment import InvocationEnvironment

DEFAULT_SOCKET = Path("/var/run/docker.sock")
WINDOWS_PIPE = Path("//./pipe/docker_engine")
PROBE_TIMEOUT_SECONDS = 10


class Runtime(str, Enum):
    DOCKER = "docker"
    PODMAN = "podman"
    COLIMA = "colima"
    RANCHER_DESKTOP = "rancher-desktop"
    ORBSTACK = "orbstack"
    DOCKER_DESKTOP = "docker-desktop"

    @property
    def command(self) -> str:
        return "podman" if self is Runtime.PODMAN else "docker"

    @property
    def supports_compose(self) -> bool:
        return self is not Runtime.PODMAN

    def compose_command(self) -> list[str]:
        if self is Runtime.PODMAN:
            return ["podman-compose"]
        return ["docker", "compose"]

    @property
    def display_name(self) -> str:
        return {
            Runtime.DOCKER: "Docker",
            Runtime.PODMAN: "Podman",
            Runtime.COLIMA: "Colima",
            Runtime.RANCHER_DESKTOP: "Rancher Desktop",
            Runtime.ORBSTACK: "OrbStack",
            Runtime.DOCKER_DESKTOP: "Docker Desktop",
        }[self]


class Platform(str, Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    FREEBSD = "freebsd"
    OTHER = "other"

    @classmethod
    def detect(cls, system: str | None = None) -> Platform:
        name = (system or _platform.system()).lower()
        if name == "linux":
            return cls.LINUX
        if name in {"darwin", "macos"}:
            return cls.MACOS
        if name == "windows":
            return cls.WINDOWS
        if name == "freebsd":
            return cls.FREEBSD
        return cls.OTHER

    def is_wsl(self, environ: dict[str, str] | None = None) -> bool:
        if self is not Platform.LINUX:
            return False
        environ = dict(os.environ if environ is None else environ)
        return (
            Path("/proc/sys/fs/binfmt_misc/WSLInterop").exists()
            or "WSL_DISTRO_NAME" in environ
            or "WSL_INTEROP" in environ
        )

    def default_socket_path(self, environ: dict[str, str] | None = None) -> Path:
        if self is Platform.WINDOWS:
            return WINDOWS_PIPE
        if self is Platform.MACOS:
            environ = dict(os.environ if environ is None else environ)
            user = environ.get("USER", "unknown")
            for candidate in (
                DEFAULT_SOCKET,
                Path(f"/Users/{user}/.docker/run/docker.sock"),
                Path(f"/Users/{user}/.colima/docker.sock"),
                Path(f"/Users/{user}/.orbstack/run/docker.sock"),
            ):
                if candidate.exists():
                    return candidate
        return DEFAULT_SOCKET


def _probe(argv: list[str]) -> str | None:
    try:
        proc = subprocess.run(argv, text=True, capture_output=True, check=False, timeout=PROBE_TIMEOUT_SECONDS)
    except (OSError, subprocess.TimeoutExpired):
        return None
    return (proc.stdout or "") + (proc.stderr or "")


def runtime_from_version_text(text: str) -> Runtime | None:
    if "Docker Desktop" in text:
        return Runtime.DOCKER_DESKTOP
    if "Rancher Desktop" in text:
        return Runtime.RANCHER_DESKTOP
    if "podman" in text.lower():
        return Runtime.PODMAN
    if "colima" in text:
        return Runtime.COLIMA
    if "OrbStack" in text:
        return Runtime.ORBSTACK
    if "Docker" in text:
        return Runtime.DOCKER
    return None


def parse_version_text(text: str) -> str:
    for line in text.splitlines():
        if "Version:" in line:
            return line.split(":", 1)[1].strip()
    return "unknown"


@dataclass(frozen=True)
class PlatformInfo:
    platform: Platform
    runtime: Runtime
    version: str
    is_wsl: bool
    socket_path: Path
    extra_env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def detect(cls, environ: dict[str, str] | None = None) -> PlatformInfo:
        environ = dict(os.environ if environ is None else environ)
        host = Platform.detect()
        runtime, version_text = cls._detect_runtime(environ)
        version = cls._runtime_version(runtime) or parse_version_text(version_text)
        return cls(
            platform=host,
            runtime=runtime,
            version=version,
            is_wsl=host.is_wsl(environ),
            socket_path=cls._socket_path(host, environ),
        )

    @staticmethod
    def _socket_path(host: Platform, environ: dict[str, str]) -> Path:
        docker_host = environ.get("DOCKER_HOST", "")
        if docker_host.startswith("unix://"):
            return Path(docker_host[len("unix://") :])
        return host.default_socket_path(environ)

    @staticmethod
    def _detect_runtime(environ: dict[str, str]) -> tuple[Runtime, str]:
        if "ORBSTACK_HOME" in environ:
            return Runtime.ORBSTACK, ""
        if "COLIMA_HOME" in environ:
            return Runtime.COLIMA, ""
        text = _probe(["docker", "version"])
        if text is not None:
            runtime = runtime_from_version_text(text)
            if runtime is not None:
                return runtime, text
        text = _probe(["podman", "version"])
        if text is not None:
            return Runtime.PODMAN, text
        raise SpawnFailed("docker", "no container runtime found (tried docker, podman)")

    @staticmethod
    def _runtime_version(runtime: Runtime) -> str | None:
        text = _probe([runtime.command, "version", "--format", "{{.Server.Version}}"])
        if text is None:
            return None
        value = text.strip()
        if not value or " " in value or "\n" in value:
            return None
        return value

    def environment_vars(self) -> dict[str, str]:
        out: dict[str, str] = {}
        if self.socket_path.exists():
            out["DOCKER_HOST"] = f"unix://{self.socket_path}"
        if self.runtime is Runtime.PODMAN:
            out["DOCKER_BUILDKIT"] = "0"
        elif self.runtime in {Runtime.DOCKER, Runtime.DOCKER_DESKTOP}:
            out["DOCKER_BUILDKIT"] = "1"
        out.update(self.extra_env)
        return out

    def to_environment(self, base: InvocationEnvironment | None = None) -> InvocationEnvironment:
        env = base.with_binary(self.runtime.command) if base else InvocationEnvironment(binary=self.runtime.command)
        for key, value in self.environment_vars().items():
            env = env.with_env(key, value)
        return env

    def describe(self) -> str:
        text = f"{self.runtime.display_name} on {self.platform.value} (version: {self.version})"
        return f"{text} [WSL]" if self.is_wsl else text


__all__ = ["Platform", "PlatformInfo", "Runtime", "parse_version_text", "runtime_from_version_text"]
