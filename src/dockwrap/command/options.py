from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class Protocol(str, Enum):
    TCP = "tcp"
    UDP = "udp"


@dataclass(frozen=True)
class PortMapping:
    container_port: int
    host_port: int | None = None
    protocol: Protocol = Protocol.TCP
    host_ip: str | None = None

    def __str__(self) -> str:
        suffix = "/udp" if self.protocol is Protocol.UDP else ""
        if self.host_port is None:
            return f"{self.container_port}{suffix}"
        if self.host_ip:
            return f"{self.host_ip}:{self.host_port}:{self.container_port}{suffix}"
        return f"{self.host_port}:{self.container_port}{suffix}"


def port_args(ports: list[PortMapping]) -> list[str]:
    out: list[str] = []
    for mapping in ports:
        out.extend(["--publish", str(mapping)])
    return out


def env_args(env: Mapping[str, str]) -> list[str]:
    out: list[str] = []
    for key, value in env.items():
        out.extend(["--env", f"{key}={value}"])
    return out


def label_args(labels: Mapping[str, str]) -> list[str]:
    out: list[str] = []
    for key, value in labels.items():
        out.extend(["--label", f"{key}={value}"])
    return out


__all__ = ["PortMapping", "Protocol", "env_args", "label_args", "port_args"]
