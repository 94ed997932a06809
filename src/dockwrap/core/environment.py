from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from ..errors import InvalidConfiguration
from ..run_id import make_run_id

DEFAULT_BINARY = "docker"


@dataclass(frozen=True)
class InvocationEnvironment:
    """Everything an invocation needs besides its arguments.

    Shared read-only between concurrent invocations; every `with_*` helper
    returns a new value.
    """

    binary: str = DEFAULT_BINARY
    env: Mapping[str, str] = field(default_factory=dict)
    timeout_seconds: float | None = None
    cwd: Path | None = None
    run_id: str = field(default_factory=make_run_id)
    log_events: bool = False
    log_json: bool = True

    def __post_init__(self) -> None:
        if not self.binary:
            raise InvalidConfiguration("binary must not be empty")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise InvalidConfiguration(f"timeout must be positive, got {self.timeout_seconds}")
        object.__setattr__(self, "env", MappingProxyType({str(k): str(v) for k, v in self.env.items()}))

    def with_timeout(self, seconds: float | None) -> InvocationEnvironment:
        return replace(self, timeout_seconds=seconds)

    def with_binary(self, binary: str) -> InvocationEnvironment:
        return replace(self, binary=binary)

    def with_env(self, key: str, value: str) -> InvocationEnvironment:
        return replace(self, env={**self.env, key: value})

    def with_cwd(self, cwd: Path | str | None) -> InvocationEnvironment:
        return replace(self, cwd=Path(cwd) if cwd is not None else None)

    def child_env(self) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self.env)
        return env


@lru_cache(maxsize=1)
def default_environment() -> InvocationEnvironment:
    from ..config.loader import load_config

    return load_config().to_environment()


def reset_default_environment() -> None:
    default_environment.cache_clear()


__all__ = ["DEFAULT_BINARY", "InvocationEnvironment", "default_environment", "reset_default_environment"]
