"""Resolve dockwrap settings from defaults, a YAML file and the environment.

Precedence, lowest first: built-in defaults, the YAML file (explicit path
or `DOCKWRAP_CONFIG`), then the `DOCKWRAP_*` variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from ..contracts.validate import validate
from ..core.environment import DEFAULT_BINARY, InvocationEnvironment
from ..errors import InvalidConfiguration

CONFIG_ENV = "DOCKWRAP_CONFIG"
BINARY_ENV = "DOCKWRAP_BINARY"
TIMEOUT_ENV = "DOCKWRAP_TIMEOUT_SECONDS"
LOG_EVENTS_ENV = "DOCKWRAP_LOG_EVENTS"
LOG_JSON_ENV = "DOCKWRAP_LOG_JSON"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class DockwrapConfig:
    binary: str = DEFAULT_BINARY
    timeout_seconds: float | None = None
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    log_events: bool = False
    log_json: bool = True
    source: str = "defaults"

    def to_environment(self) -> InvocationEnvironment:
        return InvocationEnvironment(
            binary=self.binary,
            env=dict(self.env),
            timeout_seconds=self.timeout_seconds,
            cwd=Path(self.cwd) if self.cwd else None,
            log_events=self.log_events,
            log_json=self.log_json,
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "schema_version": 1,
            "binary": self.binary,
            "timeout_seconds": self.timeout_seconds,
            "cwd": self.cwd,
            "env": dict(sorted(self.env.items())),
            "log_events": self.log_events,
            "log_json": self.log_json,
        }


def parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise InvalidConfiguration(f"{name} must be a boolean, got `{raw}`")


def parse_timeout(name: str, raw: str) -> float | None:
    value = raw.strip()
    if not value or value.lower() == "none":
        return None
    try:
        seconds = float(value)
    except ValueError:
        raise InvalidConfiguration(f"{name} must be a number of seconds, got `{raw}`") from None
    if seconds <= 0:
        raise InvalidConfiguration(f"{name} must be positive, got `{raw}`")
    return seconds


def load_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except OSError as exc:
        raise InvalidConfiguration(f"cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise InvalidConfiguration(f"config file {path} is not valid YAML: {exc}") from exc


def _apply_file(config: DockwrapConfig, path: Path) -> DockwrapConfig:
    data = load_yaml(path)
    if data is None:
        return replace(config, source=str(path))
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"{path}: root must be mapping")
    validate("dockwrap.config.v1", data)
    return replace(
        config,
        binary=str(data.get("binary", config.binary)),
        timeout_seconds=data.get("timeout_seconds", config.timeout_seconds),
        cwd=data.get("cwd", config.cwd),
        env={**config.env, **{str(k): str(v) for k, v in (data.get("env") or {}).items()}},
        log_events=bool(data.get("log_events", config.log_events)),
        log_json=bool(data.get("log_json", config.log_json)),
        source=str(path),
    )


def _apply_environ(config: DockwrapConfig, environ: dict[str, str]) -> DockwrapConfig:
    if environ.get(BINARY_ENV):
        config = replace(config, binary=environ[BINARY_ENV])
    if TIMEOUT_ENV in environ:
        config = replace(config, timeout_seconds=parse_timeout(TIMEOUT_ENV, environ[TIMEOUT_ENV]))
    if LOG_EVENTS_ENV in environ:
        config = replace(config, log_events=parse_bool(LOG_EVENTS_ENV, environ[LOG_EVENTS_ENV]))
    if LOG_JSON_ENV in environ:
        config = replace(config, log_json=parse_bool(LOG_JSON_ENV, environ[LOG_JSON_ENV]))
    return config


def load_config(path: Path | str | None = None, environ: dict[str, str] | None = None) -> DockwrapConfig:
    environ = dict(os.environ if environ is None else environ)
    config = DockwrapConfig()
    file_path = path or environ.get(CONFIG_ENV)
    if file_path:
        config = _apply_file(config, Path(file_path))
    return _apply_environ(config, environ)


__all__ = ["DockwrapConfig", "load_config", "load_yaml", "parse_bool", "parse_timeout"]
