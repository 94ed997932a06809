"""Error taxonomy for command construction and execution.

Every failure of an invocation surfaces as exactly one of the five kinds
below. None of them carries a partially-populated `CommandOutput`.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exit_codes import ERR_COMMAND, ERR_CONFIG, ERR_INTERNAL, ERR_PARSE, ERR_SPAWN, ERR_TIMEOUT

_CATEGORIES = {
    "spawn_failed": "prerequisites",
    "command_failed": "command",
    "timeout": "command",
    "parse_error": "parsing",
    "invalid_configuration": "config",
}


@dataclass
class DockwrapError(Exception):
    message: str
    code: int = ERR_INTERNAL
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message

    @property
    def category(self) -> str:
        return _CATEGORIES.get(self.kind, "generic")

    @property
    def is_retryable(self) -> bool:
        # Informational only: nothing in dockwrap retries on its own.
        return self.kind in {"command_failed", "timeout"}

    def to_payload(self) -> dict[str, object]:
        return {"kind": self.kind, "code": self.code, "message": self.message}


class SpawnFailed(DockwrapError):
    """The binary could not be started (missing, not executable, E2BIG, ...)."""

    def __init__(self, binary: str, reason: object) -> None:
        super().__init__(f"failed to execute {binary}: {reason}", ERR_SPAWN, "spawn_failed")
        self.binary = binary
        self.reason = str(reason)


class CommandFailed(DockwrapError):
    """The process ran and exited with a non-zero code."""

    def __init__(self, command: str, exit_code: int, stdout: str, stderr: str) -> None:
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else f"exit code {exit_code}"
        super().__init__(f"command failed: {command}: {detail}", ERR_COMMAND, "command_failed")
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr

    def to_payload(self) -> dict[str, object]:
        return {
            **super().to_payload(),
            "command": self.command,
            "exit_code": self.exit_code,
            "stdout": self.stdout,
            "stderr": self.stderr,
        }


class CommandTimeout(DockwrapError):
    """The timeout elapsed first; the child was killed before this was raised."""

    def __init__(self, timeout_seconds: float, command: str = "") -> None:
        suffix = f": {command}" if command else ""
        super().__init__(f"operation timed out after {timeout_seconds:g} seconds{suffix}", ERR_TIMEOUT, "timeout")
        self.timeout_seconds = timeout_seconds
        self.command = command

    def to_payload(self) -> dict[str, object]:
        return {**super().to_payload(), "timeout_seconds": self.timeout_seconds}


class ParseError(DockwrapError):
    def __init__(self, message: str) -> None:
        super().__init__(f"failed to parse output: {message}", ERR_PARSE, "parse_error")


class InvalidConfiguration(DockwrapError):
    def __init__(self, message: str) -> None:
        super().__init__(f"invalid configuration: {message}", ERR_CONFIG, "invalid_configuration")


__all__ = [
    "DockwrapError",
    "SpawnFailed",
    "CommandFailed",
    "CommandTimeout",
    "ParseError",
    "InvalidConfiguration",
]
