from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# Exit code reported when the OS gives none (terminated by a signal).
SIGNAL_EXIT_CODE = -1


@dataclass(frozen=True)
class CommandOutput:
    stdout: str
    stderr: str
    exit_code: int
    argv: tuple[str, ...] = field(default=())
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def combined_output(self) -> str:
        if not self.stderr:
            return self.stdout
        if not self.stdout:
            return self.stderr
        return f"{self.stdout}\n{self.stderr}"

    def stdout_lines(self) -> list[str]:
        return self.stdout.splitlines()

    def stderr_lines(self) -> list[str]:
        return self.stderr.splitlines()

    def stdout_is_empty(self) -> bool:
        return not self.stdout.strip()

    def stderr_is_empty(self) -> bool:
        return not self.stderr.strip()

    def to_payload(self) -> dict[str, object]:
        return {
            "argv": list(self.argv),
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "success": self.success,
            "duration_ms": self.duration_ms,
        }


@dataclass(frozen=True)
class OutputLine:
    """One line read from a streamed child, without its line terminator."""

    stream: Literal["stdout", "stderr"]
    text: str

    @property
    def is_stderr(self) -> bool:
        return self.stream == "stderr"


@dataclass(frozen=True)
class ParsedOutput:
    """A command-specific result; the raw output is always kept."""

    output: CommandOutput

    @property
    def stdout(self) -> str:
        return self.output.stdout

    @property
    def stderr(self) -> str:
        return self.output.stderr

    @property
    def exit_code(self) -> int:
        return self.output.exit_code

    @property
    def success(self) -> bool:
        return self.output.success


__all__ = ["SIGNAL_EXIT_CODE", "CommandOutput", "OutputLine", "ParsedOutput"]
