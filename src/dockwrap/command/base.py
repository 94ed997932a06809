"""Capability set shared by every command type.

A command is a plain dataclass holding its configuration. Subclasses only
say how that configuration maps to arguments (`subcommand_args` and
`positional_args`) and, optionally, how to read a typed result out of the
captured output (`parse_output`). Assembly order, the escape hatch and
execution live here.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar, cast

from ..core.environment import InvocationEnvironment, default_environment
from ..core.executor import Executor, LineHandler
from ..core.output import CommandOutput
from ..core.raw_args import RawArgs
from ..errors import InvalidConfiguration

T = TypeVar("T")
C = TypeVar("C", bound="DockerCommand[Any]")


@dataclass
class DockerCommand(ABC, Generic[T]):
    subcommand: ClassVar[str] = ""

    environment: InvocationEnvironment = field(default_factory=default_environment, kw_only=True, repr=False)
    raw_args: RawArgs = field(default_factory=RawArgs, kw_only=True)

    def subcommand_name(self) -> str:
        return self.subcommand

    @abstractmethod
    def subcommand_args(self) -> list[str]:
        """Flags and options specific to this command, in emission order."""

    def positional_args(self) -> list[str]:
        return []

    def validate(self) -> None:
        return None

    def build_argument_list(self) -> list[str]:
        # name first, operands last; raw args sit between
        return [self.subcommand_name(), *self.subcommand_args(), *self.raw_args, *self.positional_args()]

    def parse_output(self, output: CommandOutput) -> T:
        return cast(T, output)

    async def execute(self) -> T:
        self.validate()
        argv = self.build_argument_list()
        output = await Executor(self.environment).run(argv[0], argv[1:])
        return self.parse_output(output)

    def execute_sync(self) -> T:
        return asyncio.run(self.execute())

    async def execute_streaming(self, on_line: LineHandler) -> T:
        """Run like `execute`, handing each output line to `on_line` as it arrives."""
        self.validate()
        argv = self.build_argument_list()
        output = await Executor(self.environment).run_streaming(argv[0], argv[1:], on_line)
        return self.parse_output(output)

    def execute_streaming_sync(self, on_line: LineHandler) -> T:
        return asyncio.run(self.execute_streaming(on_line))

    def add_argument(self: C, value: str) -> C:
        self.raw_args.add_argument(value)
        return self

    def add_arguments(self: C, values: Iterable[str]) -> C:
        self.raw_args.add_arguments(values)
        return self

    def add_flag(self: C, name: str) -> C:
        self.raw_args.add_flag(name)
        return self

    def add_option(self: C, name: str, value: str) -> C:
        self.raw_args.add_option(name, value)
        return self

    def with_timeout(self: C, seconds: float | None) -> C:
        self.environment = self.environment.with_timeout(seconds)
        return self

    def with_env(self: C, key: str, value: str) -> C:
        self.environment = self.environment.with_env(key, value)
        return self

    def with_binary(self: C, binary: str) -> C:
        self.environment = self.environment.with_binary(binary)
        return self


def require(value: object, message: str) -> None:
    if value is None or value == "" or value == [] or value == ():
        raise InvalidConfiguration(message)


def repeat_option(flag: str, values: Iterable[object]) -> list[str]:
    out: list[str] = []
    for value in values:
        out.extend([flag, str(value)])
    return out


def optional_option(flag: str, value: object | None) -> list[str]:
    if value is None:
        return []
    return [flag, str(value)]


def optional_flag(flag: str, enabled: bool) -> list[str]:
    return [flag] if enabled else []


__all__ = ["DockerCommand", "optional_flag", "optional_option", "repeat_option", "require"]
