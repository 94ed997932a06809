"""Escape-hatch arguments attachable to any command."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..errors import InvalidConfiguration


def normalize_flag(name: str) -> str:
    if not name:
        raise InvalidConfiguration("flag/option name must not be empty")
    if name.startswith("-"):
        return name
    if len(name) == 1:
        return f"-{name}"
    return f"--{name}"


class RawArgs:
    """Append-only, insertion-ordered list of caller-supplied arguments.

    Entries are never deduplicated or reordered; conflicting flags are the
    caller's problem.
    """

    def __init__(self, values: Iterable[str] = ()) -> None:
        self._values: list[str] = [str(v) for v in values]

    def add_argument(self, value: str) -> None:
        self._values.append(str(value))

    def add_arguments(self, values: Iterable[str]) -> None:
        for value in values:
            self.add_argument(value)

    def add_flag(self, name: str) -> None:
        self._values.append(normalize_flag(name))

    def add_option(self, name: str, value: str) -> None:
        # two entries, never `--name=value`
        self._values.append(normalize_flag(name))
        self._values.append(str(value))

    def as_list(self) -> list[str]:
        return list(self._values)

    def copy(self) -> RawArgs:
        return RawArgs(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RawArgs):
            return self._values == other._values
        if isinstance(other, list):
            return self._values == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"RawArgs({self._values!r})"


__all__ = ["RawArgs", "normalize_flag"]
