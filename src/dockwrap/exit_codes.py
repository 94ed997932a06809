from __future__ import annotations

import json
from pathlib import Path

ERROR_REGISTRY = Path(__file__).resolve().parent / "_meta" / "error-registry.json"


def _load_registry() -> dict[str, int]:
    payload = json.loads(ERROR_REGISTRY.read_text(encoding="utf-8"))
    mapping: dict[str, int] = {}
    for row in payload.get("codes", []):
        mapping[str(row["name"])] = int(row["code"])
    return mapping


def _load_kinds() -> dict[str, int]:
    payload = json.loads(ERROR_REGISTRY.read_text(encoding="utf-8"))
    return {str(row["kind"]): int(row["code"]) for row in payload.get("codes", []) if "kind" in row}


_REG = _load_registry()
_KINDS = _load_kinds()

OK = 0
ERR_USAGE = _REG["DOCKWRAP_ERR_USAGE"]
ERR_CONFIG = _REG["DOCKWRAP_ERR_CONFIG"]
ERR_SPAWN = _REG["DOCKWRAP_ERR_SPAWN"]
ERR_COMMAND = _REG["DOCKWRAP_ERR_COMMAND"]
ERR_PARSE = _REG["DOCKWRAP_ERR_PARSE"]
ERR_PREREQ = _REG["DOCKWRAP_ERR_PREREQ"]
ERR_TIMEOUT = _REG["DOCKWRAP_ERR_TIMEOUT"]
ERR_INTERNAL = _REG["DOCKWRAP_ERR_INTERNAL"]


def code_for_kind(kind: str) -> int:
    return _KINDS.get(kind, ERR_INTERNAL)


__all__ = [
    "OK",
    "ERR_USAGE",
    "ERR_CONFIG",
    "ERR_SPAWN",
    "ERR_COMMAND",
    "ERR_PARSE",
    "ERR_PREREQ",
    "ERR_TIMEOUT",
    "ERR_INTERNAL",
    "code_for_kind",
]
