from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar

import jsonschema

from ..errors import InvalidConfiguration

P = TypeVar("P")

SCHEMAS_ROOT = Path(__file__).resolve().parent / "schemas"


@lru_cache(maxsize=1)
def load_catalog() -> dict[str, Path]:
    """Schema name to packaged schema file, from `schemas/catalog.json`."""
    raw = json.loads((SCHEMAS_ROOT / "catalog.json").read_text(encoding="utf-8"))
    return {str(row["name"]): SCHEMAS_ROOT / str(row["file"]) for row in raw.get("schemas", [])}


@lru_cache(maxsize=None)
def load_schema(schema_name: str) -> dict[str, Any]:
    path = load_catalog().get(schema_name)
    if path is None:
        raise InvalidConfiguration(f"unknown schema: {schema_name}")
    return json.loads(path.read_text(encoding="utf-8"))


def validate(schema_name: str, payload: P) -> P:
    """Check `payload` against a catalog schema and hand it back unchanged."""
    try:
        jsonschema.validate(payload, load_schema(schema_name))
    except jsonschema.ValidationError as exc:
        loc = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise InvalidConfiguration(f"{schema_name} payload invalid at {loc}: {exc.message}") from exc
    return payload


__all__ = ["SCHEMAS_ROOT", "load_catalog", "load_schema", "validate"]
