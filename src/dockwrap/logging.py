"""Structured event lines for executor and CLI activity.

Events always go to stderr: stdout carries the wrapped program's output.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import TextIO


def format_event(level: str, component: str, action: str, run_id: str, json_output: bool = True, **fields: object) -> str:
    if json_output:
        payload: dict[str, object] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "component": component,
            "action": action,
            "run_id": run_id,
            **fields,
        }
        return json.dumps(payload, sort_keys=True, default=str)
    extras = " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
    return f"[{level}] {component}:{action} run_id={run_id} {extras}".strip()


def log_event(
    level: str,
    component: str,
    action: str,
    run_id: str,
    json_output: bool = True,
    stream: TextIO | None = None,
    **fields: object,
) -> None:
    out = stream if stream is not None else sys.stderr
    out.write(format_event(level, component, action, run_id, json_output, **fields) + "\n")


__all__ = ["format_event", "log_event"]
