from __future__ import annotations

import secrets
from datetime import datetime, timezone


def make_run_id(prefix: str = "dockwrap") -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return f"{prefix}-{ts}-{secrets.token_hex(3)}"
