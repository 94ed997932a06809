from __future__ import annotations

from .loader import DockwrapConfig, load_config

__all__ = ["DockwrapConfig", "load_config"]
