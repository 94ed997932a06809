"""Packaged JSON schemas for configuration files and CLI payloads."""

from __future__ import annotations

from .validate import load_catalog, load_schema, validate

__all__ = ["load_catalog", "load_schema", "validate"]
