"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULTS: dict[str, Any] = {
    "network": {
        "base_url": "https://eulerity-hackathon.appspot.com",
        "catalog_path": "/pets",
        "upload_path": "/upload",
        "timeout_seconds": None,
    },
    "upload": {
        "app_id": "pet-gallery@example.com",
    },
    "layout": {
        "row_height": 200,
        "margin": 10,
        "detail_height": 120,
        "top_inset": 0,
    },
    "gallery": {
        "detail_mode": "inline",
    },
    "storage": {
        "images_dir": str(Path.home() / ".pet_gallery" / "images"),
    },
    "cache": {
        "memory_items": 128,
        "disk_dir": str(Path.home() / ".pet_gallery" / "cache"),
    },
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return `base` updated recursively with `override`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access.

    Values from the file override `DEFAULTS`; a missing file leaves the
    defaults in place.
    """

    def __init__(self, settings_path: str | Path | None = None) -> None:
        data: dict[str, Any] = {}
        self._path = Path(settings_path) if settings_path is not None else None
        if self._path is not None:
            if self._path.exists():
                with self._path.open("r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError(f"settings root must be an object: {self._path}")
                data = loaded
            else:
                logger.warning("settings.json not found, using defaults: {}", self._path)
        self._data = _merge(DEFAULTS, data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JsonSettings:
        """Build settings from an in-memory mapping layered over defaults."""
        inst = cls(None)
        inst._data = _merge(DEFAULTS, data)
        return inst

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_float(self, key: str, default: float) -> float:
        """Return `key` as float, falling back to `default` on bad values."""
        try:
            return float(self.get(key, default))
        except (TypeError, ValueError):
            logger.warning("Invalid number for {}, using {}", key, default)
            return default
