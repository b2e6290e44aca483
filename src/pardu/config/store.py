"""Load/save application settings as JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pardu.config.models import AppSettings
from pardu.paths import settings_path


def _leaf_parent(data: dict[str, Any], dotted_key: str) -> tuple[dict[str, Any], str]:
    """Return the mapping holding ``dotted_key``'s leaf value and the leaf name."""
    *sections, leaf = dotted_key.split(".")
    cursor = data
    for section in sections:
        nested = cursor.get(section)
        if not isinstance(nested, dict):
            raise KeyError(f"Unknown setting path: {dotted_key}")
        cursor = nested
    if leaf not in cursor or isinstance(cursor[leaf], dict):
        raise KeyError(f"Unknown setting path: {dotted_key}")
    return cursor, leaf


class SettingsStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or settings_path()

    def load(self) -> AppSettings:
        if not self.path.exists():
            settings = AppSettings()
            self.save(settings)
            return settings

        raw = self.path.read_text(encoding="utf-8")
        try:
            return AppSettings.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError):
            # Keep the unreadable payload next to the fresh defaults.
            self.path.with_suffix(".corrupt.json").write_text(raw, encoding="utf-8")
            settings = AppSettings()
            self.save(settings)
            return settings

    def save(self, settings: AppSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(settings.model_dump(mode="json"), indent=2, sort_keys=True)
        self.path.write_text(f"{payload}\n", encoding="utf-8")

    def get(self, dotted_key: str) -> Any:
        cursor, leaf = _leaf_parent(self.load().model_dump(), dotted_key)
        return cursor[leaf]

    def update(self, dotted_key: str, value: Any) -> AppSettings:
        data = self.load().model_dump()
        cursor, leaf = _leaf_parent(data, dotted_key)
        cursor[leaf] = value

        updated = AppSettings.model_validate(data)
        self.save(updated)
        return updated
