"""Settings schema for pardu."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from pardu.fs.grouping import MB

SortKey = Literal["size", "items", "name"]


class ScanSettings(BaseModel):
    concurrency: int = Field(default=0, ge=0, description="Scan workers; 0 picks one per available CPU")
    threshold_mb: int = Field(default=1, ge=0, description="Files below this size are grouped")

    @property
    def threshold_bytes(self) -> int:
        return self.threshold_mb * MB

    def with_overrides(self, *, concurrency: int | None = None, threshold_mb: int | None = None) -> ScanSettings:
        """Return a copy with command-line values applied where given."""
        update: dict[str, int] = {}
        if concurrency is not None:
            update["concurrency"] = concurrency
        if threshold_mb is not None:
            update["threshold_mb"] = threshold_mb
        return self.model_copy(update=update)


class BrowserSettings(BaseModel):
    confirm_delete: bool = Field(default=True)
    sort_by: SortKey = Field(default="size")


class AppearanceSettings(BaseModel):
    theme: str = Field(default="textual-dark", description="Textual theme name")


class AppSettings(BaseModel):
    schema_version: int = Field(default=1)
    scan: ScanSettings = Field(default_factory=ScanSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    appearance: AppearanceSettings = Field(default_factory=AppearanceSettings)

    def setting_items(self) -> list[tuple[str, str]]:
        """Flatten key/value pairs into dotted keys."""

        result: list[tuple[str, str]] = []

        def walk(prefix: str, value: object) -> None:
            if isinstance(value, dict):
                for key, nested in value.items():
                    walk(f"{prefix}.{key}" if prefix else key, nested)
            else:
                result.append((prefix, str(value)))

        walk("", self.model_dump())
        return result
