"""Shared progress counters written by scan workers and read by the UI."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ProgressSnapshot:
    current_path: str
    total_size: int
    total_items: int


class ScanProgress:
    """Thread-safe running totals for one scan at a time.

    Totals count raw directory entries as they are listed, before small files
    are grouped, so they track disk activity rather than the final tree.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current_path = ""
        self._total_size = 0
        self._total_items = 0

    def reset(self) -> None:
        with self._lock:
            self._current_path = ""
            self._total_size = 0
            self._total_items = 0

    def visit(self, path: str) -> None:
        with self._lock:
            self._current_path = path

    def record(self, size: int) -> None:
        with self._lock:
            self._total_size += size
            self._total_items += 1

    @property
    def current_path(self) -> str:
        with self._lock:
            return self._current_path

    @property
    def total_size(self) -> int:
        with self._lock:
            return self._total_size

    @property
    def total_items(self) -> int:
        with self._lock:
            return self._total_items

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(
                current_path=self._current_path,
                total_size=self._total_size,
                total_items=self._total_items,
            )


SCAN_PROGRESS = ScanProgress()
