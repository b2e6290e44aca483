"""Synchronous listing of one directory's immediate children."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class RawEntry:
    name: str
    is_dir: bool
    info: os.stat_result

    @property
    def size(self) -> int:
        return self.info.st_size


def read_directory(path: str) -> list[RawEntry]:
    """List ``path`` without following symlinks.

    Raises ``OSError`` when the directory cannot be opened or read. Entries
    that disappear between listing and stat are skipped.
    """
    entries: list[RawEntry] = []
    with os.scandir(path) as listing:
        for item in listing:
            try:
                info = item.stat(follow_symlinks=False)
            except FileNotFoundError:
                continue
            entries.append(RawEntry(name=item.name, is_dir=stat.S_ISDIR(info.st_mode), info=info))
    return entries
