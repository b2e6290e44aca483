"""Merge a directory's small files into a single aggregate entry."""

from __future__ import annotations

from collections.abc import Iterable

from pardu.fs.entry import FileNode
from pardu.fs.reader import RawEntry

MB = 1024 * 1024


def small_files_label(threshold: int) -> str:
    return f"<Files smaller than {threshold // MB}MB>"


def group_small_files(parent: FileNode, entries: Iterable[RawEntry], threshold: int) -> list[FileNode]:
    """Build ``parent``'s children, folding files below ``threshold`` into one virtual entry.

    Directories and files of at least ``threshold`` bytes become individual
    nodes. The aggregate, when any small file exists, is appended last.
    """
    kept: list[FileNode] = []
    small_size = 0
    small_count = 0

    for entry in entries:
        if not entry.is_dir and entry.size < threshold:
            small_size += entry.size
            small_count += 1
            continue
        kept.append(FileNode(entry.name, parent=parent, is_dir=entry.is_dir, info=entry.info))

    if small_count:
        kept.append(
            FileNode.virtual(
                parent,
                small_files_label(threshold),
                size=small_size,
                count=small_count,
            )
        )
    return kept
