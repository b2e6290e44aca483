"""In-memory disk usage tree with lazily cached size and item counts.

A ``FileNode`` is a file, a directory, or a virtual aggregate standing in for
a group of small files. Parents own their children; the ``parent`` link is
only followed upward for path reconstruction and cache invalidation.

Aggregates are memoized per node and computed without recursion, so tree
depth is limited only by the filesystem. Concurrent readers that find an
empty cache may each compute the total; the computation only reads already
materialized children, so every writer stores the same value.
"""

from __future__ import annotations

import errno
import os
import shutil
import threading
from collections.abc import Iterable

ROOT_LABEL = "/.."


class FileNode:
    __slots__ = (
        "_name",
        "_parent",
        "_is_dir",
        "_is_virtual",
        "_children",
        "_info",
        "_info_loaded",
        "_size",
        "_count",
        "_stale",
        "_generation",
        "_lock",
    )

    def __init__(
        self,
        name: str,
        *,
        parent: FileNode | None = None,
        is_dir: bool = False,
        info: os.stat_result | None = None,
    ) -> None:
        self._name = name
        self._parent = parent
        self._is_dir = is_dir
        self._is_virtual = False
        self._children: tuple[FileNode, ...] = ()
        self._info = info
        self._info_loaded = info is not None
        self._size: int | None = None
        self._count: int | None = None
        self._stale = False
        self._generation = 0
        self._lock = threading.Lock()

    @classmethod
    def root(cls, path: str, info: os.stat_result | None = None) -> FileNode:
        """Create the scan root; it reports zero size and count until expanded."""
        node = cls(path, is_dir=True, info=info)
        node._size = 0
        node._count = 0
        return node

    @classmethod
    def virtual(cls, parent: FileNode, name: str, *, size: int, count: int) -> FileNode:
        """Create an aggregate entry whose totals are fixed at creation."""
        node = cls(name, parent=parent)
        node._is_virtual = True
        node._info_loaded = True
        node._size = size
        node._count = count
        return node

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> FileNode | None:
        return self._parent

    @property
    def is_dir(self) -> bool:
        return self._is_dir

    @property
    def is_virtual(self) -> bool:
        return self._is_virtual

    @property
    def children(self) -> tuple[FileNode, ...]:
        with self._lock:
            return self._children

    def is_root(self) -> bool:
        return self._parent is None

    def path(self) -> str:
        parts: list[str] = []
        node: FileNode | None = self
        while node is not None:
            parts.append(node._name)
            node = node._parent
        return os.path.join(*reversed(parts))

    def label(self) -> str:
        if self._is_virtual:
            return self._name
        if self.is_root():
            return ROOT_LABEL
        if self._is_dir:
            return self._name + os.sep
        return self._name

    def info(self) -> os.stat_result | None:
        """Return stat metadata, statting the path once if it was never captured."""
        with self._lock:
            if not self._info_loaded:
                self._info_loaded = True
                try:
                    self._info = os.lstat(self.path())
                except OSError:
                    self._info = None
            return self._info

    def size(self) -> int:
        return self._aggregate("_size")

    def count(self) -> int:
        return self._aggregate("_count")

    def _aggregate(self, slot: str) -> int:
        cached, generation, children = self._snapshot(slot)
        if cached is not None:
            return cached

        # Post-order walk over descendants with unknown totals. Each node's
        # cache is filled before its parent sums it, so depth is unbounded.
        totals: dict[FileNode, int] = {}
        pending: list[tuple[FileNode, int, tuple[FileNode, ...], bool]] = [
            (self, generation, children, False)
        ]
        while pending:
            node, node_generation, node_children, ready = pending.pop()
            if not ready:
                pending.append((node, node_generation, node_children, True))
                for child in node_children:
                    child_cached, child_generation, grandchildren = child._snapshot(slot)
                    if child_cached is None:
                        pending.append((child, child_generation, grandchildren, False))
                    else:
                        totals[child] = child_cached
                continue

            total = node._own_total(slot, sum(totals[child] for child in node_children))
            with node._lock:
                if node._generation == node_generation:
                    setattr(node, slot, total)
            totals[node] = total
        return totals[self]

    def _snapshot(self, slot: str) -> tuple[int | None, int, tuple[FileNode, ...]]:
        with self._lock:
            self._absorb_stale()
            return getattr(self, slot), self._generation, self._children

    def _own_total(self, slot: str, children_total: int) -> int:
        if slot == "_count":
            return 1 + children_total if self._is_dir else 1
        if self._is_dir:
            return children_total
        return self._info.st_size if self._info is not None else 0

    def set_children(self, children: Iterable[FileNode]) -> None:
        """Replace the children and drop cached totals here and on the parent."""
        if not self._is_dir:
            raise ValueError(f"{self._name!r} is not a directory")
        replacement = tuple(children)
        with self._lock:
            self._children = replacement
            self._reset_cache()

        parent = self._parent
        if parent is not None:
            parent._mark_stale()

    def delete(self) -> None:
        """Remove the file or directory tree on disk; the in-memory tree is left as is."""
        if self._is_virtual:
            raise OSError(errno.ENOENT, "grouped entry has no file on disk", self._name)
        path = self.path()
        if self._is_dir:
            shutil.rmtree(path)
        else:
            os.remove(path)

    def _mark_stale(self) -> None:
        # Lock-free; the next size()/count() on this node picks it up.
        self._stale = True

    def _absorb_stale(self) -> None:
        if self._stale:
            self._stale = False
            self._reset_cache()

    def _reset_cache(self) -> None:
        self._size = None
        self._count = None
        self._generation += 1

    def __repr__(self) -> str:
        kind = "virtual" if self._is_virtual else "dir" if self._is_dir else "file"
        return f"FileNode({self.path()!r}, {kind})"

    def __str__(self) -> str:
        return self.path()
