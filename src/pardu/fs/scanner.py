"""Full-tree scan entry point used by the browser and the report command."""

from __future__ import annotations

import os
import time

from pardu.fs.entry import FileNode
from pardu.fs.grouping import MB
from pardu.fs.pool import ScanPool
from pardu.fs.progress import SCAN_PROGRESS, ScanProgress
from pardu.runtime_logging import get_runtime_logger


def new_root(path: str) -> FileNode:
    try:
        info = os.stat(path)
    except OSError as exc:
        get_runtime_logger().warning("scan.root.stat_failed", path=path, error=str(exc))
        info = None
    return FileNode.root(path, info)


def scan_directory(
    root_path: str | os.PathLike[str],
    concurrency: int = 0,
    threshold: int = MB,
    *,
    progress: ScanProgress | None = None,
) -> list[FileNode]:
    """Scan ``root_path`` and return the root's children.

    The root itself is reachable through any child's ``parent``. Unreadable
    directories, including the root, come back empty rather than failing.
    Raises ``ScanError`` only when a worker hits an unexpected exception.
    """
    progress = progress if progress is not None else SCAN_PROGRESS
    progress.reset()

    root = new_root(os.fspath(root_path))
    logger = get_runtime_logger().bind(root=root.path())
    pool = ScanPool(concurrency, threshold, progress, logger)
    logger.info(
        "scan.started",
        concurrency=pool.concurrency,
        threshold=threshold,
    )

    started = time.monotonic()
    pool.start()
    pool.add_task(root)
    pool.wait()

    children = list(root.children)
    snapshot = progress.snapshot()
    logger.info(
        "scan.finished",
        elapsed_s=round(time.monotonic() - started, 3),
        total_size=snapshot.total_size,
        total_items=snapshot.total_items,
        top_level_entries=len(children),
    )
    return children
