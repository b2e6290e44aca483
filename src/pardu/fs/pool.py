"""Worker pool that expands directories concurrently from a bounded queue.

Every directory handed to the pool holds one slot of the outstanding-work
counter, taken before it is queued and released after it has been expanded.
The queue is closed when the counter drops to zero. Workers never block on a
full queue: after a few quick retries a subdirectory is expanded inline,
depth-first, on the worker that found it.
"""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable
from queue import Full, Queue

from pardu.fs.entry import FileNode
from pardu.fs.grouping import group_small_files
from pardu.fs.progress import ScanProgress
from pardu.fs.reader import read_directory
from pardu.runtime_logging import RuntimeLogger, get_runtime_logger

QUEUE_SLOTS_PER_WORKER = 4
ENQUEUE_ATTEMPTS = 3
ENQUEUE_BACKOFF_S = 0.000_001


class ScanError(RuntimeError):
    """A worker failed for a reason other than an unreadable directory."""


def default_concurrency() -> int:
    if hasattr(os, "sched_getaffinity"):
        available = len(os.sched_getaffinity(0))
    else:
        available = os.cpu_count() or 1
    return max(1, available)


class _Counter:
    def __init__(self, value: int) -> None:
        self._value = value
        self._lock = threading.Lock()

    def add(self, delta: int) -> int:
        with self._lock:
            self._value += delta
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class ScanPool:
    def __init__(
        self,
        concurrency: int,
        threshold: int,
        progress: ScanProgress,
        logger: RuntimeLogger | None = None,
    ) -> None:
        if concurrency <= 0:
            concurrency = default_concurrency()
        self.concurrency = concurrency
        self.threshold = threshold
        self.progress = progress
        self._tasks: Queue[FileNode | None] = Queue(maxsize=concurrency * QUEUE_SLOTS_PER_WORKER)
        # The root counts as outstanding before it is queued.
        self._outstanding = _Counter(1)
        self._close_lock = threading.Lock()
        self._closed = False
        self._failure: BaseException | None = None
        self._failure_lock = threading.Lock()
        self._threads: list[threading.Thread] = []
        self._logger = logger if logger is not None else get_runtime_logger()

    @property
    def capacity(self) -> int:
        return self._tasks.maxsize

    @property
    def outstanding(self) -> int:
        return self._outstanding.value

    def start(self) -> None:
        for index in range(self.concurrency):
            thread = threading.Thread(
                target=self._worker,
                name=f"pardu-scan-{index}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()

    def add_task(self, directory: FileNode) -> None:
        self._tasks.put(directory)

    def wait(self) -> None:
        for thread in self._threads:
            thread.join()
        if self._failure is not None:
            raise ScanError(f"scan worker failed: {self._failure}") from self._failure

    def _worker(self) -> None:
        while True:
            task = self._tasks.get()
            if task is None:
                return
            self._process(task, self._hand_off)

    def _process(self, directory: FileNode, hand_off: Callable[[FileNode], None]) -> None:
        try:
            if self._failure is None:
                self._expand(directory, hand_off)
        except Exception as exc:
            self._record_failure(directory, exc)
        finally:
            self._task_done()

    def _expand(self, directory: FileNode, hand_off: Callable[[FileNode], None]) -> None:
        path = directory.path()
        self.progress.visit(path)
        try:
            entries = read_directory(path)
        except OSError:
            # Unreadable: the subtree stays empty.
            return

        for entry in entries:
            self.progress.record(entry.size)

        children = group_small_files(directory, entries, self.threshold)
        directory.set_children(children)

        for child in children:
            if child.is_dir and not child.is_virtual:
                hand_off(child)

    def _hand_off(self, directory: FileNode) -> None:
        self._outstanding.add(1)
        if not self._offer(directory):
            self._expand_inline(directory)

    def _offer(self, directory: FileNode) -> bool:
        for attempt in range(ENQUEUE_ATTEMPTS):
            try:
                self._tasks.put_nowait(directory)
                return True
            except Full:
                if attempt + 1 < ENQUEUE_ATTEMPTS:
                    time.sleep(ENQUEUE_BACKOFF_S)
        return False

    def _expand_inline(self, directory: FileNode) -> None:
        pending = [directory]

        def push(child: FileNode) -> None:
            self._outstanding.add(1)
            pending.append(child)

        while pending:
            self._process(pending.pop(), push)

    def _task_done(self) -> None:
        if self._outstanding.add(-1) == 0:
            self._close()

    def _close(self) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        # Outstanding work is zero, so the queue is empty and every sentinel fits.
        for _ in self._threads:
            self._tasks.put_nowait(None)

    def _record_failure(self, directory: FileNode, exc: Exception) -> None:
        with self._failure_lock:
            if self._failure is None:
                self._failure = exc
        self._logger.error(
            "scan.worker.failed",
            path=directory.path(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
