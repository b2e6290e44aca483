"""Concurrent disk usage scanning."""

from pardu.fs.entry import ROOT_LABEL, FileNode
from pardu.fs.grouping import MB, group_small_files, small_files_label
from pardu.fs.pool import ScanError, ScanPool, default_concurrency
from pardu.fs.progress import SCAN_PROGRESS, ProgressSnapshot, ScanProgress
from pardu.fs.reader import RawEntry, read_directory
from pardu.fs.scanner import new_root, scan_directory

__all__ = [
    "MB",
    "ROOT_LABEL",
    "SCAN_PROGRESS",
    "FileNode",
    "ProgressSnapshot",
    "RawEntry",
    "ScanError",
    "ScanPool",
    "ScanProgress",
    "default_concurrency",
    "group_small_files",
    "new_root",
    "read_directory",
    "scan_directory",
    "small_files_label",
]
