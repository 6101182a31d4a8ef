"""Domain model for filesystem entries plus scanning and search.

This package contains non-UI primitives:
- the immutable ``FileEntry`` snapshot type
- directory listing with directories-first ordering
- a symlink-safe recursive tree walk
- case-insensitive recursive name search
"""

from __future__ import annotations

from .types import (
    KIND_DIRECTORY,
    KIND_FILE,
    KIND_SYMLINK,
    KIND_UNKNOWN,
    SORT_BY_MODIFIED,
    SORT_BY_NAME,
    SORT_BY_SIZE,
    SORT_COLUMNS,
    FileEntry,
)
from .fs import entry_from_stat, list_directory, scan_entry, sort_entries, walk_tree
from .search import search

__all__ = [
    "KIND_DIRECTORY",
    "KIND_FILE",
    "KIND_SYMLINK",
    "KIND_UNKNOWN",
    "SORT_BY_NAME",
    "SORT_BY_SIZE",
    "SORT_BY_MODIFIED",
    "SORT_COLUMNS",
    "FileEntry",
    "entry_from_stat",
    "scan_entry",
    "list_directory",
    "walk_tree",
    "sort_entries",
    "search",
]
