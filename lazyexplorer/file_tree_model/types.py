"""Domain datatypes for filesystem entries observed at scan time."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

KIND_DIRECTORY = "directory"
KIND_FILE = "file"
KIND_SYMLINK = "symlink"
KIND_UNKNOWN = "unknown"

SORT_BY_NAME = "name"
SORT_BY_SIZE = "size"
SORT_BY_MODIFIED = "modified"
SORT_COLUMNS = (SORT_BY_NAME, SORT_BY_SIZE, SORT_BY_MODIFIED)


@dataclass(frozen=True)
class FileEntry:
    """Point-in-time snapshot of one filesystem node.

    ``size`` is always 0 for directories and ``modified`` is whole seconds
    since the epoch. Symlinks are described by their own metadata.
    """

    name: str
    path: Path
    kind: str
    size: int = 0
    modified: int = 0
    hidden: bool = False

    @property
    def is_dir(self) -> bool:
        return self.kind == KIND_DIRECTORY


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
]
