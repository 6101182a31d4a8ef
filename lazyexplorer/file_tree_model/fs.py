"""Filesystem scanning: directory listing, entry snapshots, and tree walks."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterable, Iterator
from pathlib import Path

from ..cancel import CancelToken, check_cancelled
from ..errors import translate_os_errors
from .types import (
    KIND_DIRECTORY,
    KIND_FILE,
    KIND_SYMLINK,
    KIND_UNKNOWN,
    SORT_BY_MODIFIED,
    SORT_BY_NAME,
    SORT_BY_SIZE,
    FileEntry,
)

logger = logging.getLogger(__name__)

_FILE_ATTRIBUTE_HIDDEN = getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0x2)


def _kind_from_mode(mode: int) -> str:
    if stat.S_ISLNK(mode):
        return KIND_SYMLINK
    if stat.S_ISDIR(mode):
        return KIND_DIRECTORY
    if stat.S_ISREG(mode):
        return KIND_FILE
    return KIND_UNKNOWN


def _is_hidden(name: str, st: os.stat_result) -> bool:
    """Windows hidden attribute when the platform reports one, dotfiles otherwise."""
    attributes = getattr(st, "st_file_attributes", None)
    if attributes is not None:
        return bool(attributes & _FILE_ATTRIBUTE_HIDDEN)
    return name.startswith(".")


def entry_from_stat(path: Path, st: os.stat_result) -> FileEntry:
    """Build a ``FileEntry`` from ``lstat`` metadata."""
    kind = _kind_from_mode(st.st_mode)
    name = path.name or str(path)
    return FileEntry(
        name=name,
        path=path,
        kind=kind,
        size=0 if kind == KIND_DIRECTORY else int(st.st_size),
        modified=int(st.st_mtime),
        hidden=_is_hidden(name, st),
    )


def scan_entry(path: Path | str) -> FileEntry:
    """Snapshot a single path without following a final symlink."""
    target = Path(os.path.abspath(path))
    with translate_os_errors(target):
        st = os.lstat(target)
    return entry_from_stat(target, st)


def _scan_children(directory: Path) -> list[FileEntry]:
    """List children of ``directory`` sorted for display.

    Raises ``OSError`` when the directory itself cannot be opened; children
    that cannot be stat-ed are skipped.
    """
    children: list[FileEntry] = []
    with os.scandir(directory) as entries:
        for child in entries:
            try:
                st = child.stat(follow_symlinks=False)
            except OSError as exc:
                logger.debug("skipping unreadable entry %s: %s", child.path, exc)
                continue
            children.append(entry_from_stat(directory / child.name, st))
    return sort_entries(children)


def list_directory(path: Path | str, show_hidden: bool = True) -> list[FileEntry]:
    """Return immediate children of ``path``, directories first then by name.

    Raises ``NotFoundError``/``PermissionDeniedError`` (or ``IoError`` for
    other failures such as a non-directory path) only when the directory
    itself cannot be opened.
    """
    directory = Path(os.path.abspath(path))
    with translate_os_errors(directory):
        children = _scan_children(directory)
    if not show_hidden:
        children = [child for child in children if not child.hidden]
    return children


def walk_tree(
    root: Path | str,
    cancel: CancelToken | None = None,
    strict: bool = False,
) -> Iterator[FileEntry]:
    """Yield every entry below ``root`` in depth-first pre-order.

    Symlinked directories are reported but never descended into, so the walk
    terminates on trees containing link cycles. Unreadable subdirectories are
    skipped unless ``strict`` is set, in which case the ``OSError``
    propagates. ``cancel`` is checked before each yielded entry.
    """

    def walk(directory: Path) -> Iterator[FileEntry]:
        try:
            children = _scan_children(directory)
        except OSError as exc:
            if strict:
                raise
            logger.debug("skipping unreadable directory %s: %s", directory, exc)
            return
        for child in children:
            check_cancelled(cancel)
            yield child
            if child.kind == KIND_DIRECTORY:
                yield from walk(child.path)

    yield from walk(Path(os.path.abspath(root)))


_SORT_KEYS = {
    SORT_BY_NAME: lambda entry: entry.name.lower(),
    SORT_BY_SIZE: lambda entry: entry.size,
    SORT_BY_MODIFIED: lambda entry: entry.modified,
}


def sort_entries(
    entries: Iterable[FileEntry],
    column: str = SORT_BY_NAME,
    descending: bool = False,
) -> list[FileEntry]:
    """Order entries by ``column`` while keeping directories ahead of files.

    ``descending`` reverses order within each group only. Ties fall back to
    case-insensitive name.
    """
    try:
        column_key = _SORT_KEYS[column]
    except KeyError:
        raise ValueError(f"unknown sort column: {column!r}") from None
    ordered = sorted(entries, key=lambda entry: (column_key(entry), entry.name.lower()), reverse=descending)
    ordered.sort(key=lambda entry: not entry.is_dir)
    return ordered


__all__ = [
    "entry_from_stat",
    "scan_entry",
    "list_directory",
    "walk_tree",
    "sort_entries",
]
