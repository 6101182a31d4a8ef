"""Create, rename, delete, copy and move primitives for single entries or subtrees.

Nothing here is transactional. A failed recursive copy or cross-device move
leaves whatever was already written in place; callers should treat such a
failure as "partially applied, inspect the destination".
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
from pathlib import Path

from .cancel import CancelToken
from .errors import AlreadyExistsError, IoError, from_os_error, translate_os_errors
from .file_tree_model import KIND_DIRECTORY, KIND_UNKNOWN, walk_tree

logger = logging.getLogger(__name__)


def validate_entry_name(name: str) -> str:
    """Reject names that are not exactly one path component."""
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if not name or name in {".", ".."} or any(sep in name for sep in separators) or "\x00" in name:
        raise IoError(f"invalid name {name!r}")
    return name


def _absolute(path: Path | str) -> Path:
    return Path(os.path.abspath(path))


def _require_absent(target: Path, message: str) -> None:
    if os.path.lexists(target):
        raise AlreadyExistsError(message, target)


def create_directory(parent: Path | str, name: str) -> Path:
    """Create ``parent/name`` as a new directory; never reuses an existing path."""
    target = _absolute(parent) / validate_entry_name(name)
    _require_absent(target, "directory already exists")
    with translate_os_errors(target):
        os.mkdir(target)
    logger.info("created directory %s", target)
    return target


def create_file(parent: Path | str, name: str) -> Path:
    """Create an empty ``parent/name``; exclusive mode so nothing is overwritten."""
    target = _absolute(parent) / validate_entry_name(name)
    _require_absent(target, "file already exists")
    with translate_os_errors(target):
        with open(target, "xb"):
            pass
    logger.info("created file %s", target)
    return target


def rename(path: Path | str, new_name: str) -> Path:
    """Rename ``path`` within its parent directory and return the new path.

    A taken destination raises ``AlreadyExistsError`` (plain ``os.rename``
    would replace files silently on POSIX). Renaming to a different case of
    the same name is allowed on case-insensitive filesystems; a hard link to
    the same inode under another name still counts as taken.
    """
    source = _absolute(path)
    target = source.parent / validate_entry_name(new_name)
    with translate_os_errors(source):
        source_stat = os.lstat(source)
    if os.path.lexists(target):
        with translate_os_errors(target):
            same_entry = os.path.samestat(source_stat, os.lstat(target))
        if not same_entry or target.name.lower() != source.name.lower():
            raise AlreadyExistsError("destination already exists", target)
    with translate_os_errors(source):
        os.rename(source, target)
    logger.info("renamed %s -> %s", source, target.name)
    return target


def delete(path: Path | str) -> None:
    """Remove a file, symlink, or a directory with its entire contents.

    Irreversible. A symlink to a directory is unlinked; its target is kept.
    """
    target = _absolute(path)
    with translate_os_errors(target):
        mode = os.lstat(target).st_mode
    if stat.S_ISDIR(mode):
        with translate_os_errors():
            shutil.rmtree(target)
    else:
        with translate_os_errors(target):
            os.unlink(target)
    logger.info("deleted %s", target)


def _is_within(candidate: Path, ancestor: Path) -> bool:
    try:
        candidate = candidate.resolve()
        ancestor = ancestor.resolve()
    except OSError:
        return False
    return candidate == ancestor or ancestor in candidate.parents


def copy(src: Path | str, dest_dir: Path | str, cancel: CancelToken | None = None) -> Path:
    """Copy ``src`` into ``dest_dir`` keeping its name; directories recursively.

    Symlinks are recreated as links, never followed. Not atomic: on failure
    (disk full, permission error, cancellation) the already-copied subset
    stays on disk.
    """
    source = _absolute(src)
    destination = _absolute(dest_dir)
    with translate_os_errors(source):
        mode = os.lstat(source).st_mode
    target = destination / source.name
    _require_absent(target, "destination already exists")

    if not stat.S_ISDIR(mode):
        with translate_os_errors():
            shutil.copy2(source, target, follow_symlinks=False)
        logger.info("copied %s -> %s", source, target)
        return target

    if _is_within(destination, source):
        raise IoError("cannot copy a directory into itself", destination)

    with translate_os_errors(target):
        os.mkdir(target)
        shutil.copystat(source, target)
    with translate_os_errors():
        for entry in walk_tree(source, cancel=cancel, strict=True):
            out = target / entry.path.relative_to(source)
            if entry.kind == KIND_DIRECTORY:
                os.mkdir(out)
            elif entry.kind == KIND_UNKNOWN:
                logger.debug("not copying special file %s", entry.path)
            else:
                shutil.copy2(entry.path, out, follow_symlinks=False)
    logger.info("copied %s -> %s", source, target)
    return target


def move(src: Path | str, dest_dir: Path | str) -> Path:
    """Move ``src`` into ``dest_dir``.

    Same-device moves are a single rename. Cross-device moves copy then
    delete the source, inheriting ``copy``'s non-atomic contract.
    """
    source = _absolute(src)
    destination = _absolute(dest_dir)
    target = destination / source.name
    _require_absent(target, "destination already exists")
    try:
        os.rename(source, target)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise from_os_error(exc) from exc
        copy(source, destination)
        delete(source)
    logger.info("moved %s -> %s", source, target)
    return target


__all__ = [
    "validate_entry_name",
    "create_directory",
    "create_file",
    "rename",
    "delete",
    "copy",
    "move",
]
