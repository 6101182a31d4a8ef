"""Store-only zip packing and zip-slip-safe unpacking of files and trees."""

from __future__ import annotations

import logging
import os
import shutil
import zipfile
from pathlib import Path, PureWindowsPath

from .cancel import CancelToken, check_cancelled
from .errors import (
    AlreadyExistsError,
    InvalidFormatError,
    SecurityError,
    from_os_error,
    translate_os_errors,
)
from .file_tree_model import KIND_DIRECTORY, KIND_FILE, walk_tree

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"
COPY_CHUNK_SIZE = 1024 * 1024

_SUPPORTED_METHODS = frozenset(
    method
    for method, module in (
        (zipfile.ZIP_STORED, True),
        (zipfile.ZIP_DEFLATED, zipfile.zlib),
        (zipfile.ZIP_BZIP2, zipfile.bz2),
        (zipfile.ZIP_LZMA, zipfile.lzma),
    )
    if module
)


def default_archive_path(src: Path) -> Path:
    """Sibling archive path: ``notes.txt`` -> ``notes.zip``, ``photos/`` -> ``photos.zip``."""
    if src.is_dir():
        return src.with_name(src.name + ARCHIVE_SUFFIX)
    return src.with_suffix(ARCHIVE_SUFFIX)


def default_extract_dir(archive: Path) -> Path:
    """Sibling directory named after the archive stem."""
    return archive.parent / archive.stem


def pack(src: Path | str, dest: Path | str, cancel: CancelToken | None = None) -> Path:
    """Write ``src`` (a file or a whole tree) into a new store-only zip at ``dest``.

    Names are relative to ``src`` with ``/`` separators and directories get
    explicit ``name/`` entries so empty directories survive. Symlinks inside
    the tree are skipped. Never overwrites ``dest``; a failure part way
    leaves the incomplete archive on disk.
    """
    source = Path(os.path.abspath(src))
    archive = Path(os.path.abspath(dest))
    if os.path.lexists(archive):
        raise AlreadyExistsError("archive already exists", archive)
    with translate_os_errors(source):
        source_is_dir = source.is_dir()
        if not source_is_dir:
            os.stat(source)

    with translate_os_errors(archive):
        handle = open(archive, "xb")
    with handle, zipfile.ZipFile(handle, "w", compression=zipfile.ZIP_STORED, strict_timestamps=False) as zf:
        with translate_os_errors():
            if not source_is_dir:
                zf.write(source, arcname=source.name)
            else:
                for entry in walk_tree(source, cancel=cancel, strict=True):
                    if entry.path == archive:
                        continue
                    if entry.kind not in (KIND_DIRECTORY, KIND_FILE):
                        logger.debug("not archiving %s entry %s", entry.kind, entry.path)
                        continue
                    zf.write(entry.path, arcname=entry.path.relative_to(source).as_posix())
    logger.info("packed %s -> %s", source, archive)
    return archive


def _member_target(dest_dir: Path, name: str) -> Path:
    """Resolve an archive member name under ``dest_dir`` or raise ``SecurityError``."""
    normalized = name.replace("\\", "/")
    if normalized.startswith("/") or PureWindowsPath(normalized).drive:
        raise SecurityError(f"absolute path in archive entry {name!r}", dest_dir)
    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    target = dest_dir.joinpath(*parts)
    resolved = Path(os.path.realpath(target))
    if resolved != dest_dir and dest_dir not in resolved.parents:
        raise SecurityError(f"archive entry {name!r} escapes destination", dest_dir)
    return target


def _check_member_readable(source: Path, info: zipfile.ZipInfo) -> None:
    """Reject encrypted members and compression methods this runtime cannot decode."""
    if info.flag_bits & 0x1:
        raise InvalidFormatError(f"encrypted archive entry {info.filename!r} is not supported", source)
    if info.compress_type not in _SUPPORTED_METHODS:
        raise InvalidFormatError(
            f"archive entry {info.filename!r} uses unsupported compression method {info.compress_type}",
            source,
        )


def unpack(archive: Path | str, dest_dir: Path | str, cancel: CancelToken | None = None) -> Path:
    """Extract every entry of ``archive`` under ``dest_dir``.

    All member names are checked before anything is written: one entry that
    would land outside ``dest_dir`` (``..`` segments, absolute or
    drive-qualified names) rejects the whole archive with ``SecurityError``.
    Encrypted members or undecodable compression methods reject it with
    ``InvalidFormatError``, also before anything is written.
    """
    source = Path(os.path.abspath(archive))
    destination = Path(os.path.realpath(dest_dir))
    try:
        zf = zipfile.ZipFile(source)
    except zipfile.BadZipFile as exc:
        raise InvalidFormatError(f"not a zip archive ({exc})", source) from exc
    except OSError as exc:
        raise from_os_error(exc, source) from exc

    with zf:
        plan: list[tuple[zipfile.ZipInfo, Path]] = []
        for info in zf.infolist():
            try:
                plan.append((info, _member_target(destination, info.filename)))
            except SecurityError:
                logger.warning("rejecting %s: unsafe entry %r", source, info.filename)
                raise
            _check_member_readable(source, info)

        with translate_os_errors():
            destination.mkdir(parents=True, exist_ok=True)
            for info, target in plan:
                check_cancelled(cancel)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                try:
                    with zf.open(info) as src_handle, open(target, "wb") as dst_handle:
                        shutil.copyfileobj(src_handle, dst_handle, COPY_CHUNK_SIZE)
                except (zipfile.BadZipFile, NotImplementedError, RuntimeError) as exc:
                    raise InvalidFormatError(f"unreadable archive entry {info.filename!r} ({exc})", source) from exc
    logger.info("unpacked %s -> %s", source, destination)
    return destination


__all__ = [
    "default_archive_path",
    "default_extract_dir",
    "pack",
    "unpack",
]
