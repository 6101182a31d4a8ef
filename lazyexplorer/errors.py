"""Error taxonomy shared by every filesystem and security operation.

Each failure carries a ``kind`` plus a human-readable message; callers show
the message and leave the filesystem exactly as the failed operation left it.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Iterator
from pathlib import Path

KIND_NOT_FOUND = "not_found"
KIND_PERMISSION_DENIED = "permission_denied"
KIND_ALREADY_EXISTS = "already_exists"
KIND_INVALID_FORMAT = "invalid_format"
KIND_AUTHENTICATION_FAILED = "authentication_failed"
KIND_SECURITY = "security"
KIND_IO = "io"
KIND_CANCELLED = "cancelled"


class FsError(Exception):
    """Base failure for all core operations."""

    kind = KIND_IO

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


class NotFoundError(FsError):
    kind = KIND_NOT_FOUND


class PermissionDeniedError(FsError):
    kind = KIND_PERMISSION_DENIED


class AlreadyExistsError(FsError):
    kind = KIND_ALREADY_EXISTS


class InvalidFormatError(FsError):
    """Malformed encrypted header or archive."""

    kind = KIND_INVALID_FORMAT


class AuthenticationFailedError(FsError):
    """Wrong password or tampered ciphertext."""

    kind = KIND_AUTHENTICATION_FAILED


class SecurityError(FsError):
    """Archive entry that would land outside the extraction directory."""

    kind = KIND_SECURITY


class IoError(FsError):
    kind = KIND_IO


class CancelledError(FsError):
    kind = KIND_CANCELLED


def from_os_error(exc: OSError, path: Path | str | None = None) -> FsError:
    """Map an ``OSError`` onto the taxonomy, keeping its description."""
    if path is None and exc.filename is not None:
        path = os.fsdecode(exc.filename)
    message = exc.strerror or str(exc) or exc.__class__.__name__
    if isinstance(exc, FileNotFoundError):
        error: FsError = NotFoundError(message, path)
    elif isinstance(exc, PermissionError):
        error = PermissionDeniedError(message, path)
    elif isinstance(exc, FileExistsError):
        error = AlreadyExistsError(message, path)
    else:
        error = IoError(message, path)
    error.__cause__ = exc
    return error


@contextlib.contextmanager
def translate_os_errors(path: Path | str | None = None) -> Iterator[None]:
    """Re-raise any ``OSError`` in the block as the matching ``FsError``."""
    try:
        yield
    except OSError as exc:
        raise from_os_error(exc, path) from exc


__all__ = [
    "KIND_NOT_FOUND",
    "KIND_PERMISSION_DENIED",
    "KIND_ALREADY_EXISTS",
    "KIND_INVALID_FORMAT",
    "KIND_AUTHENTICATION_FAILED",
    "KIND_SECURITY",
    "KIND_IO",
    "KIND_CANCELLED",
    "FsError",
    "NotFoundError",
    "PermissionDeniedError",
    "AlreadyExistsError",
    "InvalidFormatError",
    "AuthenticationFailedError",
    "SecurityError",
    "IoError",
    "CancelledError",
    "from_os_error",
    "translate_os_errors",
]
