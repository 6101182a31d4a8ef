"""Password-based encryption of individual files.

On-disk layout: ``salt[16] || nonce[12] || ciphertext`` where the ciphertext
is AES-256-GCM output with its 16-byte tag at the end. There is no magic or
version field.

Both directions write the new file completely (fsync then rename into
place) before deleting the source. A crash in between leaves both files,
never neither.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path

from ..errors import AlreadyExistsError, InvalidFormatError, IoError, translate_os_errors
from .aead import NONCE_SIZE, aead_decrypt, aead_encrypt
from .kdf import derive_key

logger = logging.getLogger(__name__)

SALT_SIZE = 16
HEADER_SIZE = SALT_SIZE + NONCE_SIZE
ENCRYPTED_SUFFIX = ".enc"
DECRYPTED_SUFFIX = ".decrypted"


def pack_encrypted(salt: bytes, nonce: bytes, ct: bytes) -> bytes:
    return salt + nonce + ct


def unpack_encrypted(data: bytes) -> tuple[bytes, bytes, bytes]:
    if len(data) < HEADER_SIZE:
        raise InvalidFormatError("encrypted file is too small or corrupt")
    return data[:SALT_SIZE], data[SALT_SIZE:HEADER_SIZE], data[HEADER_SIZE:]


def encrypted_path_for(path: Path) -> Path:
    """``report.pdf`` -> ``report.pdf.enc``"""
    return path.with_name(path.name + ENCRYPTED_SUFFIX)


def decrypted_path_for(path: Path) -> Path:
    """Strip a trailing ``.enc``; otherwise append ``.decrypted``."""
    name = path.name
    if name.endswith(ENCRYPTED_SUFFIX) and len(name) > len(ENCRYPTED_SUFFIX):
        return path.with_name(name[: -len(ENCRYPTED_SUFFIX)])
    return path.with_name(name + DECRYPTED_SUFFIX)


def _require_password(password: str) -> None:
    if not isinstance(password, str) or password == "":
        raise ValueError("Password must be a non-empty string.")


def _read_file(path: Path) -> bytes:
    if path.is_dir():
        raise IoError("not a regular file", path)
    with translate_os_errors(path):
        return path.read_bytes()


def _write_durably(target: Path, data: bytes) -> None:
    """Write ``data`` to a fresh temp sibling, fsync, then rename it onto ``target``."""
    if os.path.lexists(target):
        raise AlreadyExistsError("output file already exists", target)
    with translate_os_errors(target.parent):
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with translate_os_errors(tmp):
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        with translate_os_errors(target):
            os.replace(tmp, target)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise


def encrypt_file(path: Path | str, password: str) -> Path:
    """Encrypt ``path`` into ``<name>.enc`` and delete the plaintext afterwards."""
    _require_password(password)
    source = Path(os.path.abspath(path))
    plaintext = _read_file(source)
    target = encrypted_path_for(source)

    salt = os.urandom(SALT_SIZE)
    key = derive_key(password, salt)
    nonce, ct = aead_encrypt(key, plaintext)

    _write_durably(target, pack_encrypted(salt, nonce, ct))
    with translate_os_errors(source):
        os.unlink(source)
    logger.info("encrypted %s -> %s", source, target.name)
    return target


def decrypt_file(path: Path | str, password: str) -> Path:
    """Decrypt ``path`` next to itself and delete the encrypted file afterwards.

    A wrong password or tampered data raises ``AuthenticationFailedError``
    and leaves ``path`` untouched.
    """
    _require_password(password)
    source = Path(os.path.abspath(path))
    salt, nonce, ct = unpack_encrypted(_read_file(source))

    key = derive_key(password, salt)
    plaintext = aead_decrypt(key, nonce, ct)

    target = decrypted_path_for(source)
    _write_durably(target, plaintext)
    with translate_os_errors(source):
        os.unlink(source)
    logger.info("decrypted %s -> %s", source, target.name)
    return target


__all__ = [
    "SALT_SIZE",
    "HEADER_SIZE",
    "pack_encrypted",
    "unpack_encrypted",
    "encrypted_path_for",
    "decrypted_path_for",
    "encrypt_file",
    "decrypt_file",
]
