"""AES-256-GCM sealing with a fresh random 96-bit nonce per message."""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..errors import AuthenticationFailedError

NONCE_SIZE = 12
TAG_SIZE = 16


def aead_encrypt(key: bytes, plaintext: bytes, aad: bytes | None = None) -> tuple[bytes, bytes]:
    """Return ``(nonce, ciphertext)``; the 16-byte tag ends the ciphertext."""
    nonce = os.urandom(NONCE_SIZE)
    aesgcm = AESGCM(key)
    ct = aesgcm.encrypt(nonce, plaintext, aad)
    return nonce, ct


def aead_decrypt(key: bytes, nonce: bytes, ct: bytes, aad: bytes | None = None) -> bytes:
    """Open ``ct`` or raise ``AuthenticationFailedError``; never returns partial plaintext."""
    aesgcm = AESGCM(key)
    try:
        return aesgcm.decrypt(nonce, ct, aad)
    except InvalidTag:
        raise AuthenticationFailedError("wrong password or corrupted data") from None


__all__ = [
    "NONCE_SIZE",
    "TAG_SIZE",
    "aead_encrypt",
    "aead_decrypt",
]
