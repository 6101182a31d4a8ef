"""Per-file, password-based authenticated encryption.

This package contains:
- PBKDF2-HMAC-SHA256 key derivation
- AES-256-GCM sealing and opening
- the ``salt || nonce || ciphertext`` file layout and encrypt/decrypt of files
"""

from __future__ import annotations

from .aead import aead_decrypt, aead_encrypt
from .kdf import derive_key
from .vault import (
    decrypt_file,
    decrypted_path_for,
    encrypt_file,
    encrypted_path_for,
    pack_encrypted,
    unpack_encrypted,
)

__all__ = [
    "aead_encrypt",
    "aead_decrypt",
    "derive_key",
    "encrypt_file",
    "decrypt_file",
    "encrypted_path_for",
    "decrypted_path_for",
    "pack_encrypted",
    "unpack_encrypted",
]
