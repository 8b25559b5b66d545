"""Security helpers: key derivation and authenticated encryption for SealBox.

This package provides:
- Argon2id-based key derivation from a password and a per-record salt
- AES-256-GCM sealing of secrets into SecretRecords
- SecureBuffer, a scoped byte buffer wiped on release
"""

from .kdf import KdfParams, DEFAULT_PARAMS, generate_salt, derive_key
from .crypto import AeadCipher, CIPHER_ID, encrypt_secret, decrypt_secret
from .secure_buffer import SecureBuffer

__all__ = [
    "KdfParams",
    "DEFAULT_PARAMS",
    "generate_salt",
    "derive_key",
    "AeadCipher",
    "CIPHER_ID",
    "encrypt_secret",
    "decrypt_secret",
    "SecureBuffer",
]
