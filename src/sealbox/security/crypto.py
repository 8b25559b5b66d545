"""AES-256-GCM encryption of secrets under an Argon2id password-derived key.

Each call to :meth:`AeadCipher.encrypt` draws a fresh 16-byte salt and a fresh
12-byte nonce, so every record gets its own key and a (key, nonce) pair is
never used twice. Decryption failures of any kind (wrong password, flipped
bit, bad hex, wrong lengths) raise :class:`AuthenticationError` and never
return partial plaintext.
"""
import logging
import os
from typing import Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..core.exceptions import (
    AuthenticationError,
    EncryptionError,
    UnsupportedCipherError,
)
from ..core.models import CryptoData, SecretRecord
from .kdf import DEFAULT_PARAMS, SALT_LEN, KdfParams, derive_key, generate_salt
from .secure_buffer import SecureBuffer

logger = logging.getLogger(__name__)

CIPHER_ID = "aes-256-gcm"
NONCE_LEN = 12
TAG_LEN = 16

Password = Union[str, bytes, bytearray]


def generate_nonce() -> bytes:
    return os.urandom(NONCE_LEN)


def _decode_field(field: str, value: str, expected_len: int = 0) -> bytes:
    try:
        raw = bytes.fromhex(value)
    except ValueError as exc:
        raise AuthenticationError(f"record {field} is not valid hex") from exc
    if expected_len and len(raw) != expected_len:
        raise AuthenticationError(
            f"record {field} has length {len(raw)}, expected {expected_len}"
        )
    return raw


class AeadCipher:
    """Password-based authenticated encryption producing :class:`SecretRecord`s."""

    cipher_id = CIPHER_ID

    def __init__(self, params: KdfParams = DEFAULT_PARAMS):
        self.params = params

    def _derive(self, password: SecureBuffer, salt: bytes) -> SecureBuffer:
        return SecureBuffer(derive_key(password.view(), salt, self.params))

    def encrypt(self, plaintext: bytes, password: Password) -> SecretRecord:
        """Encrypt ``plaintext`` and return a record without metadata."""
        salt = generate_salt()
        nonce = generate_nonce()
        with SecureBuffer(password) as pw, self._derive(pw, salt) as key:
            try:
                ciphertext = AESGCM(key.view()).encrypt(nonce, bytes(plaintext), None)
            except (ValueError, TypeError, OverflowError) as exc:
                raise EncryptionError(f"encryption failed: {exc}") from exc

        return SecretRecord(
            crypto_key=CryptoData(
                cipher=self.cipher_id,
                salt=salt.hex(),
                nonce=nonce.hex(),
                ciphertext=ciphertext.hex(),
            )
        )

    def decrypt(self, record: SecretRecord, password: Password) -> SecureBuffer:
        """
        Re-derive the key from the record's salt and decrypt.

        Returns the plaintext in a SecureBuffer owned by the caller, who
        should use it as a context manager so it gets wiped.
        """
        data = record.crypto_key
        if data.cipher != self.cipher_id:
            raise UnsupportedCipherError(data.cipher)

        salt = _decode_field("salt", data.salt, SALT_LEN)
        nonce = _decode_field("nonce", data.nonce, NONCE_LEN)
        ciphertext = _decode_field("ciphertext", data.ciphertext)
        if len(ciphertext) < TAG_LEN:
            raise AuthenticationError("record ciphertext is shorter than the tag")

        with SecureBuffer(password) as pw, self._derive(pw, salt) as key:
            try:
                plaintext = AESGCM(key.view()).decrypt(nonce, ciphertext, None)
            except InvalidTag as exc:
                logger.debug("AES-GCM tag check failed")
                raise AuthenticationError(
                    "decryption failed: wrong password or tampered record"
                ) from exc
        return SecureBuffer(plaintext)


_default_cipher = AeadCipher()


def encrypt_secret(plaintext: bytes, password: Password) -> SecretRecord:
    return _default_cipher.encrypt(plaintext, password)


def decrypt_secret(record: SecretRecord, password: Password) -> bytes:
    with _default_cipher.decrypt(record, password) as buf:
        return buf.bytes()
