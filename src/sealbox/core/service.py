"""
SecretService: the facade combining the cipher and a SecretStore

Writes flow plaintext -> derive key -> encrypt -> serialize -> create file,
reads flow the mirror image. Every call is single-shot and synchronous; there
is no session or lock state between calls.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ..security.crypto import AeadCipher, Password
from ..security.secure_buffer import SecureBuffer
from .names import validate_key_name
from .storage import FileVault, SecretStore

logger = logging.getLogger(__name__)


class SecretService:
    """Store, retrieve, list and delete password-protected secrets."""

    def __init__(
        self,
        store: Optional[SecretStore] = None,
        cipher: Optional[AeadCipher] = None,
    ):
        self.store = store if store is not None else FileVault()
        self.cipher = cipher if cipher is not None else AeadCipher()

    def store_key(self, name: str, secret: bytes, password: Password) -> None:
        """
        Encrypt ``secret`` under ``password`` and persist it as ``name``.

        Raises InvalidKeyNameError before any work is done, EncryptionError /
        KeyDerivationError if sealing fails, KeyAlreadyExistsError if the name
        is taken. On any failure nothing is written.
        """
        validate_key_name(name)
        record = self.cipher.encrypt(secret, password)
        self.store.save(name, record)

    @contextmanager
    def open_key(self, name: str, password: Password) -> Iterator[SecureBuffer]:
        """
        Decrypt ``name`` and yield the plaintext in a SecureBuffer that is
        wiped when the block exits, however it exits.
        """
        record = self.store.load(name)
        with self.cipher.decrypt(record, password) as plaintext:
            logger.debug("Decrypted key %r", name)
            yield plaintext

    def retrieve_key(self, name: str, password: Password) -> bytes:
        """
        Return the decrypted secret.

        KeyNotFoundError / SerializationError come from storage,
        AuthenticationError from a wrong password or a tampered record.
        """
        with self.open_key(name, password) as plaintext:
            return plaintext.bytes()

    def list_keys(self) -> List[str]:
        return self.store.list()

    def delete_key(self, name: str) -> None:
        # no password check: a key can be rotated without ever exposing it
        self.store.delete(name)

    def key_exists(self, name: str) -> bool:
        return self.store.exists(name)


# module-level default service bound to the user's vault directory
_default_service: Optional[SecretService] = None


def get_service() -> SecretService:
    global _default_service
    if _default_service is None:
        _default_service = SecretService()
    return _default_service


def set_service(service: Optional[SecretService]) -> None:
    """Replace (or with None, reset) the default service."""
    global _default_service
    _default_service = service


def store_key(name: str, secret: bytes, password: Password) -> None:
    get_service().store_key(name, secret, password)


def retrieve_key(name: str, password: Password) -> bytes:
    return get_service().retrieve_key(name, password)


def list_keys() -> List[str]:
    return get_service().list_keys()


def delete_key(name: str) -> None:
    get_service().delete_key(name)


def key_exists(name: str) -> bool:
    return get_service().key_exists(name)
