"""Password-based key derivation for SealBox (Argon2id)."""
import os
from dataclasses import dataclass
from typing import Union

from argon2.exceptions import HashingError
from argon2.low_level import ARGON2_VERSION, Type, hash_secret_raw

from ..core.exceptions import KeyDerivationError

SALT_LEN = 16
KEY_LEN = 32


@dataclass(frozen=True)
class KdfParams:
    """Argon2id cost parameters.

    The defaults match the reference Argon2 implementation's defaults, so
    records written by other tools using them stay readable. They are not
    stored in the record, which means a vault must always be opened with
    the parameters it was written with.
    """

    time_cost: int = 2
    memory_cost: int = 19456  # KiB
    parallelism: int = 1


DEFAULT_PARAMS = KdfParams()


def generate_salt(length: int = SALT_LEN) -> bytes:
    """Return a cryptographically secure random salt."""
    return os.urandom(length)


def derive_key(
    password: Union[bytes, bytearray, str],
    salt: bytes,
    params: KdfParams = DEFAULT_PARAMS,
    key_len: int = KEY_LEN,
) -> bytes:
    """
    Derive a symmetric key from a password using Argon2id.
    Returns raw derived key bytes; raises KeyDerivationError instead of aborting.
    """
    if isinstance(password, str):
        password = password.encode("utf-8")
    if len(salt) != SALT_LEN:
        raise KeyDerivationError(f"salt must be {SALT_LEN} bytes, got {len(salt)}")

    try:
        return hash_secret_raw(
            secret=bytes(password),
            salt=bytes(salt),
            time_cost=params.time_cost,
            memory_cost=params.memory_cost,
            parallelism=params.parallelism,
            hash_len=key_len,
            type=Type.ID,
            version=ARGON2_VERSION,
        )
    except (HashingError, ValueError, TypeError) as exc:
        raise KeyDerivationError(f"key derivation failed: {exc}") from exc
