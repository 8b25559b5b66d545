"""Unit tests for the Key Derivation Function (KDF) module."""

import pytest
from unittest.mock import patch
from argon2.exceptions import HashingError

from sealbox.core.exceptions import KeyDerivationError
from sealbox.security.kdf import (
    DEFAULT_PARAMS,
    KdfParams,
    derive_key,
    generate_salt,
)

# Use very low costs for speed in unit tests
FAST = KdfParams(time_cost=1, memory_cost=8, parallelism=1)


def test_generate_salt_defaults():
    """Ensure salt generation returns bytes of the default length (16)."""
    salt = generate_salt()
    assert isinstance(salt, bytes)
    assert len(salt) == 16


def test_generate_salt_is_random():
    assert generate_salt() != generate_salt()


def test_default_params_match_reference_argon2_defaults():
    assert DEFAULT_PARAMS == KdfParams(time_cost=2, memory_cost=19456, parallelism=1)


def test_derive_key_length_and_type():
    key = derive_key(b"password", generate_salt(), FAST)
    assert isinstance(key, bytes)
    assert len(key) == 32


def test_derive_key_is_deterministic():
    salt = generate_salt()
    assert derive_key(b"password123", salt, FAST) == derive_key(b"password123", salt, FAST)


def test_derive_key_string_and_bytes_agree():
    """Ensure passing the same password as string or bytes yields the same key."""
    salt = generate_salt()
    assert derive_key("pässword", salt, FAST) == derive_key("pässword".encode("utf-8"), salt, FAST)


def test_derive_key_accepts_bytearray():
    salt = generate_salt()
    assert derive_key(bytearray(b"pw"), salt, FAST) == derive_key(b"pw", salt, FAST)


def test_different_salts_give_different_keys():
    assert derive_key(b"same", generate_salt(), FAST) != derive_key(b"same", generate_salt(), FAST)


def test_different_passwords_give_different_keys():
    salt = generate_salt()
    assert derive_key(b"one", salt, FAST) != derive_key(b"two", salt, FAST)


def test_default_params_derive_a_key():
    """The build-time parameters must be accepted by Argon2."""
    assert len(derive_key(b"hunter2", generate_salt())) == 32


# ==============================================================================
# Tests: Failures are reported, never fatal
# ==============================================================================

def test_wrong_salt_length_raises():
    with pytest.raises(KeyDerivationError, match="salt must be 16 bytes"):
        derive_key(b"pw", b"short", FAST)


def test_invalid_params_raise_key_derivation_error():
    """memory_cost below 8 * parallelism is rejected by Argon2."""
    bad = KdfParams(time_cost=1, memory_cost=1, parallelism=1)
    with pytest.raises(KeyDerivationError):
        derive_key(b"pw", generate_salt(), bad)


def test_hashing_error_is_wrapped():
    with patch("sealbox.security.kdf.hash_secret_raw", side_effect=HashingError("boom")):
        with pytest.raises(KeyDerivationError, match="boom") as excinfo:
            derive_key(b"pw", generate_salt(), FAST)
    assert isinstance(excinfo.value.__cause__, HashingError)
