"""
Validation of secret names

A name becomes a file name inside the keys directory, so this check is the
only thing standing between user input and path traversal. Every storage
operation calls validate_key_name() before touching the filesystem.
"""

import os

from .exceptions import InvalidKeyNameError

RESERVED_PREFIX = "."
PARENT_DIR = ".."

# both separators, whatever the platform
_SEPARATORS = {"/", "\\"} | {s for s in (os.sep, os.altsep) if s}


def validate_key_name(name: str) -> str:
    """Return ``name`` unchanged if it is safe to use, else raise InvalidKeyNameError."""
    if not isinstance(name, str):
        raise InvalidKeyNameError(repr(name), "name must be a string")
    if not name:
        raise InvalidKeyNameError(name, "name must not be empty")
    if any(sep in name for sep in _SEPARATORS):
        raise InvalidKeyNameError(name, "name must not contain path separators")
    if PARENT_DIR in name:
        raise InvalidKeyNameError(name, "name must not contain '..'")
    if name.startswith(RESERVED_PREFIX):
        raise InvalidKeyNameError(name, f"name must not start with '{RESERVED_PREFIX}'")
    if "\x00" in name:
        raise InvalidKeyNameError(name, "name must not contain NUL characters")
    return name


def is_valid_key_name(name: str) -> bool:
    try:
        validate_key_name(name)
    except InvalidKeyNameError:
        return False
    return True
