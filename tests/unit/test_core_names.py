"""Unit tests for secret name validation."""

import pytest

from sealbox.core.exceptions import InvalidKeyNameError
from sealbox.core.names import is_valid_key_name, validate_key_name


@pytest.mark.parametrize(
    "name",
    ["wallet", "my_wallet_key", "eth-mainnet.hot", "Key 1", "ключ", "a" * 200],
)
def test_valid_names_pass(name):
    assert validate_key_name(name) == name
    assert is_valid_key_name(name)


@pytest.mark.parametrize(
    "name, reason",
    [
        ("", "empty"),
        ("a/b", "path separators"),
        ("/etc/passwd", "path separators"),
        ("a\\b", "path separators"),
        ("..", "'..'"),
        ("foo..bar", "'..'"),
        (".hidden", "must not start with '.'"),
        (".", "must not start with '.'"),
        ("nul\x00byte", "NUL"),
    ],
)
def test_invalid_names_are_rejected(name, reason):
    with pytest.raises(InvalidKeyNameError) as excinfo:
        validate_key_name(name)
    assert reason in excinfo.value.reason
    assert not is_valid_key_name(name)


def test_traversal_attempt_reports_name():
    with pytest.raises(InvalidKeyNameError) as excinfo:
        validate_key_name("../../outside")
    assert excinfo.value.name == "../../outside"


def test_non_string_is_rejected():
    with pytest.raises(InvalidKeyNameError, match="must be a string"):
        validate_key_name(None)
