"""Unit tests for the SecretRecord envelope and its JSON form."""

import json
from datetime import datetime

import pytest

from sealbox.core.exceptions import SerializationError
from sealbox.core.models import CryptoData, KeyMetadata, SecretRecord


@pytest.fixture
def crypto_data():
    return CryptoData(
        cipher="aes-256-gcm",
        salt="aa" * 16,
        nonce="bb" * 12,
        ciphertext="cc" * 24,
    )


def test_to_dict_matches_on_disk_shape(crypto_data):
    record = SecretRecord(crypto_key=crypto_data, metadata=KeyMetadata("wallet", "2024-01-01T00:00:00+00:00"))
    assert record.to_dict() == {
        "crypto_key": {
            "cipher": "aes-256-gcm",
            "salt": "aa" * 16,
            "nonce": "bb" * 12,
            "ciphertext": "cc" * 24,
        },
        "metadata": {"name": "wallet", "created_at": "2024-01-01T00:00:00+00:00"},
    }


def test_metadata_serializes_as_null(crypto_data):
    doc = json.loads(SecretRecord(crypto_key=crypto_data).to_json())
    assert doc["metadata"] is None


def test_json_roundtrip_preserves_record(crypto_data):
    record = SecretRecord(crypto_key=crypto_data, metadata=KeyMetadata.now("k"))
    assert SecretRecord.from_json(record.to_json()) == record


def test_from_json_accepts_bytes(crypto_data):
    raw = SecretRecord(crypto_key=crypto_data).to_json().encode("utf-8")
    assert SecretRecord.from_json(raw).crypto_key == crypto_data


def test_with_metadata_returns_new_record(crypto_data):
    record = SecretRecord(crypto_key=crypto_data)
    stamped = record.with_metadata(KeyMetadata.now("wallet"))
    assert record.metadata is None
    assert stamped.metadata.name == "wallet"
    assert stamped.crypto_key is record.crypto_key


def test_metadata_now_is_utc_iso8601():
    meta = KeyMetadata.now("wallet")
    parsed = datetime.fromisoformat(meta.created_at)
    assert parsed.utcoffset().total_seconds() == 0


@pytest.mark.parametrize(
    "raw, message",
    [
        ("not json at all", "malformed record"),
        (b"\x80\x81 garbage", "malformed record"),
        ("[]", "must be a JSON object"),
        ("{}", "missing crypto_key"),
        ('{"crypto_key": "x"}', "crypto_key must be an object"),
        ('{"crypto_key": {"cipher": "c", "salt": "s", "nonce": "n"}}', "crypto_key.ciphertext"),
        ('{"crypto_key": {"cipher": 1, "salt": "s", "nonce": "n", "ciphertext": "c"}}', "crypto_key.cipher"),
        (
            '{"crypto_key": {"cipher": "c", "salt": "s", "nonce": "n", "ciphertext": "c"}, "metadata": 5}',
            "metadata must be an object",
        ),
        (
            '{"crypto_key": {"cipher": "c", "salt": "s", "nonce": "n", "ciphertext": "c"}, "metadata": {"name": "x"}}',
            "metadata.created_at",
        ),
    ],
)
def test_malformed_documents_raise_serialization_error(raw, message):
    with pytest.raises(SerializationError, match=message):
        SecretRecord.from_json(raw)
