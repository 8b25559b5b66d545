"""
Data models for encrypted secret records

On-disk shape of one record (UTF-8 JSON):

    {
      "crypto_key": {"cipher": ..., "salt": <hex>, "nonce": <hex>, "ciphertext": <hex>},
      "metadata": {"name": ..., "created_at": <ISO-8601 UTC>} | null
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .exceptions import SerializationError


def _require_str(obj: Dict[str, Any], field: str, where: str) -> str:
    value = obj.get(field)
    if not isinstance(value, str):
        raise SerializationError(f"{where}.{field} must be a string")
    return value


@dataclass(frozen=True)
class CryptoData:
    """Cipher id plus hex-encoded salt, nonce and ciphertext (tag included)."""

    cipher: str
    salt: str
    nonce: str
    ciphertext: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "cipher": self.cipher,
            "salt": self.salt,
            "nonce": self.nonce,
            "ciphertext": self.ciphertext,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "CryptoData":
        if not isinstance(data, dict):
            raise SerializationError("crypto_key must be an object")
        return cls(
            cipher=_require_str(data, "cipher", "crypto_key"),
            salt=_require_str(data, "salt", "crypto_key"),
            nonce=_require_str(data, "nonce", "crypto_key"),
            ciphertext=_require_str(data, "ciphertext", "crypto_key"),
        )


@dataclass(frozen=True)
class KeyMetadata:
    name: str
    created_at: str

    @classmethod
    def now(cls, name: str) -> "KeyMetadata":
        return cls(name=name, created_at=datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "created_at": self.created_at}

    @classmethod
    def from_dict(cls, data: Any) -> "KeyMetadata":
        if not isinstance(data, dict):
            raise SerializationError("metadata must be an object or null")
        return cls(
            name=_require_str(data, "name", "metadata"),
            created_at=_require_str(data, "created_at", "metadata"),
        )


@dataclass(frozen=True)
class SecretRecord:
    """
    The persisted envelope of one secret.

    Records are immutable; storage attaches metadata through
    :meth:`with_metadata`, which returns a new record.
    """

    crypto_key: CryptoData
    metadata: Optional[KeyMetadata] = None

    def with_metadata(self, metadata: KeyMetadata) -> "SecretRecord":
        return replace(self, metadata=metadata)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "crypto_key": self.crypto_key.to_dict(),
            "metadata": self.metadata.to_dict() if self.metadata else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SecretRecord":
        if not isinstance(data, dict):
            raise SerializationError("record must be a JSON object")
        if "crypto_key" not in data:
            raise SerializationError("record is missing crypto_key")
        meta = data.get("metadata")
        return cls(
            crypto_key=CryptoData.from_dict(data["crypto_key"]),
            metadata=KeyMetadata.from_dict(meta) if meta is not None else None,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "SecretRecord":
        try:
            data = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise SerializationError(f"malformed record: {exc}") from exc
        return cls.from_dict(data)
