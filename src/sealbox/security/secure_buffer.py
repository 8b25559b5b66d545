"""Scoped byte buffers that are overwritten with zeros when released.

Passwords, derived keys and decrypted plaintext pass through a
:class:`SecureBuffer` so their lifetime is bounded by a ``with`` block:

    with SecureBuffer(password) as pw:
        key = derive_key(pw.bytes(), salt)

Python cannot guarantee that no other copy survives (``bytes`` objects are
immutable and third-party libraries may copy their inputs), so this is
best-effort hygiene for the copies we own.
"""
from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview, str]


class SecureBuffer:
    """Mutable holder for sensitive bytes with guaranteed wipe on exit."""

    __slots__ = ("_data", "_wiped")

    def __init__(self, data: BytesLike = b""):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytearray(data)
        self._wiped = False

    def __enter__(self) -> "SecureBuffer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        # never show the contents
        return f"<SecureBuffer len={len(self._data)} wiped={self._wiped}>"

    @property
    def wiped(self) -> bool:
        return self._wiped

    def _require_live(self) -> None:
        if self._wiped:
            raise ValueError("SecureBuffer has been wiped")

    def view(self) -> memoryview:
        """Zero-copy view onto the buffer; do not keep it past the ``with`` block."""
        self._require_live()
        return memoryview(self._data)

    def bytes(self) -> bytes:
        """Return an immutable copy, for APIs that refuse mutable buffers."""
        self._require_live()
        return bytes(self._data)

    def wipe(self) -> None:
        """Overwrite the contents with zeros. Safe to call more than once."""
        if self._wiped:
            return
        for i in range(len(self._data)):
            self._data[i] = 0
        self._wiped = True
