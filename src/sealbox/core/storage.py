"""
Secret storage backends

Structure Map for reference:
==============================
 - <storage_root>/            ($SEALBOX_HOME or ~/.sealbox, mode 0700)
      - keys/                 (mode 0700)
          - {name}.json       (one SecretRecord per secret, mode 0600)
==============================
For reference:
> Records are create-once. save() never overwrites; replacing a secret is delete + save.
> Names are validated before any filesystem call (see names.py).
> FileVault creates record files with O_CREAT | O_EXCL so two racing writers cannot
  both succeed for the same name.
> MemoryVault has identical semantics and is meant for tests and embedding.

Nothing here knows about passwords or encryption; records arrive already sealed.
"""

from __future__ import annotations

import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from .exceptions import KeyAlreadyExistsError, KeyNotFoundError, StorageError
from .models import KeyMetadata, SecretRecord
from .names import is_valid_key_name, validate_key_name

logger = logging.getLogger(__name__)

ENV_HOME = "SEALBOX_HOME"
DEFAULT_DIRNAME = ".sealbox"
KEYS_DIRNAME = "keys"
RECORD_SUFFIX = ".json"
DIR_MODE = 0o700
FILE_MODE = 0o600


def default_storage_root() -> Path:
    """Return $SEALBOX_HOME if set, otherwise ~/.sealbox."""
    override = os.environ.get(ENV_HOME)
    if override:
        return Path(override).expanduser()
    try:
        return Path.home() / DEFAULT_DIRNAME
    except RuntimeError as exc:
        raise StorageError("Could not find home directory") from exc


def _tighten(path: Path, mode: int) -> None:
    # file-mode bits only mean something on POSIX
    if os.name == "posix":
        os.chmod(path, mode)


class SecretStore(ABC):
    """Key-value interface mapping validated names to SecretRecords."""

    def save(self, name: str, record: SecretRecord) -> SecretRecord:
        """Store ``record`` under ``name`` with fresh metadata; fail if the name is taken."""
        validate_key_name(name)
        stored = record.with_metadata(KeyMetadata.now(name))
        self._create(name, stored.to_json())
        logger.info("Stored key %r", name)
        return stored

    def load(self, name: str) -> SecretRecord:
        validate_key_name(name)
        return SecretRecord.from_json(self._read(name))

    def list(self) -> List[str]:
        """Return the stored names in sorted order."""
        return sorted(self._names())

    def delete(self, name: str) -> None:
        validate_key_name(name)
        self._remove(name)
        logger.info("Deleted key %r", name)

    def exists(self, name: str) -> bool:
        validate_key_name(name)
        return self._contains(name)

    # ------------------------------------------------------------------
    # Backend primitives (name already validated)
    # ------------------------------------------------------------------

    @abstractmethod
    def _create(self, name: str, document: str) -> None:
        """Atomically create ``name``; raise KeyAlreadyExistsError if present."""

    @abstractmethod
    def _read(self, name: str) -> str | bytes:
        """Return the serialized record; raise KeyNotFoundError if absent."""

    @abstractmethod
    def _names(self) -> List[str]:
        pass

    @abstractmethod
    def _remove(self, name: str) -> None:
        """Remove ``name``; raise KeyNotFoundError if absent."""

    @abstractmethod
    def _contains(self, name: str) -> bool:
        pass


class FileVault(SecretStore):
    """Directory-backed store, one JSON file per secret."""

    def __init__(self, root: Optional[str | Path] = None):
        self.root = Path(root).expanduser() if root is not None else default_storage_root()

    # ------------------------------------------------------------------
    # Path helpers
    # ------------------------------------------------------------------

    @property
    def keys_dir(self) -> Path:
        return self.root / KEYS_DIRNAME

    def record_path(self, name: str) -> Path:
        return self.keys_dir / f"{name}{RECORD_SUFFIX}"

    def init_storage(self) -> Path:
        """Create root and keys directory if needed (idempotent), owner-only."""
        try:
            for directory in (self.root, self.keys_dir):
                if not directory.exists():
                    directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
                    _tighten(directory, DIR_MODE)
                    logger.debug("Created storage directory %s", directory)
        except OSError as exc:
            raise StorageError(f"cannot initialize storage at {self.keys_dir}: {exc}") from exc
        return self.keys_dir

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _create(self, name: str, document: str) -> None:
        self.init_storage()
        path = self.record_path(name)
        flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)
        try:
            fd = os.open(path, flags, FILE_MODE)
        except FileExistsError as exc:
            raise KeyAlreadyExistsError(name) from exc
        except OSError as exc:
            raise StorageError(f"cannot create {path}: {exc}") from exc

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(document.encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
            _tighten(path, FILE_MODE)
        except OSError as exc:
            # leave no half-written record behind
            try:
                path.unlink()
            except OSError:
                logger.warning("Could not remove partial record %s", path)
            raise StorageError(f"cannot write {path}: {exc}") from exc

    def _read(self, name: str) -> bytes:
        path = self.record_path(name)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise KeyNotFoundError(name) from exc
        except OSError as exc:
            raise StorageError(f"cannot read {path}: {exc}") from exc

    def _names(self) -> List[str]:
        names = []
        try:
            if not self.keys_dir.exists():
                return names
            for entry in self.keys_dir.iterdir():
                if entry.suffix != RECORD_SUFFIX or not entry.is_file():
                    continue
                if is_valid_key_name(entry.stem):
                    names.append(entry.stem)
        except OSError as exc:
            raise StorageError(f"cannot list {self.keys_dir}: {exc}") from exc
        return names

    def _remove(self, name: str) -> None:
        path = self.record_path(name)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise KeyNotFoundError(name) from exc
        except OSError as exc:
            raise StorageError(f"cannot delete {path}: {exc}") from exc

    def _contains(self, name: str) -> bool:
        path = self.record_path(name)
        try:
            return path.is_file()
        except OSError as exc:
            raise StorageError(f"cannot check {path}: {exc}") from exc


class MemoryVault(SecretStore):
    """In-process store with the same semantics as FileVault."""

    def __init__(self):
        self._documents: Dict[str, str] = {}
        self._lock = threading.Lock()

    def _create(self, name: str, document: str) -> None:
        with self._lock:
            if name in self._documents:
                raise KeyAlreadyExistsError(name)
            self._documents[name] = document

    def _read(self, name: str) -> str:
        with self._lock:
            try:
                return self._documents[name]
            except KeyError:
                raise KeyNotFoundError(name) from None

    def _names(self) -> List[str]:
        with self._lock:
            return list(self._documents)

    def _remove(self, name: str) -> None:
        with self._lock:
            if self._documents.pop(name, None) is None:
                raise KeyNotFoundError(name)

    def _contains(self, name: str) -> bool:
        with self._lock:
            return name in self._documents
