# ruff: noqa: I001
"""Key-value storage for per-user transaction lists.

Each user's transactions live under one key,
``@gofinances:transactions_user:<user id>``, as a JSON-encoded array. The
user identity is always passed in explicitly.

Backends implement the small :class:`Storage` protocol:

- :class:`FileStorage`: one JSON file per key under a root directory
  (default ``./.gofinances``). File names are the SHA-256 of the key and the
  contents are a versioned envelope validated with Pydantic. Writes go to a
  ``.tmp`` file first and are then ``os.replace``-d into place.
- :class:`SqlStorage`: the ``gf_storage`` table from ``libs/db`` through
  ``db.client`` sessions.

A missing key, or an empty stored value, is the empty transaction list.
"""

from __future__ import annotations

import contextlib
import hashlib
import json
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import StorageDecodeError
from .logging_setup import get_logger
from .models import TransactionRecord

# On-disk envelope version for FileStorage. Bump only when the shape changes.
SCHEMA_VERSION: int = 1

KEY_PREFIX = "@gofinances:transactions_user:"

_logger = get_logger("gofinances.storage")


def transactions_key(user_id: str) -> str:
    """Return the storage key holding ``user_id``'s transactions."""

    uid = str(user_id).strip()
    if not uid:
        raise ValueError("user_id must be non-empty")
    return f"{KEY_PREFIX}{uid}"


class Storage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


# ----------------------------------------------------------------------------
# File backend
# ----------------------------------------------------------------------------


class StorageFile(BaseModel):
    """Top-level schema for one FileStorage entry."""

    model_config = ConfigDict(strict=True, extra="forbid")

    schema_version: int
    key: str
    value: str


class FileStorage:
    """JSON-file backed key-value store rooted at ``root``."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root).expanduser().resolve()

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.root / f"{digest}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            parsed = StorageFile.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            _logger.error("storage:read_failed key=%s path=%s", key, os.fspath(path))
            raise StorageDecodeError(key, f"unreadable storage file {os.fspath(path)}") from exc
        if parsed.schema_version != SCHEMA_VERSION or parsed.key != key:
            raise StorageDecodeError(
                key,
                f"storage file {os.fspath(path)} has schema_version={parsed.schema_version} "
                f"key={parsed.key!r}",
            )
        return parsed.value

    def set(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        entry = StorageFile(schema_version=SCHEMA_VERSION, key=key, value=value)

        # Write atomically, cleaning up the temp file on failure
        try:
            tmp.write_text(
                json.dumps(entry.model_dump(mode="json"), ensure_ascii=False, separators=(",", ":")),
                encoding="utf-8",
            )
            os.replace(tmp, path)
        except Exception:
            with contextlib.suppress(FileNotFoundError):
                tmp.unlink()
            raise
        _logger.debug("storage:set key=%s path=%s bytes=%d", key, os.fspath(path), len(value))

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


# ----------------------------------------------------------------------------
# SQL backend
# ----------------------------------------------------------------------------


class SqlStorage:
    """Key-value store over the ``gf_storage`` table.

    ``database_url`` falls back to ``DATABASE_URL`` when ``None``. Each call
    runs in its own short transaction.
    """

    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = database_url

    def ensure_schema(self) -> None:
        from db.client import create_schema

        create_schema(database_url=self.database_url)

    def get(self, key: str) -> str | None:
        from db.client import session_scope
        from db.models.storage import GfStorageEntry

        with session_scope(database_url=self.database_url) as session:
            row = session.get(GfStorageEntry, key)
            return None if row is None else row.value

    def set(self, key: str, value: str) -> None:
        from db.client import session_scope
        from db.models.storage import GfStorageEntry

        with session_scope(database_url=self.database_url) as session:
            row = session.get(GfStorageEntry, key)
            if row is None:
                session.add(GfStorageEntry(key=key, value=value))
            else:
                row.value = value

    def remove(self, key: str) -> None:
        from db.client import session_scope
        from db.models.storage import GfStorageEntry

        with session_scope(database_url=self.database_url) as session:
            row = session.get(GfStorageEntry, key)
            if row is not None:
                session.delete(row)


# ----------------------------------------------------------------------------
# Transaction list helpers
# ----------------------------------------------------------------------------


def load_transactions(storage: Storage, user_id: str) -> list[TransactionRecord]:
    """Return the stored transactions for ``user_id`` in storage order.

    Raises
    ------
    StorageDecodeError
        When the stored value is not a JSON array of objects.
    """

    key = transactions_key(user_id)
    raw = storage.get(key)
    if raw is None or not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageDecodeError(key, f"invalid JSON ({exc.msg})") from exc
    if not isinstance(data, list):
        raise StorageDecodeError(key, f"expected a JSON array, got {type(data).__name__}")
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise StorageDecodeError(key, f"element {i} is {type(item).__name__}, not an object")
    return data


def save_transactions(
    storage: Storage, user_id: str, records: Iterable[TransactionRecord]
) -> None:
    """Replace ``user_id``'s stored list with ``records``."""

    payload = [dict(r) for r in records]
    storage.set(
        transactions_key(user_id),
        json.dumps(payload, ensure_ascii=False, separators=(",", ":")),
    )


def append_transaction(storage: Storage, user_id: str, record: TransactionRecord) -> None:
    """Append ``record`` to the end of ``user_id``'s stored list."""

    records = load_transactions(storage, user_id)
    records.append(dict(record))
    save_transactions(storage, user_id, records)
    _logger.info("stored transaction id=%s for user=%s (%d total)", record.get("id"), user_id, len(records))


__all__ = [
    "KEY_PREFIX",
    "FileStorage",
    "SqlStorage",
    "Storage",
    "append_transaction",
    "load_transactions",
    "save_transactions",
    "transactions_key",
]
