"""Key-value store persisted to a single JSON document on disk."""
from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import StorageError

_ROOT_KEY = "entries"


class JsonFileKeyValueStore:
    """Persist tagged values in one JSON file, rewritten atomically on every change.

    Each entry is stored as ``{"type": <kind>, "value": <json value>}`` so that
    byte blobs and timestamps survive the round trip through JSON. A missing
    file is an empty store. An unreadable file is logged and every read or
    write raises :class:`StorageError` until it is repaired, so the file is
    never overwritten with a partial document.
    """

    def __init__(self, path: Path, *, logger: Optional[logging.Logger] = None) -> None:
        self._path = Path(path)
        self._cache: Optional[Dict[str, Dict[str, Any]]] = None
        self._logger = logger or logging.getLogger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def get_data(self, key: str) -> Optional[bytes]:
        raw = self._read(key, "data")
        if raw is None:
            return None
        try:
            return base64.b64decode(raw, validate=True)
        except (binascii.Error, TypeError, ValueError) as exc:
            raise StorageError(key, "Stored blob is not valid base64") from exc

    def set_data(self, key: str, value: bytes) -> None:
        self._write(key, "data", base64.b64encode(bytes(value)).decode("ascii"))

    def get_bool(self, key: str) -> bool:
        raw = self._read(key, "bool")
        if raw is None:
            return False
        if not isinstance(raw, bool):
            raise StorageError(key, "Stored flag is not a JSON boolean")
        return raw

    def set_bool(self, key: str, value: bool) -> None:
        self._write(key, "bool", bool(value))

    def get_timestamp(self, key: str) -> Optional[datetime]:
        raw = self._read(key, "timestamp")
        if raw is None:
            return None
        try:
            parsed = datetime.fromisoformat(raw)
        except (TypeError, ValueError) as exc:
            raise StorageError(key, "Stored timestamp is not ISO-8601") from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def set_timestamp(self, key: str, value: datetime) -> None:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        self._write(key, "timestamp", value.isoformat())

    def get_mapping(self, key: str) -> Dict[str, Any]:
        raw = self._read(key, "mapping")
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise StorageError(key, "Stored mapping is not a JSON object")
        return dict(raw)

    def set_mapping(self, key: str, value: Mapping[str, Any]) -> None:
        self._write(key, "mapping", dict(value))

    def remove(self, key: str) -> None:
        entries = self._load(key)
        if key not in entries:
            return
        updated = dict(entries)
        updated.pop(key)
        self._store(updated, key)

    def reset(self, *, path: Optional[Path] = None) -> None:
        """Drop the cached document and optionally repoint the underlying file."""

        if path is not None:
            self._path = Path(path)
        self._cache = None

    def _read(self, key: str, kind: str) -> Any:
        entry = self._load(key).get(key)
        if entry is None:
            return None
        if entry.get("type") != kind:
            raise StorageError(key, f"Expected {kind} entry, found {entry.get('type')!r}")
        return entry.get("value")

    def _write(self, key: str, kind: str, value: Any) -> None:
        updated = dict(self._load(key))
        updated[key] = {"type": kind, "value": value}
        self._store(updated, key)

    def _load(self, key: str) -> Dict[str, Dict[str, Any]]:
        if self._cache is not None:
            return self._cache
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            entries = payload.get(_ROOT_KEY, {})
            if not isinstance(entries, dict):
                raise ValueError("root is not an object")
        except FileNotFoundError:
            entries = {}
        except (OSError, json.JSONDecodeError, AttributeError, ValueError) as exc:
            # Not cached: the next access re-reads the file.
            self._logger.warning("Failed to load access state from %s: %s", self._path, exc)
            raise StorageError(key, f"Unreadable state file {self._path}") from exc
        self._cache = {
            name: dict(entry) for name, entry in entries.items() if isinstance(entry, dict)
        }
        return self._cache

    def _store(self, entries: Dict[str, Dict[str, Any]], key: str) -> None:
        document = json.dumps({_ROOT_KEY: entries}, ensure_ascii=False, indent=2)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(document, encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise StorageError(key, f"Failed to write {self._path}") from exc
        self._cache = entries
