"""Key-value storage abstractions for locally persisted access state."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Protocol

from .errors import StorageError


class KeyValueStore(Protocol):
    """Protocol describing the persistence operations used by the access core."""

    def get_data(self, key: str) -> Optional[bytes]:
        ...

    def set_data(self, key: str, value: bytes) -> None:
        ...

    def get_bool(self, key: str) -> bool:
        ...

    def set_bool(self, key: str, value: bool) -> None:
        ...

    def get_timestamp(self, key: str) -> Optional[datetime]:
        ...

    def set_timestamp(self, key: str, value: datetime) -> None:
        ...

    def get_mapping(self, key: str) -> Dict[str, Any]:
        ...

    def set_mapping(self, key: str, value: Mapping[str, Any]) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


def _expect(key: str, value: Any, expected: type) -> Any:
    if not isinstance(value, expected):
        raise StorageError(key, f"Expected {expected.__name__}, found {type(value).__name__}")
    return value


class InMemoryKeyValueStore:
    """Simple in-memory store suitable for tests and local development."""

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}

    def get_data(self, key: str) -> Optional[bytes]:
        if key not in self._entries:
            return None
        return _expect(key, self._entries[key], bytes)

    def set_data(self, key: str, value: bytes) -> None:
        self._entries[key] = bytes(value)

    def get_bool(self, key: str) -> bool:
        if key not in self._entries:
            return False
        return _expect(key, self._entries[key], bool)

    def set_bool(self, key: str, value: bool) -> None:
        self._entries[key] = bool(value)

    def get_timestamp(self, key: str) -> Optional[datetime]:
        if key not in self._entries:
            return None
        return _expect(key, self._entries[key], datetime)

    def set_timestamp(self, key: str, value: datetime) -> None:
        self._entries[key] = value

    def get_mapping(self, key: str) -> Dict[str, Any]:
        if key not in self._entries:
            return {}
        return dict(_expect(key, self._entries[key], dict))

    def set_mapping(self, key: str, value: Mapping[str, Any]) -> None:
        self._entries[key] = dict(value)

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> set[str]:
        return set(self._entries)

    def clear(self) -> None:
        self._entries.clear()
