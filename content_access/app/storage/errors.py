"""Exceptions raised by key-value storage backends."""
from __future__ import annotations


class StorageError(Exception):
    """Raised when a backend cannot read or write a persisted key."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"{message} (key={key!r})")
