"""Local key-value persistence backends for access state."""

from .errors import StorageError
from .json_file import JsonFileKeyValueStore
from .kv import InMemoryKeyValueStore, KeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "StorageError",
]
