"""Asynchronous indexed object database.

Databases are named and live for the lifetime of the process; adapters opened
with the same database and store name share records. Values are stored by
reference, so native key objects are kept as-is and never serialized.
Operations run on a worker thread and are awaited by the caller.
"""
from __future__ import annotations

import asyncio
import threading
from typing import Any, Dict, Optional, Tuple

from ..exceptions import StorageRefused
from ..models import KeyRepresentation, NativeKeyRecord, StorageBackendKind
from .base import StorageAdapter, StoredValue


class ObjectStore:
    """Thread-safe object store inside a named database."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: Dict[str, Any] = {}

    def get(self, key: str) -> Any:
        with self._lock:
            return self._items.get(key)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._items[key] = value

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


class IndexedDatabase:
    _stores: Dict[Tuple[str, str], ObjectStore] = {}
    _lock = threading.Lock()

    @classmethod
    def open(cls, name: str, store_name: str) -> ObjectStore:
        with cls._lock:
            return cls._stores.setdefault((name, store_name), ObjectStore())

    @classmethod
    def delete(cls, name: str) -> None:
        """Drop every object store of database ``name``."""
        with cls._lock:
            for key in [key for key in cls._stores if key[0] == name]:
                del cls._stores[key]


class IndexedStorageAdapter(StorageAdapter):
    kind = StorageBackendKind.INDEXED
    representation = KeyRepresentation.NATIVE

    def __init__(self, name: str = "TSE", store_name: str = "TSE") -> None:
        self._store = IndexedDatabase.open(name, store_name)

    async def get(self, key: str) -> Optional[StoredValue]:
        return await asyncio.to_thread(self._store.get, key)

    async def set(self, key: str, value: StoredValue) -> None:
        if not isinstance(value, (str, NativeKeyRecord)):
            raise StorageRefused(f"indexed storage cannot hold {type(value).__name__} values")
        await asyncio.to_thread(self._store.put, key, value)

    async def clear(self) -> None:
        await asyncio.to_thread(self._store.clear)


__all__ = ["IndexedStorageAdapter", "IndexedDatabase", "ObjectStore"]
