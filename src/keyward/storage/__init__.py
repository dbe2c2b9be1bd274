"""Storage backends for key records and the active-backend selection."""
from __future__ import annotations

from typing import Dict, Mapping

from ..config import StorageConfig
from ..models import StorageBackendKind
from .base import DEFAULT_QUOTA_BYTES, StorageAdapter, StoredValue, TextStorageAdapter
from .durable import DurableStorageAdapter
from .indexed import IndexedDatabase, IndexedStorageAdapter
from .session import SessionStorageAdapter


class StorageSelection:
    """Holds one adapter per backend and the reference to the active one.

    Only the backend switch coordinator calls ``select``; everything else reads.
    """

    def __init__(
        self,
        adapters: Mapping[StorageBackendKind, StorageAdapter],
        active: StorageBackendKind = StorageBackendKind.SESSION,
    ) -> None:
        missing = [kind.value for kind in StorageBackendKind if kind not in adapters]
        if missing:
            raise ValueError(f"No adapter configured for: {', '.join(missing)}")
        self._adapters: Dict[StorageBackendKind, StorageAdapter] = dict(adapters)
        self._kind = StorageBackendKind.parse(active)

    @property
    def kind(self) -> StorageBackendKind:
        return self._kind

    @property
    def active(self) -> StorageAdapter:
        return self._adapters[self._kind]

    def adapter(self, kind: StorageBackendKind | str) -> StorageAdapter:
        return self._adapters[StorageBackendKind.parse(kind)]

    def select(self, kind: StorageBackendKind | str) -> StorageAdapter:
        self._kind = StorageBackendKind.parse(kind)
        return self.active

    async def close(self) -> None:
        for adapter in self._adapters.values():
            await adapter.close()


def create_adapters(config: StorageConfig) -> Dict[StorageBackendKind, StorageAdapter]:
    return {
        StorageBackendKind.LOCAL: DurableStorageAdapter(
            config.resolved_durable_path(), quota_bytes=config.quota_bytes
        ),
        StorageBackendKind.SESSION: SessionStorageAdapter(quota_bytes=config.quota_bytes),
        StorageBackendKind.INDEXED: IndexedStorageAdapter(config.indexed_database, config.indexed_store),
    }


def create_selection(config: StorageConfig) -> StorageSelection:
    return StorageSelection(create_adapters(config), config.default_backend)


__all__ = [
    "DEFAULT_QUOTA_BYTES",
    "StorageAdapter",
    "StoredValue",
    "TextStorageAdapter",
    "DurableStorageAdapter",
    "SessionStorageAdapter",
    "IndexedStorageAdapter",
    "IndexedDatabase",
    "StorageSelection",
    "create_adapters",
    "create_selection",
]
