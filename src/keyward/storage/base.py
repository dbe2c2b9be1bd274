"""Storage adapter contract shared by every key-record backend."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Dict, Optional, Union

from ..exceptions import StorageQuotaExceeded, StorageRefused
from ..models import KeyRepresentation, NativeKeyRecord, StorageBackendKind

StoredValue = Union[str, NativeKeyRecord]

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class StorageAdapter(ABC):
    """Asynchronous key-value store holding serialized key halves.

    ``get`` returns ``None`` for a missing key and never raises for that case.
    Refusals (quota, disk errors, closed stores) raise ``StorageRefused`` and
    unreadable content raises ``StorageCorrupted``.
    """

    kind: ClassVar[StorageBackendKind]
    representation: ClassVar[KeyRepresentation]

    @abstractmethod
    async def get(self, key: str) -> Optional[StoredValue]:
        """Return the value stored under ``key`` or ``None``."""

    @abstractmethod
    async def set(self, key: str, value: StoredValue) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    async def clear(self) -> None:
        """Erase every record owned by this adapter."""

    async def close(self) -> None:
        """Release resources held by the adapter."""


class TextStorageAdapter(StorageAdapter):
    """Synchronous string store exposed through the asynchronous contract.

    Subclasses provide ``_read``/``_write``/``_wipe`` over a ``dict`` of
    strings; this class enforces the value type and the quota.
    """

    representation = KeyRepresentation.JWK

    def __init__(self, *, quota_bytes: int = DEFAULT_QUOTA_BYTES) -> None:
        self._quota_bytes = quota_bytes

    async def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    async def set(self, key: str, value: StoredValue) -> None:
        if not isinstance(value, str):
            raise StorageRefused(f"{self.kind.value} storage only accepts text values")
        entries = self._read()
        entries[key] = value
        used = _measure(entries)
        if used > self._quota_bytes:
            raise StorageQuotaExceeded(
                f"{self.kind.value} storage quota exceeded ({used} > {self._quota_bytes} bytes)"
            )
        self._write(entries)

    async def clear(self) -> None:
        self._wipe()

    @abstractmethod
    def _read(self) -> Dict[str, str]:
        ...

    @abstractmethod
    def _write(self, entries: Dict[str, str]) -> None:
        ...

    @abstractmethod
    def _wipe(self) -> None:
        ...


def _measure(entries: Dict[str, str]) -> int:
    # browsers account web storage in UTF-16 code units
    return sum(2 * (len(key) + len(value)) for key, value in entries.items())


__all__ = ["StorageAdapter", "TextStorageAdapter", "StoredValue", "DEFAULT_QUOTA_BYTES"]
