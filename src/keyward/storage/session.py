from __future__ import annotations

from typing import Dict

from ..exceptions import StorageRefused
from ..models import StorageBackendKind
from .base import DEFAULT_QUOTA_BYTES, TextStorageAdapter


class SessionStorageAdapter(TextStorageAdapter):
    """In-memory store scoped to one custody session; wiped when closed."""

    kind = StorageBackendKind.SESSION

    def __init__(self, *, quota_bytes: int = DEFAULT_QUOTA_BYTES) -> None:
        super().__init__(quota_bytes=quota_bytes)
        self._entries: Dict[str, str] = {}
        self._closed = False

    async def close(self) -> None:
        self._entries.clear()
        self._closed = True

    def _read(self) -> Dict[str, str]:
        self._ensure_open()
        return dict(self._entries)

    def _write(self, entries: Dict[str, str]) -> None:
        self._ensure_open()
        self._entries = dict(entries)

    def _wipe(self) -> None:
        self._ensure_open()
        self._entries.clear()

    def _ensure_open(self) -> None:
        if self._closed:
            raise StorageRefused("session storage has ended")


__all__ = ["SessionStorageAdapter"]
