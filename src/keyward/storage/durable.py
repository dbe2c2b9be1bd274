from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict

from ..exceptions import StorageCorrupted, StorageRefused
from ..models import StorageBackendKind
from .base import DEFAULT_QUOTA_BYTES, TextStorageAdapter


class DurableStorageAdapter(TextStorageAdapter):
    """File-backed store that survives process restarts.

    Layout: a single JSON object ``{record name: text}`` written atomically
    with owner-only permissions.
    """

    kind = StorageBackendKind.LOCAL

    def __init__(self, path: Path, *, quota_bytes: int = DEFAULT_QUOTA_BYTES) -> None:
        super().__init__(quota_bytes=quota_bytes)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageRefused(f"Cannot read durable storage {self._path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise StorageCorrupted(f"Durable storage {self._path} is not valid JSON") from exc
        if not isinstance(data, dict) or not all(
            isinstance(key, str) and isinstance(value, str) for key, value in data.items()
        ):
            raise StorageCorrupted(f"Durable storage {self._path} does not hold text records")
        return data

    def _write(self, entries: Dict[str, str]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, indent=2, sort_keys=True)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise StorageRefused(f"Cannot write durable storage {self._path}: {exc}") from exc

    def _wipe(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageRefused(f"Cannot wipe durable storage {self._path}: {exc}") from exc


__all__ = ["DurableStorageAdapter"]
