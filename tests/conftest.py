from __future__ import annotations

import uuid
from pathlib import Path

import pytest

from keyward.config import AppConfig, InstrumentationConfig, StorageConfig
from keyward.storage import IndexedDatabase


@pytest.fixture
def config(tmp_path: Path):
    database = f"keyward-test-{uuid.uuid4().hex[:8]}"
    app_config = AppConfig(
        storage=StorageConfig(
            durable_path=tmp_path / "local-storage.json",
            indexed_database=database,
            indexed_store=database,
        ),
        instrumentation=InstrumentationConfig(enabled=True),
    )
    yield app_config
    IndexedDatabase.delete(database)
