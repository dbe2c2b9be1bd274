"""Configuration loading utilities for keyward."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import StorageBackendKind
from .paths import default_durable_path, runtime_config_dir


class StorageConfig(BaseModel):
    namespace: str = Field(default="TSE", description="Prefix of the stored key record names")
    default_backend: StorageBackendKind = Field(
        default=StorageBackendKind.SESSION, description="Backend active when a session starts"
    )
    durable_path: Optional[Path] = Field(default=None, description="JSON document backing durable storage")
    indexed_database: str = Field(default="TSE")
    indexed_store: str = Field(default="TSE")
    quota_bytes: int = Field(default=5 * 1024 * 1024, gt=0)

    @field_validator("namespace")
    @classmethod
    def _validate_namespace(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Namespace must not be empty")
        if ":" in value:
            raise ValueError("Namespace must not contain ':'")
        return value

    @field_validator("default_backend", mode="before")
    @classmethod
    def _parse_backend(cls, value: object) -> StorageBackendKind:
        return StorageBackendKind.parse(value)  # type: ignore[arg-type]

    def resolved_durable_path(self) -> Path:
        return Path(self.durable_path).expanduser() if self.durable_path else default_durable_path()


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")
    json_output: bool = Field(default=True, alias="json", description="Render log lines as JSON")

    model_config = ConfigDict(populate_by_name=True)


class InstrumentationConfig(BaseModel):
    enabled: bool = Field(default=True, description="Emit start/end timing lines for key operations")


class AppConfig(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    instrumentation: InstrumentationConfig = Field(default_factory=InstrumentationConfig)


DEFAULT_CONFIG = AppConfig()


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield Path.cwd() / ".keyward" / "config.yaml"
    yield runtime_config_dir() / "config.yaml"


def load_config(path: Optional[Path] = None) -> AppConfig:
    for candidate in config_search_paths(path):
        if candidate.is_file():
            with candidate.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            try:
                return AppConfig.model_validate(data)
            except ValidationError as exc:
                raise ValueError(f"Invalid configuration in {candidate}: {exc}") from exc
    return DEFAULT_CONFIG.model_copy(deep=True)


def dump_default_config(target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(DEFAULT_CONFIG.model_dump(mode="json", by_alias=True), handle, sort_keys=False)


__all__ = [
    "AppConfig",
    "StorageConfig",
    "LoggingConfig",
    "InstrumentationConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "dump_default_config",
]
