"""Shared filesystem path helpers for keyward."""
from __future__ import annotations

import sys
from pathlib import Path

from platformdirs import PlatformDirs

_APP_NAME = "Keyward"
_LINUX_APP_NAME = "keyward"


def _dirs() -> PlatformDirs:
    if sys.platform in ("win32", "darwin"):
        return PlatformDirs(appname=_APP_NAME, appauthor=None, roaming=True)
    return PlatformDirs(appname=_LINUX_APP_NAME, appauthor=None, roaming=False)


def runtime_config_dir() -> Path:
    """Return the per-user configuration directory."""
    return Path(_dirs().user_config_path)


def runtime_data_dir() -> Path:
    """Return the per-user data directory holding durable key records."""
    return Path(_dirs().user_data_path)


def default_durable_path() -> Path:
    """Return the default location of the durable storage document."""
    return runtime_data_dir() / "local-storage.json"
