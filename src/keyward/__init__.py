"""keyward: client-side ECDSA P-384 key custody over pluggable storage."""
from __future__ import annotations

from .config import AppConfig, load_config
from .context import SessionContext
from .exceptions import (
    KeyFormatMismatch,
    KeyNotGenerated,
    KeywardError,
    NothingToVerify,
    PrivateKeyNotGenerated,
    PublicKeyNotGenerated,
    StorageCorrupted,
    StorageError,
    StorageRefused,
    UnknownBackend,
)
from .models import OPAQUE_PUBLIC_KEY, KeyPair, SignResult, StorageBackendKind
from .repository import KeyRepository
from .session import CustodySession, open_session
from .signing import SignatureService
from .switching import BackendSwitchCoordinator
from .version import __version__

__all__ = [
    "__version__",
    "AppConfig",
    "load_config",
    "SessionContext",
    "KeyRepository",
    "SignatureService",
    "BackendSwitchCoordinator",
    "CustodySession",
    "open_session",
    "KeyPair",
    "SignResult",
    "StorageBackendKind",
    "OPAQUE_PUBLIC_KEY",
    "KeywardError",
    "KeyNotGenerated",
    "PrivateKeyNotGenerated",
    "PublicKeyNotGenerated",
    "NothingToVerify",
    "UnknownBackend",
    "StorageError",
    "StorageRefused",
    "StorageCorrupted",
    "KeyFormatMismatch",
]
