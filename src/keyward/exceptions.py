"""Central exception hierarchy"""
from __future__ import annotations


class KeywardError(Exception):
    """Base exception for all failures"""


class KeyNotGenerated(KeywardError):
    """Raised when an operation needs key material that is not in memory"""


class PrivateKeyNotGenerated(KeyNotGenerated):
    """Raised when signing is requested without a private key"""

    def __init__(self, message: str = "private key not generated") -> None:
        super().__init__(message)


class PublicKeyNotGenerated(KeyNotGenerated):
    """Raised when verification is requested without a public key"""

    def __init__(self, message: str = "public key not generated") -> None:
        super().__init__(message)


class KeyNotExtractable(KeywardError):
    """Raised when raw material of a non-extractable key is requested"""


class UnknownBackend(KeywardError, ValueError):
    """Raised for a storage backend identifier that is not recognised"""


class NothingToVerify(KeywardError):
    """Raised when verification is requested before anything was signed"""


class StorageError(KeywardError):
    """Base class for failures reported by a storage backend"""


class StorageRefused(StorageError):
    """Raised when a backend refuses a read or write (disk error, closed store)"""


class StorageQuotaExceeded(StorageRefused):
    """Raised when a write would push a backend past its quota"""


class StorageCorrupted(StorageError):
    """Raised when persisted key material cannot be parsed"""


class KeyFormatMismatch(StorageCorrupted):
    """Raised when stored key halves do not share the backend's representation"""


__all__ = [
    "KeywardError",
    "KeyNotGenerated",
    "PrivateKeyNotGenerated",
    "PublicKeyNotGenerated",
    "KeyNotExtractable",
    "UnknownBackend",
    "NothingToVerify",
    "StorageError",
    "StorageRefused",
    "StorageQuotaExceeded",
    "StorageCorrupted",
    "KeyFormatMismatch",
]
