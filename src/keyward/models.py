"""Shared domain models used across keyward."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Union

from cryptography.hazmat.primitives.asymmetric import ec

from .exceptions import UnknownBackend


class StorageBackendKind(str, Enum):
    LOCAL = "local"
    SESSION = "session"
    INDEXED = "indexdb"

    @classmethod
    def parse(cls, value: "StorageBackendKind | str") -> "StorageBackendKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise UnknownBackend(f"Unknown storage backend '{value}' (expected one of: {choices})") from None


class KeyRepresentation(str, Enum):
    JWK = "jwk"
    NATIVE = "native"


class _OpaquePublicKey:
    """Marker published when the public key lives in the indexed backend."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "OPAQUE_PUBLIC_KEY"

    def __str__(self) -> str:
        return "key is opaque, inspect via backend"


OPAQUE_PUBLIC_KEY = _OpaquePublicKey()

DisplayablePublicKey = Union[str, _OpaquePublicKey, None]


@dataclass(frozen=True, slots=True)
class KeyPair:
    """A P-384 signing pair. ``private_key`` may be a non-extractable handle."""

    public_key: ec.EllipticCurvePublicKey
    private_key: Any
    extractable: bool = True


@dataclass(frozen=True, slots=True)
class JwkRecord:
    text: str
    representation: Literal[KeyRepresentation.JWK] = KeyRepresentation.JWK


@dataclass(frozen=True, slots=True)
class NativeKeyRecord:
    key: Any
    representation: Literal[KeyRepresentation.NATIVE] = KeyRepresentation.NATIVE


SerializedKeyRecord = Union[JwkRecord, NativeKeyRecord]


@dataclass(slots=True)
class SignResult:
    signature: bytes
    encoded_message: bytes
    preview: str


__all__ = [
    "StorageBackendKind",
    "KeyRepresentation",
    "OPAQUE_PUBLIC_KEY",
    "DisplayablePublicKey",
    "KeyPair",
    "JwkRecord",
    "NativeKeyRecord",
    "SerializedKeyRecord",
    "SignResult",
]
