"""ECDSA P-384 helpers: key generation, raw ``r||s`` signatures and verification.

Signatures are exchanged in the fixed-width IEEE P1363 form (96 bytes for
P-384) rather than DER, so their length is stable for display and storage.
"""
from __future__ import annotations

from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature, encode_dss_signature

from ..exceptions import KeyNotExtractable

CURVE_NAME = "P-384"
COORDINATE_SIZE = 48
SIGNATURE_SIZE = 2 * COORDINATE_SIZE


def _algorithm() -> ec.ECDSA:
    return ec.ECDSA(hashes.SHA384())


class NonExtractablePrivateKey:
    """Private key handle that can sign in place but never leaves the process.

    Serialization helpers (``private_bytes``/``private_numbers``) are not
    exposed and pickling or copying the handle raises ``KeyNotExtractable``.
    """

    __slots__ = ("_key",)

    def __init__(self, key: ec.EllipticCurvePrivateKey) -> None:
        self._key = key

    @property
    def curve(self) -> ec.EllipticCurve:
        return self._key.curve

    @property
    def key_size(self) -> int:
        return self._key.key_size

    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self._key.public_key()

    def sign(self, data: bytes, signature_algorithm: ec.EllipticCurveSignatureAlgorithm) -> bytes:
        return self._key.sign(data, signature_algorithm)

    def __reduce__(self) -> Any:
        raise KeyNotExtractable("Private key is not extractable")

    def __repr__(self) -> str:
        return f"<NonExtractablePrivateKey curve={self._key.curve.name}>"


def generate_private_key(*, extractable: bool = True) -> Any:
    key = ec.generate_private_key(ec.SECP384R1())
    return key if extractable else NonExtractablePrivateKey(key)


def is_extractable(private_key: Any) -> bool:
    return isinstance(private_key, ec.EllipticCurvePrivateKey)


def sign(private_key: Any, data: bytes) -> bytes:
    """Sign ``data`` with SHA-384 and return the raw ``r||s`` signature."""
    der = private_key.sign(data, _algorithm())
    r, s = decode_dss_signature(der)
    return r.to_bytes(COORDINATE_SIZE, "big") + s.to_bytes(COORDINATE_SIZE, "big")


def verify(public_key: ec.EllipticCurvePublicKey, data: bytes, signature: bytes) -> bool:
    if len(signature) != SIGNATURE_SIZE:
        return False
    r = int.from_bytes(signature[:COORDINATE_SIZE], "big")
    s = int.from_bytes(signature[COORDINATE_SIZE:], "big")
    try:
        public_key.verify(encode_dss_signature(r, s), data, _algorithm())
    except InvalidSignature:
        return False
    return True


def public_point(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """Uncompressed SEC1 encoding, used to compare public keys."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )


__all__ = [
    "CURVE_NAME",
    "SIGNATURE_SIZE",
    "NonExtractablePrivateKey",
    "generate_private_key",
    "is_extractable",
    "sign",
    "verify",
    "public_point",
]
