"""JSON Web Key text codec for P-384 key halves.

Keys are rendered the way browser key stores export them: compact JSON with
sorted members, ``ext`` and ``key_ops`` included. Importing checks that the
stored ``key_ops`` permit the usage the half is imported for.
"""
from __future__ import annotations

import json
from typing import Any, Dict

from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm
from jwt.exceptions import InvalidKeyError

from ..exceptions import KeyNotExtractable, StorageCorrupted
from .ecdsa import CURVE_NAME, is_extractable

PUBLIC_USAGE = "verify"
PRIVATE_USAGE = "sign"


def public_jwk(public_key: ec.EllipticCurvePublicKey) -> Dict[str, Any]:
    jwk = ECAlgorithm.to_jwk(public_key, as_dict=True)
    jwk.update({"ext": True, "key_ops": [PUBLIC_USAGE]})
    return jwk


def private_jwk(private_key: Any) -> Dict[str, Any]:
    if not is_extractable(private_key):
        raise KeyNotExtractable("Private key is not extractable")
    jwk = ECAlgorithm.to_jwk(private_key, as_dict=True)
    jwk.update({"ext": True, "key_ops": [PRIVATE_USAGE]})
    return jwk


def dumps(jwk: Dict[str, Any]) -> str:
    return json.dumps(jwk, separators=(",", ":"), sort_keys=True)


def load_public_key(text: str) -> ec.EllipticCurvePublicKey:
    key = _load(text, usage=PUBLIC_USAGE, private=False)
    if not isinstance(key, ec.EllipticCurvePublicKey):
        raise StorageCorrupted("Stored JWK did not import as an EC public key")
    return key


def load_private_key(text: str) -> ec.EllipticCurvePrivateKey:
    key = _load(text, usage=PRIVATE_USAGE, private=True)
    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise StorageCorrupted("Stored JWK did not import as an EC private key")
    return key


def _load(text: str, *, usage: str, private: bool) -> ec.EllipticCurvePublicKey | ec.EllipticCurvePrivateKey:
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise StorageCorrupted("Stored key is not valid JWK text") from exc
    if not isinstance(data, dict):
        raise StorageCorrupted("Stored key is not a JWK object")
    if data.get("kty") != "EC" or data.get("crv") != CURVE_NAME:
        raise StorageCorrupted(f"Stored key is not an EC {CURVE_NAME} JWK")
    if ("d" in data) != private:
        half = "private" if private else "public"
        raise StorageCorrupted(f"Stored JWK does not hold a {half} key")
    key_ops = data.get("key_ops")
    if key_ops is not None and (
        not isinstance(key_ops, list) or not all(isinstance(op, str) for op in key_ops)
    ):
        raise StorageCorrupted("Stored JWK key_ops is not a list of operations")
    if key_ops is not None and usage not in key_ops:
        raise StorageCorrupted(f"Stored JWK does not permit '{usage}'")
    try:
        return ECAlgorithm.from_jwk(data)
    except (InvalidKeyError, TypeError, ValueError) as exc:
        raise StorageCorrupted(f"Stored JWK could not be imported: {exc}") from exc


__all__ = [
    "public_jwk",
    "private_jwk",
    "dumps",
    "load_public_key",
    "load_private_key",
]
