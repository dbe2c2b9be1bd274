"""Cryptographic primitives for keyward."""
from . import ecdsa, jwk
from .ecdsa import NonExtractablePrivateKey

__all__ = ["ecdsa", "jwk", "NonExtractablePrivateKey"]
