"""Key pair custody: generation, import/export through the active storage adapter."""
from __future__ import annotations

import asyncio
import base64
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from cryptography.hazmat.primitives.asymmetric import ec

from .context import SessionContext
from .crypto import ecdsa, jwk
from .exceptions import KeyFormatMismatch, StorageCorrupted
from .instrumentation import TaskInstrumentation
from .models import (
    OPAQUE_PUBLIC_KEY,
    DisplayablePublicKey,
    JwkRecord,
    KeyPair,
    KeyRepresentation,
    NativeKeyRecord,
    SerializedKeyRecord,
)
from .storage import StorageSelection, StoredValue


class KeyRepository:
    """Owns the in-memory key pair of a session.

    Every public coroutine runs under one ``asyncio.Lock`` so callers never see
    a half-imported pair. The active adapter is read from ``selection`` on each
    operation; the repository never changes which backend is active.
    """

    def __init__(
        self,
        selection: StorageSelection,
        context: SessionContext,
        *,
        namespace: str = "TSE",
        instrumentation: TaskInstrumentation | None = None,
    ) -> None:
        self._selection = selection
        self._context = context
        self._instrumentation = instrumentation or TaskInstrumentation(context)
        self._public_name = f"{namespace}:public:key"
        self._private_name = f"{namespace}:private:key"
        self._keys: Optional[KeyPair] = None
        self._lock = asyncio.Lock()

    @property
    def key_pair(self) -> Optional[KeyPair]:
        return self._keys

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    @property
    def record_names(self) -> tuple[str, str]:
        return self._public_name, self._private_name

    @asynccontextmanager
    async def holding(self) -> AsyncIterator[Optional[KeyPair]]:
        """Yield the current pair while holding the repository lock."""
        async with self._lock:
            yield self._keys

    async def generate(self) -> KeyPair:
        async with self._lock:
            existing = await self._import()
            if existing is not None:
                return existing

            with self._instrumentation.task("generate key"):
                # indexed storage keeps native handles, so the private half never needs exporting
                extractable = self._selection.active.representation is KeyRepresentation.JWK
                private_key = ecdsa.generate_private_key(extractable=extractable)
                pair = KeyPair(
                    public_key=private_key.public_key(),
                    private_key=private_key,
                    extractable=extractable,
                )
                self._keys = pair
                try:
                    await self._export()
                except Exception:
                    self._keys = None
                    raise
                self._publish_state()
            return pair

    async def set_public_key_state(self) -> DisplayablePublicKey:
        async with self._lock:
            if self._keys is None:
                try:
                    await self._import()
                except Exception:
                    self._context.publish_public_key(None)
                    raise
            return self._publish_state()

    async def clear(self) -> None:
        async with self._lock:
            self.discard_keys()
            try:
                self._context.log("wiping storage")
                await self._selection.active.clear()
                self._context.log("wiped storage")
            finally:
                self._context.publish_public_key(None)

    async def import_keys(self) -> Optional[KeyPair]:
        async with self._lock:
            return await self._import()

    async def export_keys(self) -> None:
        async with self._lock:
            await self._export()

    def discard_keys(self) -> None:
        """Drop the in-memory pair; callers are expected to hold ``lock``."""
        self._context.log("clearing keys in memory")
        self._keys = None

    async def _import(self) -> Optional[KeyPair]:
        adapter = self._selection.active
        with self._instrumentation.task("import keys"):
            public_value = await adapter.get(self._public_name)
            private_value = await adapter.get(self._private_name)
            if not public_value or not private_value:
                self._context.log("no keys found locally")
                return None

            self._context.log("found keys locally")
            try:
                pair = self._decode(
                    adapter.representation,
                    _as_record(public_value),
                    _as_record(private_value),
                )
            except Exception:
                self._keys = None
                raise
            self._keys = pair
            self._context.log("imported")
            return pair

    async def _export(self) -> None:
        pair = self._keys
        if pair is None:
            return
        adapter = self._selection.active
        with self._instrumentation.task("export keys"):
            public_value: StoredValue
            private_value: StoredValue
            if adapter.representation is KeyRepresentation.NATIVE:
                public_value = NativeKeyRecord(pair.public_key)
                private_value = NativeKeyRecord(pair.private_key)
            else:
                public_value = jwk.dumps(jwk.public_jwk(pair.public_key))
                private_value = jwk.dumps(jwk.private_jwk(pair.private_key))
            await adapter.set(self._public_name, public_value)
            await adapter.set(self._private_name, private_value)

    def _decode(
        self,
        expected: KeyRepresentation,
        public: SerializedKeyRecord,
        private: SerializedKeyRecord,
    ) -> KeyPair:
        if public.representation is not private.representation:
            raise KeyFormatMismatch(
                f"Stored key halves use different representations "
                f"({public.representation.value}/{private.representation.value})"
            )
        if public.representation is not expected:
            raise KeyFormatMismatch(
                f"{self._selection.kind.value} storage expects {expected.value} keys, "
                f"found {public.representation.value}"
            )

        if public.representation is KeyRepresentation.JWK:
            pair = KeyPair(
                public_key=jwk.load_public_key(public.text),
                private_key=jwk.load_private_key(private.text),
                extractable=True,
            )
        else:
            if not isinstance(public.key, ec.EllipticCurvePublicKey):
                raise StorageCorrupted("Stored public key is not an EC key handle")
            if not isinstance(private.key, (ec.EllipticCurvePrivateKey, ecdsa.NonExtractablePrivateKey)):
                raise StorageCorrupted("Stored private key is not an EC key handle")
            pair = KeyPair(
                public_key=public.key,
                private_key=private.key,
                extractable=ecdsa.is_extractable(private.key),
            )

        if ecdsa.public_point(pair.private_key.public_key()) != ecdsa.public_point(pair.public_key):
            raise StorageCorrupted("Stored key halves do not belong to the same pair")
        return pair

    def _publish_state(self) -> DisplayablePublicKey:
        value: DisplayablePublicKey
        if self._keys is None:
            value = None
        elif self._selection.active.representation is KeyRepresentation.NATIVE:
            value = OPAQUE_PUBLIC_KEY
        else:
            exported = jwk.dumps(jwk.public_jwk(self._keys.public_key))
            value = base64.b64encode(exported.encode("utf-8")).decode("ascii")
        self._context.publish_public_key(value)
        return value


def _as_record(value: StoredValue) -> SerializedKeyRecord:
    if isinstance(value, NativeKeyRecord):
        return value
    if isinstance(value, str):
        return JwkRecord(value)
    raise StorageCorrupted(f"Unexpected stored value of type {type(value).__name__}")


__all__ = ["KeyRepository"]
