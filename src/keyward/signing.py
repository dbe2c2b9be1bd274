# Detached ECDSA P-384 signing and verification against the repository's key pair.
from __future__ import annotations

from .context import SessionContext
from .crypto import ecdsa
from .exceptions import PrivateKeyNotGenerated, PublicKeyNotGenerated
from .instrumentation import TaskInstrumentation
from .models import SignResult
from .repository import KeyRepository

PREVIEW_BYTES = 5


class SignatureService:
    def __init__(
        self,
        repository: KeyRepository,
        context: SessionContext,
        *,
        instrumentation: TaskInstrumentation | None = None,
    ) -> None:
        self._repository = repository
        self._instrumentation = instrumentation or TaskInstrumentation(context)

    async def sign(self, message: str) -> SignResult:
        async with self._repository.holding() as keys:
            if keys is None or keys.private_key is None:
                raise PrivateKeyNotGenerated()
            with self._instrumentation.task(f'sign "{message}"'):
                encoded = message.encode("utf-8")
                signature = ecdsa.sign(keys.private_key, encoded)
                return SignResult(
                    signature=signature,
                    encoded_message=encoded,
                    preview=signature_preview(signature),
                )

    async def verify(self, encoded_message: bytes, signature: bytes) -> bool:
        async with self._repository.holding() as keys:
            if keys is None or keys.public_key is None:
                raise PublicKeyNotGenerated()
            with self._instrumentation.task("verify"):
                return ecdsa.verify(keys.public_key, bytes(encoded_message), bytes(signature))


def signature_preview(signature: bytes) -> str:
    """Byte count plus the first bytes decoded as UTF-8; diagnostic only."""
    head = signature[:PREVIEW_BYTES].decode("utf-8", errors="replace")
    return f"{len(signature)} bytes:\n\n{head}"


__all__ = ["SignatureService", "signature_preview", "PREVIEW_BYTES"]
