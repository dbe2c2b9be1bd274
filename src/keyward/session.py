"""Custody session facade used by presentation layers.

A session wires one ``SessionContext``, the storage selection, the key
repository, the signature service and the backend switch coordinator. It is
an async context manager: leaving it wipes session-scoped storage and closes
the context.

    async with open_session(config) as session:
        result = await session.sign("hello")
        assert await session.verify()
"""
from __future__ import annotations

from types import TracebackType
from typing import Optional, Tuple, Type

from .config import DEFAULT_CONFIG, AppConfig
from .context import SessionContext
from .exceptions import NothingToVerify
from .instrumentation import TaskInstrumentation
from .logging import configure_logging
from .models import DisplayablePublicKey, KeyPair, SignResult, StorageBackendKind
from .repository import KeyRepository
from .signing import SignatureService
from .storage import create_selection
from .switching import BackendSwitchCoordinator


class CustodySession:
    def __init__(self, config: AppConfig | None = None, *, context: SessionContext | None = None) -> None:
        self.config = config or DEFAULT_CONFIG.model_copy(deep=True)
        self.context = context or SessionContext()
        self.instrumentation = TaskInstrumentation(self.context, enabled=self.config.instrumentation.enabled)
        self.selection = create_selection(self.config.storage)
        self.repository = KeyRepository(
            self.selection,
            self.context,
            namespace=self.config.storage.namespace,
            instrumentation=self.instrumentation,
        )
        self.signatures = SignatureService(self.repository, self.context, instrumentation=self.instrumentation)
        self.switcher = BackendSwitchCoordinator(self.selection, self.repository, self.context)
        self._pending: Optional[SignResult] = None
        self.context.log(f'using "{self.selection.kind.value}" storage', backend=self.selection.kind.value)

    @property
    def backend(self) -> StorageBackendKind:
        return self.selection.kind

    @property
    def logs(self) -> Tuple[str, ...]:
        return self.context.logs

    @property
    def public_key(self) -> DisplayablePublicKey:
        return self.context.public_key

    @property
    def pending(self) -> Optional[SignResult]:
        """The last signature produced by ``sign`` and not yet reset."""
        return self._pending

    async def publish_public_key(self) -> DisplayablePublicKey:
        return await self.repository.set_public_key_state()

    async def generate(self) -> KeyPair:
        return await self.repository.generate()

    async def sign(self, text: str) -> SignResult:
        await self.repository.generate()
        result = await self.signatures.sign(text)
        self._pending = result
        return result

    async def verify(self) -> bool:
        if self._pending is None:
            raise NothingToVerify("Please sign a message first")
        return await self.signatures.verify(self._pending.encoded_message, self._pending.signature)

    def reset(self) -> None:
        self._pending = None

    async def wipe(self) -> None:
        await self.repository.clear()
        self._pending = None

    async def select_backend(self, backend: StorageBackendKind | str) -> DisplayablePublicKey:
        return await self.switcher.switch_to(backend)

    async def close(self) -> None:
        await self.selection.close()
        self.context.close()

    async def __aenter__(self) -> "CustodySession":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.close()


def open_session(
    config: AppConfig | None = None,
    *,
    context: SessionContext | None = None,
    configure_logs: bool = False,
) -> CustodySession:
    """Create a custody session; with ``configure_logs`` the logging section of
    ``config`` is applied first, as an application entry point would."""
    if configure_logs:
        configure_logging((config or DEFAULT_CONFIG).logging)
    return CustodySession(config, context=context)


__all__ = ["CustodySession", "open_session"]
