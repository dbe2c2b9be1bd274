"""Explicit storage-backend transitions for a key repository."""
from __future__ import annotations

from .context import SessionContext
from .models import DisplayablePublicKey, StorageBackendKind
from .repository import KeyRepository
from .storage import StorageSelection


class BackendSwitchCoordinator:
    """State machine over ``{local, session, indexdb}``.

    A transition re-points the selection and empties the repository inside the
    repository lock, then re-imports from the new backend. Keys left in the
    previous backend stay there untouched. Selecting the current backend still
    clears memory and reloads.
    """

    def __init__(self, selection: StorageSelection, repository: KeyRepository, context: SessionContext) -> None:
        self._selection = selection
        self._repository = repository
        self._context = context

    @property
    def state(self) -> StorageBackendKind:
        return self._selection.kind

    async def switch_to(self, backend: StorageBackendKind | str) -> DisplayablePublicKey:
        target = StorageBackendKind.parse(backend)
        async with self._repository.lock:
            self._context.log(f'switching storage to "{target.value}"', backend=target.value)
            self._selection.select(target)
            self._repository.discard_keys()
            self._context.log(f'using "{target.value}" storage', backend=target.value)
        return await self._repository.set_public_key_state()


__all__ = ["BackendSwitchCoordinator"]
