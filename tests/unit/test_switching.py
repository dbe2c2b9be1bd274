import asyncio

import pytest

from keyward.context import SessionContext
from keyward.crypto import ecdsa
from keyward.exceptions import PrivateKeyNotGenerated, StorageCorrupted, UnknownBackend
from keyward.models import OPAQUE_PUBLIC_KEY, StorageBackendKind
from keyward.repository import KeyRepository
from keyward.signing import SignatureService
from keyward.storage import StorageSelection, create_adapters
from keyward.switching import BackendSwitchCoordinator


def _wire(config):
    context = SessionContext()
    selection = StorageSelection(create_adapters(config.storage))
    repository = KeyRepository(selection, context)
    coordinator = BackendSwitchCoordinator(selection, repository, context)
    return coordinator, repository, SignatureService(repository, context), selection, context


@pytest.mark.asyncio
async def test_initial_state_is_session(config) -> None:
    coordinator, *_ = _wire(config)
    assert coordinator.state is StorageBackendKind.SESSION


@pytest.mark.asyncio
async def test_switch_clears_memory_and_logs_transition(config) -> None:
    coordinator, repository, service, _, context = _wire(config)
    await repository.generate()

    assert await coordinator.switch_to("local") is None
    assert coordinator.state is StorageBackendKind.LOCAL
    assert repository.key_pair is None
    with pytest.raises(PrivateKeyNotGenerated):
        await service.sign("hello")

    chronological = list(reversed(context.logs))
    start = chronological.index('switching storage to "local"')
    assert chronological[start + 1] == "clearing keys in memory"
    assert chronological[start + 2] == 'using "local" storage'
    assert chronological[start + 3] == "start: import keys"


@pytest.mark.asyncio
async def test_switch_reloads_keys_held_by_target_backend(config) -> None:
    coordinator, repository, service, _, context = _wire(config)
    await coordinator.switch_to(StorageBackendKind.LOCAL)
    local_pair = await repository.generate()
    local_state = context.public_key

    await coordinator.switch_to("session")
    assert repository.key_pair is None

    assert await coordinator.switch_to("local") == local_state
    assert repository.key_pair is not None
    assert repository.key_pair.public_key.public_numbers() == local_pair.public_key.public_numbers()
    result = await service.sign("back again")
    assert await service.verify(result.encoded_message, result.signature)


@pytest.mark.asyncio
async def test_switch_to_current_backend_still_reloads(config) -> None:
    coordinator, repository, _, _, _ = _wire(config)
    first = await repository.generate()

    state = await coordinator.switch_to("session")
    assert state is not None
    assert repository.key_pair is not None
    assert repository.key_pair is not first
    assert repository.key_pair.public_key.public_numbers() == first.public_key.public_numbers()


@pytest.mark.asyncio
async def test_switch_to_indexed_publishes_opaque_marker(config) -> None:
    coordinator, repository, _, _, context = _wire(config)
    await coordinator.switch_to("indexdb")
    await repository.generate()
    await coordinator.switch_to("session")
    assert context.public_key is None
    assert await coordinator.switch_to("indexdb") is OPAQUE_PUBLIC_KEY


@pytest.mark.asyncio
async def test_unknown_backend_has_no_side_effects(config) -> None:
    coordinator, repository, _, _, _ = _wire(config)
    pair = await repository.generate()
    with pytest.raises(UnknownBackend):
        await coordinator.switch_to("cookies")
    assert coordinator.state is StorageBackendKind.SESSION
    assert repository.key_pair is pair


@pytest.mark.asyncio
async def test_failed_reimport_leaves_new_backend_active_without_keys(config) -> None:
    coordinator, repository, _, selection, context = _wire(config)
    await repository.generate()
    local = selection.adapter("local")
    await local.set("TSE:public:key", "garbage")
    await local.set("TSE:private:key", "garbage")

    with pytest.raises(StorageCorrupted):
        await coordinator.switch_to("local")
    assert coordinator.state is StorageBackendKind.LOCAL
    assert repository.key_pair is None
    assert context.public_key is None


@pytest.mark.asyncio
async def test_sign_racing_a_switch_never_uses_the_new_backend(config) -> None:
    coordinator, repository, service, _, _ = _wire(config)
    session_pair = await repository.generate()

    async def sign_once():
        try:
            return await service.sign("racing")
        except PrivateKeyNotGenerated:
            return None

    signed, _ = await asyncio.gather(sign_once(), coordinator.switch_to("local"))
    if signed is not None:
        assert ecdsa.verify(session_pair.public_key, signed.encoded_message, signed.signature)
    assert repository.key_pair is None
