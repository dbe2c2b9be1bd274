import pytest

from keyward.context import SessionContext
from keyward.exceptions import PrivateKeyNotGenerated, PublicKeyNotGenerated
from keyward.repository import KeyRepository
from keyward.signing import SignatureService, signature_preview
from keyward.storage import StorageSelection, create_adapters


def _service(config):
    context = SessionContext()
    selection = StorageSelection(create_adapters(config.storage))
    repository = KeyRepository(selection, context)
    return SignatureService(repository, context), repository, context


@pytest.mark.asyncio
async def test_sign_requires_private_key(config) -> None:
    service, _, _ = _service(config)
    with pytest.raises(PrivateKeyNotGenerated, match="private key not generated"):
        await service.sign("hello")


@pytest.mark.asyncio
async def test_verify_requires_public_key(config) -> None:
    service, _, _ = _service(config)
    with pytest.raises(PublicKeyNotGenerated, match="public key not generated"):
        await service.verify(b"hello", b"\x00" * 96)


@pytest.mark.asyncio
async def test_sign_then_verify(config) -> None:
    service, repository, _ = _service(config)
    await repository.generate()

    result = await service.sign("hello")
    assert result.encoded_message == b"hello"
    assert len(result.signature) == 96
    assert await service.verify(result.encoded_message, result.signature)
    assert not await service.verify("hello!".encode("utf-8"), result.signature)


@pytest.mark.asyncio
async def test_verify_does_not_touch_key_state(config) -> None:
    service, repository, _ = _service(config)
    pair = await repository.generate()
    await service.verify(b"anything", b"short")
    assert repository.key_pair is pair


@pytest.mark.asyncio
async def test_signatures_from_another_pair_do_not_verify(config, tmp_path) -> None:
    service, repository, _ = _service(config)
    await repository.generate()
    result = await service.sign("hello")

    other_config = config.model_copy(deep=True)
    other_config.storage.durable_path = tmp_path / "other.json"
    other_service, other_repository, _ = _service(other_config)
    await other_repository.generate()
    assert not await other_service.verify(result.encoded_message, result.signature)


@pytest.mark.asyncio
async def test_repeated_signatures_differ_but_both_verify(config) -> None:
    service, repository, _ = _service(config)
    await repository.generate()
    first = await service.sign("same")
    second = await service.sign("same")
    assert first.signature != second.signature
    assert await service.verify(first.encoded_message, first.signature)
    assert await service.verify(second.encoded_message, second.signature)


@pytest.mark.asyncio
async def test_sign_is_logged_as_a_task(config) -> None:
    service, repository, context = _service(config)
    await repository.generate()
    await service.sign("note")
    assert context.logs[0].startswith('end: sign "note" (')
    assert context.logs[1] == 'start: sign "note"'


def test_signature_preview_reports_length_and_head() -> None:
    assert signature_preview(b"abcdefgh") == "8 bytes:\n\nabcde"
    preview = signature_preview(b"\xff\xfeab" + bytes(92))
    assert preview.startswith("96 bytes:\n\n\ufffd\ufffdab")
