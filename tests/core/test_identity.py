import pytest

from mlsbox.core.database import ClientDatabase
from mlsbox.core.errors import ConflictError, NotFound, ValidationError


@pytest.mark.asyncio
async def test_create_and_get(client_db: ClientDatabase):
    await client_db.create("alice", b"key1", b"cred1")

    user = await client_db.get("alice")
    assert user.signature_private_key == b"key1"
    assert user.credential_with_key == b"cred1"


@pytest.mark.asyncio
async def test_create_twice_conflicts_and_keeps_first(client_db: ClientDatabase):
    await client_db.create("alice", b"key1", b"cred1")

    with pytest.raises(ConflictError):
        await client_db.create("alice", b"key2", b"cred2")

    user = await client_db.get("alice")
    assert (user.signature_private_key, user.credential_with_key) == (b"key1", b"cred1")


@pytest.mark.asyncio
async def test_get_missing(client_db: ClientDatabase):
    with pytest.raises(NotFound):
        await client_db.get("ghost")


@pytest.mark.asyncio
async def test_delete_is_idempotent_and_allows_rotation(client_db: ClientDatabase):
    await client_db.create("alice", b"key1", b"cred1")
    await client_db.delete("alice")
    await client_db.delete("alice")

    with pytest.raises(NotFound):
        await client_db.get("alice")

    await client_db.create("alice", b"key2", b"cred2")
    assert (await client_db.get("alice")).signature_private_key == b"key2"


@pytest.mark.asyncio
async def test_create_rejects_empty_key(client_db: ClientDatabase):
    with pytest.raises(ValidationError):
        await client_db.create("alice", b"", b"cred")


def test_repr_hides_key_material():
    from mlsbox.core.models import ClientUser

    user = ClientUser(username="alice", signature_private_key=b"secret", credential_with_key=b"cred")
    assert "secret" not in repr(user)
