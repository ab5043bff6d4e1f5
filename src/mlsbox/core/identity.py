from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from mlsbox.core.errors import NotFound
from mlsbox.core.models import ClientUser
from mlsbox.core.utils import check_blob, check_text

GROUP = "Identity"


class ClientIdentityStore:
    """The local user's signing key and credential, one row per username.

    There is no update: rotating a key means delete followed by create.
    """

    SessionLocal: "sessionmaker[AsyncSession]"  # for Pyright/MyPy #type: ignore

    async def create(self, username: str, signature_private_key: bytes, credential_with_key: bytes) -> ClientUser:
        user = ClientUser(
            username=check_text(username, "username"),
            signature_private_key=check_blob(signature_private_key, "signature_private_key"),
            credential_with_key=check_blob(credential_with_key, "credential_with_key"),
        )
        with self._translate(GROUP, "create", username=username):
            async with self.SessionLocal() as session:
                session.add(user)
                await session.commit()
        self.log.log("CREATE", group=GROUP, db_name=self.name, username=username)
        return user

    async def get(self, username: str) -> ClientUser:
        username = check_text(username, "username")
        with self._translate(GROUP, "get"):
            async with self.SessionLocal() as session:
                user = await session.get(ClientUser, username)
        if user is None:
            raise NotFound(f"user {username!r} is not registered")
        return user

    async def delete(self, username: str) -> None:
        username = check_text(username, "username")
        with self._translate(GROUP, "delete"):
            async with self.SessionLocal() as session:
                result = await session.execute(delete(ClientUser).where(ClientUser.username == username))
                await session.commit()
        self.log.log("DELETE", group=GROUP, db_name=self.name, username=username, deleted=result.rowcount)
