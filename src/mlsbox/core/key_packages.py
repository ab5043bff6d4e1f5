from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from mlsbox.core.errors import NotFound
from mlsbox.core.models import ServerKeyPackage
from mlsbox.core.utils import Identifier, check_blob, check_id, check_text, to_timestamp

GROUP = "KeyPackages"


class KeyPackageStore:
    """Key packages published by clients, looked up by owning client.

    The store never expires packages; removal is up to the caller.
    """

    SessionLocal: "sessionmaker[AsyncSession]"  # for Pyright/MyPy #type: ignore

    async def publish(
        self,
        package_id: Identifier,
        client_id: str,
        package: bytes,
        created_at: datetime | None = None,
    ) -> ServerKeyPackage:
        """Insert a new key package. Raises ConflictError if ``package_id`` is taken."""
        record = ServerKeyPackage(
            package_id=check_id(package_id, "package_id"),
            client_id=check_text(client_id, "client_id"),
            package=check_blob(package, "package"),
            created_at=to_timestamp(created_at),
        )
        with self._translate(GROUP, "publish", package_id=record.package_id.hex()):
            async with self.SessionLocal() as session:
                session.add(record)
                await session.commit()
        self.log.log("PUBLISH", group=GROUP, db_name=self.name, package_id=record.package_id.hex(), client_id=client_id)
        return record

    async def get_by_id(self, package_id: Identifier) -> ServerKeyPackage:
        package_id = check_id(package_id, "package_id")
        with self._translate(GROUP, "get_by_id"):
            async with self.SessionLocal() as session:
                record = await session.get(ServerKeyPackage, package_id)
        if record is None:
            raise NotFound(f"key package {package_id.hex()} not found")
        return record

    async def list_by_client(self, client_id: str) -> list[ServerKeyPackage]:
        """All packages of ``client_id``, oldest first (ties by package_id)."""
        client_id = check_text(client_id, "client_id")
        with self._translate(GROUP, "list_by_client"):
            async with self.SessionLocal() as session:
                result = await session.scalars(
                    select(ServerKeyPackage)
                    .filter_by(client_id=client_id)
                    .order_by(ServerKeyPackage.created_at, ServerKeyPackage.package_id)
                )
                return list(result.all())

    async def oldest_for_client(self, client_id: str) -> ServerKeyPackage:
        client_id = check_text(client_id, "client_id")
        with self._translate(GROUP, "oldest_for_client"):
            async with self.SessionLocal() as session:
                record = await session.scalar(
                    select(ServerKeyPackage)
                    .filter_by(client_id=client_id)
                    .order_by(ServerKeyPackage.created_at, ServerKeyPackage.package_id)
                    .limit(1)
                )
        if record is None:
            raise NotFound(f"no key package for client {client_id!r}")
        return record

    async def count_by_client(self, client_id: str) -> int:
        client_id = check_text(client_id, "client_id")
        with self._translate(GROUP, "count_by_client"):
            async with self.SessionLocal() as session:
                return await session.scalar(
                    select(func.count()).select_from(ServerKeyPackage).where(ServerKeyPackage.client_id == client_id)
                )

    async def remove(self, package_id: Identifier) -> None:
        """Delete a key package; a missing one is not an error."""
        package_id = check_id(package_id, "package_id")
        with self._translate(GROUP, "remove"):
            async with self.SessionLocal() as session:
                result = await session.execute(
                    delete(ServerKeyPackage).where(ServerKeyPackage.package_id == package_id)
                )
                await session.commit()
        self.log.log("REMOVE", group=GROUP, db_name=self.name, package_id=package_id.hex(), deleted=result.rowcount)
