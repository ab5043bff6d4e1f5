from contextlib import contextmanager
from pathlib import Path
from typing import ClassVar

from sqlalchemy import MetaData, event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from mlsbox import config
from mlsbox.core.errors import ConflictError, StorageUnavailable, ValidationError
from mlsbox.core.identity import ClientIdentityStore
from mlsbox.core.key_packages import KeyPackageStore
from mlsbox.core.mailbox import MessageMailbox
from mlsbox.core.models import ClientBase, ServerBase
from mlsbox.logging import get_logger

SYNCHRONOUS_LEVELS = ("OFF", "NORMAL", "FULL", "EXTRA")


def _is_memory(url: URL) -> bool:
    return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"


class Database:
    """Engine and session management shared by the store mixins."""

    metadata: ClassVar[MetaData]

    def __init__(self, url: str, echo: bool = False, synchronous: str = "NORMAL", name: str = "db"):
        synchronous = synchronous.upper()
        if synchronous not in SYNCHRONOUS_LEVELS:
            raise ValidationError(f"synchronous must be one of {', '.join(SYNCHRONOUS_LEVELS)}")

        self.name = name
        self.synchronous = synchronous
        self.log = get_logger()

        parsed = make_url(url)
        self.in_memory = _is_memory(parsed)
        if not self.in_memory and not parsed.database.startswith("file:"):
            try:
                Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                self.log.log("UNAVAILABLE", group="Schema", db_name=name, operation="open", error=type(exc).__name__)
                raise StorageUnavailable(f"open: cannot create directory for {parsed.database}: {exc}") from exc

        self.engine = create_async_engine(url, echo=echo)
        event.listen(self.engine.sync_engine, "connect", self._on_connect)
        self.SessionLocal = sessionmaker(
            bind=self.engine, #type: ignore
            class_=AsyncSession,
            expire_on_commit=False,
        ) #type: ignore

    def _on_connect(self, dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        if not self.in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA synchronous={self.synchronous}")
        cursor.close()

    @contextmanager
    def _translate(self, group: str, operation: str, **meta):
        """Map SQLAlchemy failures onto the store error taxonomy."""
        try:
            yield
        except IntegrityError as exc:
            self.log.log("CONFLICT", group=group, db_name=self.name, operation=operation, **meta)
            raise ConflictError(f"{operation}: record already exists") from exc
        except SQLAlchemyError as exc:
            self.log.log("UNAVAILABLE", group=group, db_name=self.name, operation=operation, error=type(exc).__name__)
            raise StorageUnavailable(f"{operation}: {exc}") from exc

    async def init(self):
        """Create tables and indexes if they do not exist yet."""
        with self._translate("Schema", "init"):
            async with self.engine.begin() as conn:
                await conn.run_sync(self.metadata.create_all)
        self.log.log("INIT", group="Schema", db_name=self.name, tables=",".join(sorted(self.metadata.tables)))

    async def close(self):
        """Dispose the engine and its pooled connections."""
        await self.engine.dispose()


class ServerDatabase(KeyPackageStore, MessageMailbox, Database):
    """Server-side key packages and mailbox over one engine."""

    metadata = ServerBase.metadata

    def __init__(self, url: str | None = None, echo: bool | None = None, synchronous: str | None = None):
        super().__init__(
            url or config.SERVER_DB_URL,
            echo=config.DB_ECHO if echo is None else echo,
            synchronous=synchronous or config.SERVER_SYNCHRONOUS,
            name="server",
        )


class ClientDatabase(ClientIdentityStore, Database):
    """Local identity store of one client process."""

    metadata = ClientBase.metadata

    def __init__(self, url: str | None = None, echo: bool | None = None, synchronous: str | None = None):
        super().__init__(
            url or config.CLIENT_DB_URL,
            echo=config.DB_ECHO if echo is None else echo,
            synchronous=synchronous or config.CLIENT_SYNCHRONOUS,
            name="client",
        )
