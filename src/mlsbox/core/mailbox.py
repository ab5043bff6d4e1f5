from datetime import datetime
from typing import Iterable

from sqlalchemy import delete, func, literal_column, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from mlsbox.core.errors import ValidationError
from mlsbox.core.models import ServerMessage
from mlsbox.core.utils import Identifier, check_blob, check_id, check_text, to_timestamp

GROUP = "Mailbox"

# insertion order breaks created_at ties
_FIFO = (ServerMessage.created_at, literal_column("server_message.rowid"))


class MessageMailbox:
    """Per-recipient queue of encrypted messages.

    Delivery is a two-phase handoff: ``fetch`` peeks without consuming and
    ``acknowledge`` removes a row once the recipient has processed it. Rows
    stay until acknowledged, which gives at-least-once delivery.
    """

    SessionLocal: "sessionmaker[AsyncSession]"  # for Pyright/MyPy #type: ignore

    async def enqueue(
        self,
        message_id: Identifier,
        recipient: str,
        content: bytes,
        created_at: datetime | None = None,
    ) -> ServerMessage:
        """Queue one message for one recipient. Never overwrites an existing row."""
        record = ServerMessage(
            message_id=check_id(message_id, "message_id"),
            recipient=check_text(recipient, "recipient"),
            content=check_blob(content, "content"),
            created_at=to_timestamp(created_at),
        )
        with self._translate(GROUP, "enqueue", message_id=record.message_id.hex(), recipient=recipient):
            async with self.SessionLocal() as session:
                session.add(record)
                await session.commit()
        self.log.log("ENQUEUE", group=GROUP, db_name=self.name, message_id=record.message_id.hex(), recipient=recipient)
        return record

    async def enqueue_fanout(
        self,
        message_id: Identifier,
        recipients: Iterable[str],
        content: bytes,
        created_at: datetime | None = None,
    ) -> int:
        """Queue one message for several recipients in a single transaction.

        Either every row is written or none is. Duplicate recipients are
        collapsed. Returns the number of rows written.
        """
        message_id = check_id(message_id, "message_id")
        content = check_blob(content, "content")
        if isinstance(recipients, str):
            raise ValidationError("recipients must be a collection of names, not a string")
        unique = list(dict.fromkeys(check_text(r, "recipient") for r in recipients))
        if not unique:
            raise ValidationError("recipients must not be empty")

        stamp = to_timestamp(created_at)
        with self._translate(GROUP, "enqueue_fanout", message_id=message_id.hex()):
            async with self.SessionLocal() as session:
                session.add_all(
                    ServerMessage(message_id=message_id, recipient=r, content=content, created_at=stamp)
                    for r in unique
                )
                await session.commit()
        self.log.log("ENQUEUE_FANOUT", group=GROUP, db_name=self.name, message_id=message_id.hex(), recipients=len(unique))
        return len(unique)

    async def fetch(self, recipient: str, limit: int | None = None) -> list[ServerMessage]:
        """Messages for ``recipient``, oldest first, at most ``limit``. Non-destructive."""
        recipient = check_text(recipient, "recipient")
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
            raise ValidationError("limit must be a positive integer")

        query = select(ServerMessage).filter_by(recipient=recipient).order_by(*_FIFO)
        if limit is not None:
            query = query.limit(limit)
        with self._translate(GROUP, "fetch"):
            async with self.SessionLocal() as session:
                result = await session.scalars(query)
                return list(result.all())

    async def pending_count(self, recipient: str) -> int:
        recipient = check_text(recipient, "recipient")
        with self._translate(GROUP, "pending_count"):
            async with self.SessionLocal() as session:
                return await session.scalar(
                    select(func.count()).select_from(ServerMessage).where(ServerMessage.recipient == recipient)
                )

    async def acknowledge(self, message_id: Identifier, recipient: str) -> None:
        """Drop one delivered row. Acknowledging twice is harmless."""
        message_id = check_id(message_id, "message_id")
        recipient = check_text(recipient, "recipient")
        with self._translate(GROUP, "acknowledge"):
            async with self.SessionLocal() as session:
                result = await session.execute(
                    delete(ServerMessage).where(
                        ServerMessage.message_id == message_id,
                        ServerMessage.recipient == recipient,
                    )
                )
                await session.commit()
        self.log.log("ACK", group=GROUP, db_name=self.name, message_id=message_id.hex(), recipient=recipient, deleted=result.rowcount)

    async def purge_recipient(self, recipient: str) -> int:
        """Delete every queued row for ``recipient``; returns how many went."""
        recipient = check_text(recipient, "recipient")
        with self._translate(GROUP, "purge_recipient"):
            async with self.SessionLocal() as session:
                result = await session.execute(
                    delete(ServerMessage).where(ServerMessage.recipient == recipient)
                )
                await session.commit()
        self.log.log("PURGE", group=GROUP, db_name=self.name, recipient=recipient, deleted=result.rowcount)
        return result.rowcount
