import uuid
from datetime import datetime, timezone
from typing import Union

from mlsbox.core.errors import ValidationError

# RFC 3339, UTC, fixed width so lexical order == chronological order;
# the year is formatted separately
TIMESTAMP_TAIL = "-%m-%dT%H:%M:%S.%fZ"
ID_SIZE = 16

Identifier = Union[bytes, uuid.UUID]


def new_id() -> bytes:
    """Random 16-byte identifier for a key package or a message."""
    return uuid.uuid4().bytes


def to_timestamp(moment: datetime | None = None) -> str:
    """Format ``moment`` (default: now) as a stored ``created_at`` value.

    Naive datetimes are taken as UTC.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    # %Y does not zero-pad years before 1000
    return f"{moment.year:04d}" + moment.strftime(TIMESTAMP_TAIL)


def check_id(value: Identifier, field: str) -> bytes:
    if isinstance(value, uuid.UUID):
        return value.bytes
    if not isinstance(value, (bytes, bytearray)) or len(value) != ID_SIZE:
        raise ValidationError(f"{field} must be {ID_SIZE} bytes or a UUID")
    return bytes(value)


def check_text(value: str, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field} must be a non-empty string")
    return value


def check_blob(value: bytes, field: str) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)) or len(value) == 0:
        raise ValidationError(f"{field} must be non-empty bytes")
    return bytes(value)
