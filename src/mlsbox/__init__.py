from mlsbox.logging import init_logger, get_logger
from mlsbox.core.errors import (
    StoreError,
    ConflictError,
    NotFound,
    ValidationError,
    StorageUnavailable,
)
from mlsbox.core.database import Database, ServerDatabase, ClientDatabase
from mlsbox.core.key_packages import KeyPackageStore
from mlsbox.core.mailbox import MessageMailbox
from mlsbox.core.identity import ClientIdentityStore
from mlsbox.core.utils import new_id

# Default logger; stores tag each line with their own database name
init_logger(None)

__all__ = [
    "init_logger",
    "get_logger",
    "StoreError",
    "ConflictError",
    "NotFound",
    "ValidationError",
    "StorageUnavailable",
    "Database",
    "ServerDatabase",
    "ClientDatabase",
    "KeyPackageStore",
    "MessageMailbox",
    "ClientIdentityStore",
    "new_id",
]
