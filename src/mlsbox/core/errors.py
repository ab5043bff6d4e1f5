"""Error taxonomy shared by all stores.

Only :class:`StorageUnavailable` describes a transient condition; the others
mean a caller-side logic error or a legitimate absence.
"""


class StoreError(Exception):
    """Base class for every error raised by mlsbox stores."""


class ConflictError(StoreError):
    """Insert hit an existing primary key."""


class NotFound(StoreError, LookupError):
    """Primary-key lookup found no row."""


class ValidationError(StoreError, ValueError):
    """A required field is empty or malformed."""


class StorageUnavailable(StoreError):
    """The database could not be reached or the transaction failed."""
