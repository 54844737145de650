"""Storage errors shared by every persistence adapter."""


class StorageError(Exception):
    """The store failed to complete an operation.

    Nothing written in the failed unit of work is persisted.
    """


class TransientStorageError(StorageError):
    """Contention or timeout that may succeed if the whole unit is retried.

    Examples: lock wait timeout, serialization failure, deadlock, or SQLite's
    "database is locked".
    """
