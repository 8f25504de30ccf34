class StorageError(Exception):
    """Raised when the database fails for reasons unrelated to business rules."""


class DuplicateKeyError(StorageError):
    """Raised when an INSERT/UPDATE hits a UNIQUE key."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.key = key
