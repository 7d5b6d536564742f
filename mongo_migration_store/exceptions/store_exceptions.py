"""Exceptions raised by migration store operations."""

from mongo_migration_store.exceptions.common_exceptions import MigrationStoreException


class ConnectionTimeoutException(MigrationStoreException):
    """Raised when the database is not reachable within the configured wait."""

    def __init__(self, url: str, timeout_ms: int) -> None:
        super().__init__(
            f"Database at {url} was not reachable within {timeout_ms} ms",
            data={"url": url, "timeout_ms": timeout_ms},
        )


class ContainerException(MigrationStoreException):
    """Raised when listing, creating or dropping the collection fails."""

    def __init__(self, collection_name: str, action: str, reason: str) -> None:
        super().__init__(
            f"Could not {action} collection '{collection_name}': {reason}",
            data={"collection": collection_name, "action": action},
        )


class StoreWriteException(MigrationStoreException):
    def __init__(self, message: str = "Could not persist migration state") -> None:
        super().__init__(message)


class WriteConflictException(StoreWriteException):
    """Raised when the stored revision changed underneath a save."""

    def __init__(self, expected_revision: str | None = None) -> None:
        super().__init__(
            "Migration state was modified by another writer "
            f"(expected revision: {expected_revision or 'none'})"
        )
        self.data = {"expected_revision": expected_revision}


class QueryException(MigrationStoreException):
    def __init__(self, message: str = "Could not load migration state") -> None:
        super().__init__(message)
