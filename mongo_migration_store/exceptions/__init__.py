"""Custom exceptions for the migration store."""

from .common_exceptions import (
    MigrationStoreException,
    EnvMissingException,
    EnvInvalidException,
)
from .store_exceptions import (
    ConnectionTimeoutException,
    ContainerException,
    StoreWriteException,
    WriteConflictException,
    QueryException,
)


__all__ = [
    # common
    "MigrationStoreException",
    "EnvMissingException",
    "EnvInvalidException",
    # store
    "ConnectionTimeoutException",
    "ContainerException",
    "StoreWriteException",
    "WriteConflictException",
    "QueryException",
]
