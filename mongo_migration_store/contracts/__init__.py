"""Contract classes and abstract interfaces."""

from .migration_store import LoadCallback, MigrationStore, SaveCallback

__all__ = [
    "LoadCallback",
    "MigrationStore",
    "SaveCallback",
]
