from .mongo_store import MongoMigrationStore

__all__ = [
    "MongoMigrationStore",
]
