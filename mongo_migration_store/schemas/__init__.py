from .migration_state import MigrationRecord, MigrationState

__all__ = [
    "MigrationRecord",
    "MigrationState",
]
