from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional, Union

from mongo_migration_store.schemas import MigrationState

SaveCallback = Callable[[Optional[Exception]], Any]
LoadCallback = Callable[[Optional[Exception], dict], Any]


class MigrationStore(ABC):
    """Abstract interface for migration state backends.

    A store keeps exactly one state document. Neither operation takes a key.

    Both operations accept an optional completion callback. When given, failures are
    delivered to it instead of being raised.
    """

    @abstractmethod
    async def save(
        self,
        state: Union[MigrationState, Mapping[str, Any]],
        callback: Optional[SaveCallback] = None,
    ) -> None:
        """Replace the stored state with ``state``."""
        pass

    @abstractmethod
    async def load(self, callback: Optional[LoadCallback] = None) -> dict:
        """
        Returns:
            The stored state as ``{"lastRun", "migrations"}``, or ``{}`` when nothing was saved yet.
        """
        pass
