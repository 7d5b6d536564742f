import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from mongo_migration_store.exceptions import EnvInvalidException, EnvMissingException
from mongo_migration_store.utils.env_utils import configure_env
from mongo_migration_store.utils.serialisation import positive_int_or_default

# Readiness wait when MONGO_WAIT_TIME is unset or unusable
DEFAULT_WAIT_TIME_MS = 10 * 1000

# Delay between two readiness probes
READINESS_POLL_INTERVAL_S = 0.25

DEFAULT_DB_NAME = "migrations"
DEFAULT_COLLECTION_NAME = "migrations"

# Fixed key of the single state document
STATE_DOCUMENT_ID = "1"


class ContainerPolicy(str, Enum):
    # Create the collection only when it is missing
    ENSURE = "ensure"
    # Drop and recreate the collection on every save. Unsafe with concurrent writers.
    RECREATE = "recreate"


@dataclass(frozen=True)
class MigrationStoreConfig:
    mongo_uri: str
    wait_time_ms: int = DEFAULT_WAIT_TIME_MS
    db_name: str = DEFAULT_DB_NAME
    collection_name: str = DEFAULT_COLLECTION_NAME
    container_policy: ContainerPolicy = ContainerPolicy.ENSURE

    def __post_init__(self):
        if not self.mongo_uri:
            raise EnvMissingException("MONGO_URI")
        object.__setattr__(self, "wait_time_ms", positive_int_or_default(self.wait_time_ms, DEFAULT_WAIT_TIME_MS))
        if not isinstance(self.container_policy, ContainerPolicy):
            object.__setattr__(self, "container_policy", ContainerPolicy(self.container_policy))

    @classmethod
    def from_env(cls, env_file_name: Optional[str] = None, **overrides) -> "MigrationStoreConfig":
        """
        Build the configuration from environment variables.

        Args:
            env_file_name: Optional dotenv file loaded before reading the environment.
            **overrides: Explicit values; any non-None value wins over the environment.

        Raises:
            EnvMissingException: If MONGO_URI is not set and no mongo_uri override is given.
            EnvInvalidException: If MIGRATION_CONTAINER_POLICY holds an unknown value.
        """
        if env_file_name is not None:
            configure_env(env_file_name)

        mongo_uri = overrides.get("mongo_uri") or os.getenv("MONGO_URI")
        if not mongo_uri:
            raise EnvMissingException("MONGO_URI")

        config = cls(
            mongo_uri=mongo_uri,
            wait_time_ms=positive_int_or_default(os.getenv("MONGO_WAIT_TIME"), DEFAULT_WAIT_TIME_MS),
            db_name=os.getenv("MIGRATION_DB_NAME") or DEFAULT_DB_NAME,
            collection_name=os.getenv("MIGRATION_COLLECTION_NAME") or DEFAULT_COLLECTION_NAME,
            container_policy=_parse_policy(os.getenv("MIGRATION_CONTAINER_POLICY")),
        )

        return config.with_overrides(**overrides)

    def with_overrides(self, **overrides) -> "MigrationStoreConfig":
        """Copy of this config with every non-None override applied."""
        explicit = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **explicit) if explicit else self


def _parse_policy(value: Optional[str]) -> ContainerPolicy:
    if not value:
        return ContainerPolicy.ENSURE
    try:
        return ContainerPolicy(value.strip().lower())
    except ValueError:
        raise EnvInvalidException(
            "MIGRATION_CONTAINER_POLICY",
            value,
            [policy.value for policy in ContainerPolicy],
        ) from None
