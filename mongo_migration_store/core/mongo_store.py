"""MongoDB backed migration state store."""

import logging
import uuid
from typing import Any, Mapping, Optional, Union

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from mongo_migration_store.config import ContainerPolicy, MigrationStoreConfig, STATE_DOCUMENT_ID
from mongo_migration_store.contracts import LoadCallback, MigrationStore, SaveCallback
from mongo_migration_store.database.mongo import (
    create_client,
    ensure_collection,
    recreate_collection,
    wait_for_mongo,
)
from mongo_migration_store.exceptions import QueryException, StoreWriteException, WriteConflictException
from mongo_migration_store.schemas import MigrationState

logger = logging.getLogger(__name__)


def next_revision(previous: Optional[str]) -> str:
    """Return a fresh revision token: ``<generation>-<random hex>``."""
    generation = 0
    if previous:
        head, _, _ = str(previous).partition("-")
        if head.isdigit():
            generation = int(head)
    return f"{generation + 1}-{uuid.uuid4().hex}"


class MongoMigrationStore(MigrationStore):
    """
    Keeps the migration runner state in a single MongoDB document.

    Every ``save``/``load`` first waits for the server to answer and makes sure the
    collection exists. Saves replace the whole document and are guarded by a ``_rev``
    token, so a write racing with another writer fails with WriteConflictException
    instead of silently overwriting it.

    Args:
        config: Explicit configuration. Read from the environment when omitted.
        client: Motor client to use instead of creating one. It is not closed by ``close()``.
        **overrides: Field values that win over ``config`` or the environment.

    Raises:
        EnvMissingException: If no MongoDB URI is configured.
    """

    def __init__(
        self,
        config: Optional[MigrationStoreConfig] = None,
        *,
        client: Optional[AsyncIOMotorClient] = None,
        **overrides,
    ):
        if config is None:
            config = MigrationStoreConfig.from_env(**overrides)
        self.config = config.with_overrides(**overrides)
        self._client = client
        self._owns_client = client is None

        if self.config.container_policy is ContainerPolicy.RECREATE:
            logger.warning(
                "Migration store uses the 'recreate' container policy: every save drops "
                f"collection '{self.config.collection_name}'. Do not run concurrent writers."
            )

    @property
    def mongo_uri(self) -> str:
        return self.config.mongo_uri

    @property
    def wait_time_ms(self) -> int:
        return self.config.wait_time_ms

    def _get_client(self) -> AsyncIOMotorClient:
        if self._client is None:
            self._client = create_client(self.config.mongo_uri, self.config.wait_time_ms)
        return self._client

    async def wait_until_ready(self) -> None:
        await wait_for_mongo(self._get_client(), self.config.mongo_uri, self.config.wait_time_ms)

    async def ensure_container(self) -> AsyncIOMotorCollection:
        db = self._get_client()[self.config.db_name]
        return await ensure_collection(db, self.config.collection_name)

    async def _prepare(self, *, for_write: bool) -> AsyncIOMotorCollection:
        await self.wait_until_ready()
        if for_write and self.config.container_policy is ContainerPolicy.RECREATE:
            logger.warning(f"Dropping collection '{self.config.collection_name}' before save")
            db = self._get_client()[self.config.db_name]
            return await recreate_collection(db, self.config.collection_name)
        return await self.ensure_container()

    async def save(
        self,
        state: Union[MigrationState, Mapping[str, Any]],
        callback: Optional[SaveCallback] = None,
    ) -> None:
        try:
            await self._save(state)
        except Exception as exc:  # noqa: BLE001
            if callback is None:
                raise
            callback(exc)
            return

        if callback is not None:
            callback(None)

    async def _save(self, state: Union[MigrationState, Mapping[str, Any]]) -> None:
        try:
            migration_state = MigrationState.coerce(state)
        except ValidationError as exc:
            raise StoreWriteException(f"Invalid migration state: {exc}") from exc

        collection = await self._prepare(for_write=True)

        try:
            current = await collection.find_one({"_id": STATE_DOCUMENT_ID}, projection={"_rev": 1})
        except PyMongoError as exc:
            raise StoreWriteException(f"Could not read current revision: {exc}") from exc

        current_rev = current.get("_rev") if current is not None else None
        document = {
            "_id": STATE_DOCUMENT_ID,
            "_rev": next_revision(current_rev),
            **migration_state.to_document(),
        }

        try:
            if current is None:
                await collection.insert_one(document)
            else:
                result = await collection.replace_one({"_id": STATE_DOCUMENT_ID, "_rev": current_rev}, document)
                if result.matched_count == 0:
                    raise WriteConflictException(current_rev)
        except DuplicateKeyError as exc:
            raise WriteConflictException(current_rev) from exc
        except PyMongoError as exc:
            raise StoreWriteException(f"Could not persist migration state: {exc}") from exc

        logger.info(
            f"Saved migration state (lastRun={migration_state.last_run}, "
            f"migrations={len(migration_state.migrations)}, rev={document['_rev']})"
        )

    async def load(self, callback: Optional[LoadCallback] = None) -> dict:
        try:
            state = await self._load()
        except Exception as exc:  # noqa: BLE001
            if callback is None:
                raise
            callback(exc, {})
            return {}

        if callback is not None:
            callback(None, state)
        return state

    async def _load(self) -> dict:
        collection = await self._prepare(for_write=False)

        try:
            document = await collection.find_one({})
        except PyMongoError as exc:
            raise QueryException(f"Could not load migration state: {exc}") from exc

        if document is None:
            logger.debug("No migration state stored yet")
            return {}

        return {
            "lastRun": document.get("lastRun"),
            "migrations": document.get("migrations", []),
        }

    async def revision(self) -> Optional[str]:
        """Current revision token of the state document, or None before the first save."""
        collection = await self._prepare(for_write=False)
        try:
            document = await collection.find_one({"_id": STATE_DOCUMENT_ID}, projection={"_rev": 1})
        except PyMongoError as exc:
            raise QueryException(f"Could not read revision: {exc}") from exc
        return document.get("_rev") if document is not None else None

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    async def __aenter__(self) -> "MongoMigrationStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
