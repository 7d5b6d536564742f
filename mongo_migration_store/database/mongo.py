import asyncio
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import CollectionInvalid, PyMongoError

from mongo_migration_store.config import READINESS_POLL_INTERVAL_S
from mongo_migration_store.exceptions import ConnectionTimeoutException, ContainerException
from mongo_migration_store.utils.serialisation import redact_url

logger = logging.getLogger(__name__)

# Upper bound of a single readiness probe
MAX_PROBE_TIMEOUT_MS = 2000


def create_client(mongo_uri: str, wait_time_ms: int) -> AsyncIOMotorClient:
    # Connecting is lazy, no network traffic happens here
    return AsyncIOMotorClient(
        mongo_uri,
        serverSelectionTimeoutMS=min(wait_time_ms, MAX_PROBE_TIMEOUT_MS),
        tz_aware=True,
    )


async def wait_for_mongo(
    client: AsyncIOMotorClient,
    mongo_uri: str,
    wait_time_ms: int,
    poll_interval_s: float = READINESS_POLL_INTERVAL_S,
) -> None:
    """
    Block until the server answers ``ping`` or ``wait_time_ms`` elapses.

    Raises:
        ConnectionTimeoutException: If no probe succeeded inside the wait window.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + wait_time_ms / 1000
    attempts = 0
    last_error: Optional[BaseException] = None

    while True:
        remaining = deadline - loop.time()
        if remaining <= 0:
            break
        attempts += 1
        try:
            await asyncio.wait_for(client.admin.command("ping"), timeout=remaining)
            logger.debug(f"MongoDB reachable after {attempts} probe(s)")
            return
        except (PyMongoError, OSError, asyncio.TimeoutError) as exc:
            last_error = exc
        await asyncio.sleep(min(poll_interval_s, max(deadline - loop.time(), 0)))

    url = redact_url(mongo_uri)
    logger.debug(f"MongoDB at {url} unreachable after {attempts} probe(s): {last_error}")
    raise ConnectionTimeoutException(url, wait_time_ms) from last_error


async def ensure_collection(db: AsyncIOMotorDatabase, collection_name: str) -> AsyncIOMotorCollection:
    """Create ``collection_name`` if it does not exist. Existing data is left untouched."""
    try:
        existing = await db.list_collection_names()
    except PyMongoError as exc:
        raise ContainerException(collection_name, "list", str(exc)) from exc

    if collection_name not in existing:
        try:
            await db.create_collection(collection_name)
            logger.debug(f"Created collection '{collection_name}'")
        except CollectionInvalid:
            # Another instance created it between the listing and now
            logger.debug(f"Collection '{collection_name}' created concurrently")
        except PyMongoError as exc:
            raise ContainerException(collection_name, "create", str(exc)) from exc

    return db[collection_name]


async def recreate_collection(db: AsyncIOMotorDatabase, collection_name: str) -> AsyncIOMotorCollection:
    """Drop ``collection_name`` (missing is fine) and create it empty."""
    try:
        await db.drop_collection(collection_name)
    except PyMongoError as exc:
        raise ContainerException(collection_name, "drop", str(exc)) from exc

    try:
        await db.create_collection(collection_name)
    except CollectionInvalid:
        # Recreated concurrently by another writer, still empty enough to proceed
        logger.debug(f"Collection '{collection_name}' recreated concurrently")
    except PyMongoError as exc:
        raise ContainerException(collection_name, "create", str(exc)) from exc

    logger.debug(f"Recreated collection '{collection_name}'")
    return db[collection_name]
