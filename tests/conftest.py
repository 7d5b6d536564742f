"""
Pytest configuration and shared fixtures for migration store tests.

The fakes below stand in for the small part of the motor API the store uses.
"""

import copy

import pytest
from faker import Faker
from pymongo.errors import CollectionInvalid, DuplicateKeyError, ServerSelectionTimeoutError

from mongo_migration_store import MigrationStoreConfig, MongoMigrationStore

fake = Faker()

STORE_ENV_VARS = [
    "MONGO_URI",
    "MONGO_WAIT_TIME",
    "MIGRATION_DB_NAME",
    "MIGRATION_COLLECTION_NAME",
    "MIGRATION_CONTAINER_POLICY",
]


class FakeUpdateResult:
    def __init__(self, matched_count: int) -> None:
        self.matched_count = matched_count
        self.modified_count = matched_count


def _matches(document: dict, query: dict | None) -> bool:
    return all(document.get(key) == value for key, value in (query or {}).items())


class FakeCollection:
    def __init__(self) -> None:
        self.docs: dict = {}
        self.errors: dict[str, Exception] = {}
        self.before_write = None

    def _raise_if_configured(self, operation: str) -> None:
        if operation in self.errors:
            raise self.errors[operation]

    async def find_one(self, query=None, projection=None):
        self._raise_if_configured("find_one")
        for document in self.docs.values():
            if _matches(document, query):
                found = copy.deepcopy(document)
                if projection:
                    found = {key: value for key, value in found.items() if key == "_id" or key in projection}
                return found
        return None

    async def insert_one(self, document: dict):
        if self.before_write is not None:
            self.before_write(self)
        self._raise_if_configured("insert_one")
        if document["_id"] in self.docs:
            raise DuplicateKeyError("E11000 duplicate key error")
        self.docs[document["_id"]] = copy.deepcopy(document)

    async def replace_one(self, query: dict, document: dict):
        if self.before_write is not None:
            self.before_write(self)
        self._raise_if_configured("replace_one")
        for key, existing in self.docs.items():
            if _matches(existing, query):
                self.docs[key] = copy.deepcopy(document)
                return FakeUpdateResult(1)
        return FakeUpdateResult(0)


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}
        self.existing: list[str] = []
        self.errors: dict[str, Exception] = {}
        self.create_calls = 0
        self.drop_calls = 0

    async def list_collection_names(self):
        if "list_collection_names" in self.errors:
            raise self.errors["list_collection_names"]
        return list(self.existing)

    async def create_collection(self, name: str):
        self.create_calls += 1
        if "create_collection" in self.errors:
            raise self.errors["create_collection"]
        if name in self.existing:
            raise CollectionInvalid(f"collection {name} already exists")
        self.existing.append(name)
        return self[name]

    async def drop_collection(self, name: str):
        self.drop_calls += 1
        if "drop_collection" in self.errors:
            raise self.errors["drop_collection"]
        if name in self.existing:
            self.existing.remove(name)
        self[name].docs.clear()

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeAdmin:
    def __init__(self, client: "FakeMotorClient") -> None:
        self.client = client

    async def command(self, name: str):
        assert name == "ping"
        self.client.pings += 1
        if self.client.failing_pings is None or self.client.pings <= self.client.failing_pings:
            raise ServerSelectionTimeoutError("No servers found yet")
        return {"ok": 1.0}


class FakeMotorClient:
    def __init__(self, failing_pings: int | None = 0) -> None:
        # None means the server never becomes reachable
        self.failing_pings = failing_pings
        self.pings = 0
        self.closed = False
        self.databases: dict[str, FakeDatabase] = {}
        self.admin = FakeAdmin(self)

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase())

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_store_env(monkeypatch):
    """Remove store variables from the environment and restore them afterwards."""
    for name in STORE_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def client_factory():
    return FakeMotorClient


@pytest.fixture
def mongo_client():
    return FakeMotorClient()


@pytest.fixture
def config():
    return MigrationStoreConfig(mongo_uri="mongodb://localhost:27017", wait_time_ms=300)


@pytest.fixture
def store(config, mongo_client):
    return MongoMigrationStore(config, client=mongo_client)


@pytest.fixture
def sample_state():
    """A migration state with a few applied migrations."""
    migrations = [
        {"title": f"{index:04d}-{fake.slug()}", "timestamp": fake.iso8601()}
        for index in range(1, 4)
    ]
    return {"lastRun": migrations[-1]["title"], "migrations": migrations}

