"""
mongo-migration-store - MongoDB storage backend for migration runners

Persists the runner state (the last executed migration and the history of
applied migrations) as a single document and loads it back:

    store = MongoMigrationStore()  # reads MONGO_URI, MONGO_WAIT_TIME, ...
    await store.save({"lastRun": "0002-add-index", "migrations": [...]})
    state = await store.load()  # {} before the first save
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config import ContainerPolicy, MigrationStoreConfig  # noqa: F401
from .contracts import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
from .exceptions import *  # noqa: F401,F403
from .schemas import *  # noqa: F401,F403
from .utils import configure_env, setup_logging  # noqa: F401
