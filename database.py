import logging
import os

from dotenv import load_dotenv
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


_client: MongoClient | None = None
_indexes_ready = False

USERS = "users"
PROFILES = "profiles"
POSTS = "posts"


def _timeout_ms() -> int:
    load_dotenv()
    return int(os.getenv("MONGODB_TIMEOUT_MS", "5000"))


def get_client() -> MongoClient:
    global _client
    if _client is None:
        load_dotenv()
        mongo_uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
        timeout = _timeout_ms()
        _client = MongoClient(
            mongo_uri,
            serverSelectionTimeoutMS=timeout,
            connectTimeoutMS=timeout,
            timeoutMS=timeout,
        )
    return _client


def set_client(client: MongoClient | None) -> None:
    """Swap the process-wide client, e.g. for an in-memory client in tests."""
    global _client, _indexes_ready
    _client = client
    _indexes_ready = False


def get_collection(name: str) -> Collection:
    load_dotenv()
    db_name = os.getenv("MONGODB_DB", "dev_connector")
    collection = get_client()[db_name][name]
    ensure_indexes()
    return collection


def ensure_indexes() -> None:
    global _indexes_ready
    if _indexes_ready:
        return

    load_dotenv()
    db = get_client()[os.getenv("MONGODB_DB", "dev_connector")]
    # create_index is idempotent, so concurrent first calls may both run it.
    try:
        db[PROFILES].create_index([("handle", ASCENDING)], unique=True, name="uniq_handle")
        db[PROFILES].create_index([("user", ASCENDING)], unique=True, name="uniq_user")
        db[POSTS].create_index([("date", DESCENDING)], name="date_desc")
    except PyMongoError:
        logger.exception("Could not create MongoDB indexes")
        raise
    _indexes_ready = True
