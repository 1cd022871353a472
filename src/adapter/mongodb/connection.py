import os
import logging
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Driver-level logs are noisy at INFO
logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'keystone')
USERS_COLLECTION_NAME = 'users'
RESET_TOKENS_COLLECTION_NAME = 'password_reset_tokens'
PROJECTS_COLLECTION_NAME = 'projects'

_client_cache = None
_connection_attempted = False
_connection_failed = False


def reset_client():
    """Forget the cached client and any earlier connection failure."""
    global _client_cache, _connection_attempted, _connection_failed
    _client_cache = None
    _connection_attempted = False
    _connection_failed = False


def _is_alive(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def _connect(url: str) -> MongoClient:
    client = MongoClient(
        url,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=5000,
        socketTimeoutMS=30000,
        maxPoolSize=20,
        minPoolSize=0,
        maxIdleTimeMS=30000,
        retryWrites=True,
        retryReads=True,
        tz_aware=True,  # expiry comparisons use aware UTC datetimes
    )
    client.admin.command('ping')
    return client


def get_mongodb_client() -> MongoClient | None:
    """Return a live MongoDB client, or None when the database is unreachable.

    A cached client is reused while it answers pings. A failed first
    connection (usually bad configuration) is not retried until
    reset_client() is called; later failures are retried on every call.
    """
    global _client_cache, _connection_attempted, _connection_failed

    if _client_cache is not None:
        if _is_alive(_client_cache):
            return _client_cache
        logger.debug("[MONGODB] Cached client failed ping, reconnecting")
        _client_cache = None

    if _connection_failed:
        return None

    if not MONGO_URL:
        logger.error("[MONGODB] MONGO_URL not configured.")
        _connection_failed = True
        return None

    try:
        client = _connect(MONGO_URL)
    except (ConnectionFailure, PyMongoError) as e:
        if not _connection_attempted:
            logger.error(f"[MONGODB] Initial connection failed: {str(e)[:200]}")
            _connection_failed = True
        return None

    if not _connection_attempted:
        logger.info(f"[MONGODB] Connected to {DATABASE_NAME}")
    _connection_attempted = True
    _client_cache = client
    return client
