"""
MongoDB connection

This module centralizes access to the document store that holds product
payloads, orders and users:
- Cached MongoClient (created lazily, on first use)
- Collection getters used by the repositories
- Connection check with retry logic (health endpoint and startup)
"""
import time
import logging
from functools import lru_cache

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

from .config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# Client and collections
# ============================================================================

@lru_cache(maxsize=1)
def get_mongo_client() -> MongoClient:
    """
    Get the process-wide MongoClient

    MongoClient is thread-safe and pools connections internally, so one
    instance is shared by every request.
    """
    if not settings.MONGO_URI:
        raise Exception("MONGO_URI not configured")

    return MongoClient(settings.MONGO_URI, serverSelectionTimeoutMS=5000)


def get_database() -> Database:
    return get_mongo_client()[settings.MONGO_DB_NAME]


def get_product_files_collection() -> Collection:
    return get_database()[settings.PRODUCT_FILES_COLLECTION]


def get_orders_collection() -> Collection:
    return get_database()[settings.ORDERS_COLLECTION]


def get_users_collection() -> Collection:
    return get_database()[settings.USERS_COLLECTION]


# ============================================================================
# Connection check with retry
# ============================================================================

def get_database_with_retry(max_retries=3, retry_delay=1.0) -> Database:
    """
    Get the database after confirming the server answers a ping

    Args:
        max_retries: Maximum number of ping attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        pymongo Database

    Raises:
        pymongo.errors.ConnectionFailure: If all retry attempts fail
    """
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"MongoDB ping attempt {attempt}/{max_retries}")
            db = get_database()
            db.command("ping")

            logger.debug(f"MongoDB ping successful on attempt {attempt}")
            return db

        except ConnectionFailure as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            # Don't retry on last attempt
            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

        except PyMongoError as e:
            # For non-connection errors, fail immediately
            logger.error(f"Unexpected error during connection: {e}")
            raise

    raise last_error if last_error else ConnectionFailure("Connection failed after all retries")
