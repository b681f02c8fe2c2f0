"""
Database helpers for the Portfolio API.

The MongoClient is created lazily on first use and shared by every request.
Route handlers receive the collection lookup through a FastAPI dependency so
tests can swap in a fake one.
"""

import os
import logging
from typing import Callable, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = logging.getLogger(__name__)

CollectionProvider = Callable[[], Collection]

DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "portfolio")
COLLECTION_NAME = os.getenv("COLLECTION_NAME", "portfolio")

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        # Connecting is deferred by the driver; this never blocks on the server
        _client = MongoClient(DATABASE_URL, serverSelectionTimeoutMS=5000)
        logger.info("MongoDB client created for database %s", DATABASE_NAME)
    return _client


def get_db() -> Database:
    return get_client()[DATABASE_NAME]


def get_collection() -> Collection:
    """Collection holding the profile and counter documents."""
    return get_db()[COLLECTION_NAME]


def get_collection_provider() -> CollectionProvider:
    """Dependency handing routes the collection lookup itself.

    Creating the client can raise (bad URI, SRV lookup failure), so routes
    resolve the collection inside their own error handling.
    """
    return get_collection


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
