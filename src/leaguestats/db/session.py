"""Match store access.

Provides cached MongoDB clients and the match-record collection the
repository queries. Connection settings come from the environment unless
passed explicitly.
"""

from __future__ import annotations

import logging
import os

from pymongo import MongoClient
from pymongo.collection import Collection

logger = logging.getLogger(__name__)

# Defaults, overridable through LEAGUESTATS_* environment variables
DEFAULT_MONGODB_URI = "mongodb://localhost:27017"
DEFAULT_DB_NAME = "leaguestats"
DEFAULT_MATCH_COLLECTION = "matches"
DEFAULT_SERVER_TIMEOUT_MS = 5000

# Module-level client cache, pymongo clients pool connections themselves
_client_cache: dict[str, MongoClient] = {}


def get_mongodb_uri() -> str:
    return os.environ.get("LEAGUESTATS_MONGODB_URI", DEFAULT_MONGODB_URI)


def get_server_timeout_ms() -> int:
    return int(os.environ.get("LEAGUESTATS_SERVER_TIMEOUT_MS", DEFAULT_SERVER_TIMEOUT_MS))


def get_client(uri: str | None = None) -> MongoClient:
    """Get a MongoDB client.

    Clients are cached by URI. Subsequent calls with the same URI return
    the cached client.

    Args:
        uri: MongoDB connection string. Defaults to LEAGUESTATS_MONGODB_URI.

    Returns:
        MongoClient instance (cached).
    """
    if uri is None:
        uri = get_mongodb_uri()

    if uri in _client_cache:
        return _client_cache[uri]

    client = MongoClient(uri, serverSelectionTimeoutMS=get_server_timeout_ms())
    _client_cache[uri] = client
    logger.info("Created MongoDB client")

    return client


def get_match_collection(
    uri: str | None = None,
    db_name: str | None = None,
    collection_name: str | None = None,
) -> Collection:
    """Get the match-record collection.

    Args:
        uri: MongoDB connection string.
        db_name: Database name. Defaults to LEAGUESTATS_DB.
        collection_name: Collection name. Defaults to LEAGUESTATS_MATCH_COLLECTION.

    Returns:
        Collection the stats queries run against.
    """
    if db_name is None:
        db_name = os.environ.get("LEAGUESTATS_DB", DEFAULT_DB_NAME)
    if collection_name is None:
        collection_name = os.environ.get("LEAGUESTATS_MATCH_COLLECTION", DEFAULT_MATCH_COLLECTION)

    return get_client(uri)[db_name][collection_name]


def close_clients() -> None:
    """Close and forget every cached client."""
    while _client_cache:
        _, client = _client_cache.popitem()
        client.close()
