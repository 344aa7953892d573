"""MongoDB connection helpers."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional, Tuple

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from usermgmt.config import Settings, settings
from usermgmt.core.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "usermgmt"

_clients: Dict[Tuple[str, frozenset], MongoClient] = {}


def get_client(uri: str, **kwargs: Any) -> MongoClient:
    """
    Return a cached MongoClient keyed by URI and options.
    PyMongo pools connections per client, so one per process is enough.
    """
    key = (uri, frozenset(kwargs.items()))
    if key not in _clients:
        _clients[key] = MongoClient(uri, **kwargs)
    return _clients[key]


def get_database(uri: str, db_name: Optional[str] = None, **kwargs: Any) -> Database:
    """Convenience helper to fetch a database handle."""
    client = get_client(uri, **kwargs)
    if db_name:
        return client[db_name]
    # Falls back to the database named in the URI path
    return client.get_default_database(DEFAULT_DB_NAME)


def _client_options(config: Settings) -> Dict[str, Any]:
    return {"serverSelectionTimeoutMS": config.MONGODB_TIMEOUT_MS}


def connect_database(config: Settings = settings) -> Database:
    """
    Open the shared database handle and confirm the server answers.
    Raises DatabaseConnectionError when it does not.
    """
    try:
        db = get_database(
            config.MONGODB_URI, config.MONGODB_DB_NAME, **_client_options(config)
        )
        db.command("ping")
    except PyMongoError as exc:
        raise DatabaseConnectionError(str(exc)) from exc
    logger.info("MongoDB connected", extra={"database": db.name})
    return db


def get_db() -> Iterator[Database]:
    """
    FastAPI dependency that yields the shared database handle.
    """
    db = get_database(
        settings.MONGODB_URI, settings.MONGODB_DB_NAME, **_client_options(settings)
    )
    try:
        yield db
    finally:
        # Clients are cached; no explicit close here.
        pass
