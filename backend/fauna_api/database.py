"""
Fauna API: Document Store Client Management
==============================================

What:  Async MongoDB client construction, FastAPI dependency, and lifecycle helpers.
How:   The lifespan handler in main.py builds one AsyncMongoClient, stores it
       (and the selected database) on app.state, and closes it at shutdown.
       Route handlers receive the database through Depends(get_database);
       nothing here keeps a module-level client.
Who:   main.py (lifecycle), routes (dependency), services (operation_deadline).

Collections (one logical database, settings.mongodb_database):
    animals     → Animal documents, `species` references species._id
    species     → Species documents, `category` references categories._id
    categories  → Category documents

Connection Strategy:
    serverSelectionTimeoutMS bounds how long an operation waits for a
    reachable server; pymongo.timeout() (see operation_deadline) bounds the
    whole operation by the request's remaining budget.
"""

import logging
from typing import List, Tuple

import pymongo
from fastapi import Request
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from fauna_api.config import Settings
from fauna_api.middleware.deadline import remaining_seconds

logger = logging.getLogger(__name__)

# ── Collection Names ──────────────────────────────────────────────────────
ANIMALS = "animals"
SPECIES = "species"
CATEGORIES = "categories"

# (collection, field) pairs indexed at startup: list sort keys and join keys
INDEXES: List[Tuple[str, str]] = [
    (ANIMALS, "animal_name"),
    (ANIMALS, "species"),
    (SPECIES, "species_name"),
    (SPECIES, "category"),
    (CATEGORIES, "category_name"),
]


def create_client(config: Settings) -> AsyncMongoClient:
    """
    Build the process-wide client from settings.

    The driver connects lazily; no network traffic happens until the first
    operation (or the startup ping).
    """
    return AsyncMongoClient(
        config.mongodb_uri,
        serverSelectionTimeoutMS=config.mongodb_server_selection_timeout_ms,
        appname="fauna-api",
    )


def operation_deadline():
    """
    Context manager bounding the enclosed store calls by the request deadline.

    Usage in services:
        with operation_deadline():
            doc = await db[CATEGORIES].find_one({"_id": oid})
    """
    return pymongo.timeout(remaining_seconds())


# ── Request Dependency ────────────────────────────────────────────────────
def get_database(request: Request) -> AsyncDatabase:
    """
    FastAPI dependency that provides the application's database handle.

    Raises:
        RuntimeError: the lifespan handler has not connected the client.
    """
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database is not initialized. Is the lifespan handler running?")
    return db


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping(client: AsyncMongoClient) -> bool:
    """Return True when the server answers the `ping` command."""
    try:
        with operation_deadline():
            await client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("MongoDB ping failed: %s", str(e))
        return False


async def ensure_indexes(db: AsyncDatabase) -> int:
    """
    Create the ascending single-field indexes listed in INDEXES.

    create_index is a no-op when an identical index already exists.
    A failed index is logged and the remaining ones are still attempted;
    the API serves requests without them.

    Returns: number of indexes created or confirmed.
    """
    ensured = 0
    for collection, field in INDEXES:
        try:
            with operation_deadline():
                await db[collection].create_index([(field, ASCENDING)])
        except PyMongoError as e:
            logger.warning("Could not create index %s.%s: %s", collection, field, str(e))
            continue
        ensured += 1
    logger.info("Ensured %d/%d indexes on database '%s'", ensured, len(INDEXES), db.name)
    return ensured


async def close_client(client: AsyncMongoClient) -> None:
    """Close all pooled connections; called during application shutdown."""
    await client.close()
