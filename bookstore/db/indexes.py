"""
MongoDB index definitions for the books collection.

Index names follow MongoDB's default naming (``<field>_<direction>``) so that
re-creating them, including against indexes built by other tools with
default names, is a no-op on the server.
"""

from typing import Any

import structlog
from pymongo import ASCENDING, IndexModel
from pymongo.errors import OperationFailure

logger = structlog.get_logger(__name__)

# Server error code for dropping an index that does not exist
INDEX_NOT_FOUND = 27


TITLE_INDEX = IndexModel(
    [("title", ASCENDING)],
    name="title_1",
)

AUTHOR_YEAR_INDEX = IndexModel(
    [("author", ASCENDING), ("published_year", ASCENDING)],
    name="author_1_published_year_1",
)

BOOKS_COLLECTION = "books"
BOOKS_INDEXES = (TITLE_INDEX, AUTHOR_YEAR_INDEX)
BOOKS_INDEX_NAMES = [index.document["name"] for index in BOOKS_INDEXES]


async def create_index(collection: Any, index: IndexModel) -> str:
    """
    Create a single index and return its name.

    Args:
        collection: Motor collection instance.
        index: Index to create.
    """
    created = await collection.create_indexes([index])
    logger.debug("Index ensured", collection=collection.name, index=created[0])
    return created[0]


async def ensure_indexes(db: Any, collection_name: str | None = None) -> dict[str, list[str]]:
    """
    Create the books indexes in the database.

    Args:
        db: Motor database instance.
        collection_name: Override for the books collection name.

    Returns:
        Dictionary mapping the collection name to created index names.
    """
    name = collection_name or BOOKS_COLLECTION
    collection = db[name]
    created_indexes = await collection.create_indexes(list(BOOKS_INDEXES))
    logger.info("Indexes ensured", collection=name, indexes=created_indexes)
    return {name: created_indexes}


async def describe_indexes(collection: Any) -> dict[str, dict[str, Any]]:
    """
    Return the collection's index information keyed by index name.

    Each value carries at least ``key``, a list of ``(field, direction)`` pairs.
    """
    return await collection.index_information()


async def drop_indexes(collection: Any) -> dict[str, bool]:
    """
    Drop the managed books indexes, keeping ``_id`` and any foreign index.

    Returns:
        Dictionary mapping index names to whether they were dropped.
    """
    results: dict[str, bool] = {}

    for index_name in BOOKS_INDEX_NAMES:
        try:
            await collection.drop_index(index_name)
            results[index_name] = True
        except OperationFailure as e:
            if e.code != INDEX_NOT_FOUND:
                raise
            results[index_name] = False

    return results
