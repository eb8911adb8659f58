"""
Base repository pattern implementation for MongoDB with Motor.

Provides generic read, write, aggregation and explain operations that
can be inherited by specific repository implementations.
"""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

Document = dict[str, Any]
SortSpec = list[tuple[str, int]]


class BaseRepository:
    """
    Base repository with common query operations.

    Provides a consistent interface for database operations. Reads return
    the documents exactly as the driver decoded them: no field is added,
    dropped or coerced on the way out.

    Usage:
        class BookRepository(BaseRepository):
            def __init__(self, database):
                super().__init__(database, "books")

            async def find_by_author(self, author: str) -> list[Document]:
                return await self.find_many({"author": author})
    """

    def __init__(self, database: AsyncIOMotorDatabase, collection_name: str) -> None:
        """
        Initialize repository with database connection.

        Args:
            database: Motor database instance
            collection_name: Name of the MongoDB collection
        """
        self._database = database
        self.collection_name = collection_name
        self._collection: AsyncIOMotorCollection = database[collection_name]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """Get the Motor collection instance."""
        return self._collection

    @property
    def database(self) -> AsyncIOMotorDatabase:
        """Get the Motor database instance."""
        return self._database

    # =========================================================================
    # Read Operations
    # =========================================================================

    async def find_one(self, filter: dict[str, Any]) -> Document | None:
        """
        Find a single document matching the filter.

        Args:
            filter: MongoDB query filter

        Returns:
            The stored document or None if not found
        """
        return await self._collection.find_one(filter)

    async def find_many(
        self,
        filter: dict[str, Any] | None = None,
        *,
        sort: SortSpec | None = None,
    ) -> list[Document]:
        """
        Find all documents matching the filter.

        Args:
            filter: MongoDB query filter (default: all documents)
            sort: List of (field, direction) tuples for sorting

        Returns:
            List of stored documents
        """
        cursor = self._collection.find(filter or {})

        if sort:
            cursor = cursor.sort(sort)

        return await cursor.to_list(length=None)

    async def find_projected(
        self,
        filter: dict[str, Any] | None,
        projection: dict[str, Any],
        *,
        sort: SortSpec | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> list[dict[str, Any]]:
        """
        Find documents and return only the projected fields.

        Args:
            filter: MongoDB query filter (default: all documents)
            projection: Fields to include/exclude
            sort: List of (field, direction) tuples for sorting
            skip: Number of documents to skip (for pagination)
            limit: Maximum number of documents to return (0 means no limit)

        Returns:
            List of raw documents
        """
        cursor = self._collection.find(filter or {}, projection)

        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)

        return await cursor.to_list(length=None)

    # =========================================================================
    # Update Operations
    # =========================================================================

    async def update_one(
        self,
        filter: dict[str, Any],
        update: dict[str, Any],
        *,
        upsert: bool = False,
    ) -> int:
        """
        Update the first document matching the filter.

        Args:
            filter: MongoDB query filter
            update: Update operations (e.g., {"$set": {...}})
            upsert: Create document if not found

        Returns:
            Number of documents matched (0 or 1)
        """
        result = await self._collection.update_one(filter, update, upsert=upsert)
        return result.matched_count

    # =========================================================================
    # Delete Operations
    # =========================================================================

    async def delete_one(self, filter: dict[str, Any]) -> bool:
        """
        Delete the first document matching the filter.

        Returns:
            True if a document was deleted
        """
        result = await self._collection.delete_one(filter)
        return result.deleted_count > 0

    # =========================================================================
    # Aggregation Operations
    # =========================================================================

    async def aggregate(
        self,
        pipeline: list[dict[str, Any]],
        *,
        allow_disk_use: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Execute an aggregation pipeline.

        Args:
            pipeline: List of aggregation stages
            allow_disk_use: Allow using disk for large operations

        Returns:
            List of aggregation results
        """
        cursor = self._collection.aggregate(pipeline, allowDiskUse=allow_disk_use)
        return await cursor.to_list(length=None)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    async def explain_find(
        self,
        filter: dict[str, Any],
        *,
        verbosity: str = "executionStats",
    ) -> dict[str, Any]:
        """
        Explain a find operation instead of running it.

        Args:
            filter: MongoDB query filter
            verbosity: queryPlanner, executionStats or allPlansExecution

        Returns:
            Raw explain document
        """
        return await self._database.command(
            "explain",
            {"find": self.collection_name, "filter": filter},
            verbosity=verbosity,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(collection='{self.collection_name}')>"
