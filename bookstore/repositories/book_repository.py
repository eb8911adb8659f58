"""
Book repository for database operations.

Provides async queries, point updates and deletes, aggregations,
index management and query diagnostics for book documents. Every
result is returned as the driver decoded it.
"""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from bookstore.db.indexes import AUTHOR_YEAR_INDEX, TITLE_INDEX, create_index
from bookstore.repositories.base import BaseRepository, Document

TITLE_AUTHOR_PRICE = {"title": 1, "author": 1, "price": 1, "_id": 0}
TITLE_YEAR = {"title": 1, "published_year": 1, "_id": 0}
TITLE_PRICE = {"title": 1, "price": 1, "_id": 0}
TITLE_ONLY = {"title": 1, "_id": 0}


class BookRepository(BaseRepository):
    """
    Repository for book document operations.

    Every query the bookstore runs lives here; the services only decide
    the order and the literals.
    """

    def __init__(self, database: AsyncIOMotorDatabase, collection_name: str = "books") -> None:
        """
        Initialize book repository.

        Args:
            database: Motor database instance
            collection_name: Books collection name
        """
        super().__init__(database, collection_name)

    # =========================================================================
    # Filtered reads
    # =========================================================================

    async def find_by_genre(self, genre: str) -> list[dict[str, Any]]:
        """Books in a genre, projected to title, author and price."""
        return await self.find_projected({"genre": genre}, TITLE_AUTHOR_PRICE)

    async def find_published_after(self, year: int) -> list[dict[str, Any]]:
        """Books published strictly after ``year``, projected to title and year."""
        return await self.find_projected({"published_year": {"$gt": year}}, TITLE_YEAR)

    async def find_by_author(self, author: str) -> list[Document]:
        """All books by an author, as full documents."""
        return await self.find_many({"author": author})

    async def find_by_title(self, title: str) -> Document | None:
        """First book with the given title, or None."""
        return await self.find_one({"title": title})

    async def find_in_stock_published_after(self, year: int) -> list[dict[str, Any]]:
        """In-stock books published after ``year``, projected to title, author and price."""
        return await self.find_projected(
            {"in_stock": True, "published_year": {"$gt": year}},
            TITLE_AUTHOR_PRICE,
        )

    # =========================================================================
    # Sorting and paging
    # =========================================================================

    async def list_by_price(self, *, descending: bool = False) -> list[dict[str, Any]]:
        """All books sorted by price, projected to title and price."""
        direction = DESCENDING if descending else ASCENDING
        return await self.find_projected(None, TITLE_PRICE, sort=[("price", direction)])

    async def paginate(self, page: int = 1, per_page: int = 5) -> list[dict[str, Any]]:
        """
        Return one page of titles.

        Args:
            page: 1-based page number
            per_page: Books per page

        Raises:
            ValueError: If page or per_page is less than 1
        """
        if page < 1:
            raise ValueError(f"Page must be 1 or greater, got {page}")
        if per_page < 1:
            raise ValueError(f"Page size must be 1 or greater, got {per_page}")

        return await self.find_projected(
            None,
            TITLE_ONLY,
            skip=(page - 1) * per_page,
            limit=per_page,
        )

    # =========================================================================
    # Point writes
    # =========================================================================

    async def set_price(self, title: str, price: float) -> Document | None:
        """
        Set the price of the first book with ``title`` and re-read it.

        Returns:
            The book as stored after the update, or None if no book matched
        """
        await self.update_one({"title": title}, {"$set": {"price": price}})
        return await self.find_by_title(title)

    async def delete_by_title(self, title: str) -> Document | None:
        """
        Delete the first book with ``title`` and re-read by the same title.

        Returns:
            Whatever still matches the title after the delete (None once gone)
        """
        await self.delete_one({"title": title})
        return await self.find_by_title(title)

    # =========================================================================
    # Aggregations
    # =========================================================================

    async def average_price_by_genre(self) -> list[Document]:
        """Mean price and count per genre, most expensive genre first."""
        pipeline = [
            {
                "$group": {
                    "_id": "$genre",
                    "avgPrice": {"$avg": "$price"},
                    "count": {"$sum": 1},
                }
            },
            {"$sort": {"avgPrice": -1}},
        ]
        return await self.aggregate(pipeline)

    async def top_authors(self, limit: int = 1) -> list[Document]:
        """Authors with the most books; ties follow the engine's grouping order."""
        pipeline = [
            {"$group": {"_id": "$author", "count": {"$sum": 1}}},
            {"$sort": {"count": -1}},
            {"$limit": limit},
        ]
        return await self.aggregate(pipeline)

    async def count_by_decade(self) -> list[Document]:
        """Book counts per publication decade, oldest decade first."""
        decade = {"$multiply": [{"$floor": {"$divide": ["$published_year", 10]}}, 10]}
        pipeline = [
            {"$group": {"_id": decade, "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ]
        return await self.aggregate(pipeline)

    # =========================================================================
    # Indexes and diagnostics
    # =========================================================================

    async def create_title_index(self) -> str:
        return await create_index(self.collection, TITLE_INDEX)

    async def create_author_year_index(self) -> str:
        return await create_index(self.collection, AUTHOR_YEAR_INDEX)

    async def explain_title_lookup(self, title: str) -> dict[str, Any]:
        """Execution statistics for finding a book by title."""
        return await self.explain_find({"title": title}, verbosity="executionStats")
