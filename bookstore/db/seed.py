"""
Sample books for populating an empty collection.

The query catalog expects a pre-populated ``books`` collection; this is
the data set it was written against.
"""

from typing import Any

import structlog

from bookstore.models.book import BookCreate

logger = structlog.get_logger(__name__)

SAMPLE_BOOKS: tuple[dict[str, Any], ...] = (
    {
        "title": "To Kill a Mockingbird",
        "author": "Harper Lee",
        "genre": "Fiction",
        "published_year": 1960,
        "price": 12.99,
        "in_stock": True,
        "pages": 336,
        "publisher": "J. B. Lippincott & Co.",
    },
    {
        "title": "1984",
        "author": "George Orwell",
        "genre": "Dystopian",
        "published_year": 1949,
        "price": 10.99,
        "in_stock": True,
        "pages": 328,
        "publisher": "Secker & Warburg",
    },
    {
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "genre": "Fiction",
        "published_year": 1925,
        "price": 9.99,
        "in_stock": True,
        "pages": 180,
        "publisher": "Charles Scribner's Sons",
    },
    {
        "title": "Brave New World",
        "author": "Aldous Huxley",
        "genre": "Dystopian",
        "published_year": 1932,
        "price": 11.50,
        "in_stock": False,
        "pages": 311,
        "publisher": "Chatto & Windus",
    },
    {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "genre": "Fantasy",
        "published_year": 1937,
        "price": 14.99,
        "in_stock": True,
        "pages": 310,
        "publisher": "George Allen & Unwin",
    },
    {
        "title": "The Catcher in the Rye",
        "author": "J.D. Salinger",
        "genre": "Fiction",
        "published_year": 1951,
        "price": 8.99,
        "in_stock": True,
        "pages": 224,
        "publisher": "Little, Brown and Company",
    },
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "genre": "Romance",
        "published_year": 1813,
        "price": 7.99,
        "in_stock": True,
        "pages": 432,
        "publisher": "T. Egerton",
    },
    {
        "title": "The Lord of the Rings",
        "author": "J.R.R. Tolkien",
        "genre": "Fantasy",
        "published_year": 1954,
        "price": 19.99,
        "in_stock": True,
        "pages": 1178,
        "publisher": "Allen & Unwin",
    },
    {
        "title": "Animal Farm",
        "author": "George Orwell",
        "genre": "Political Satire",
        "published_year": 1945,
        "price": 8.50,
        "in_stock": False,
        "pages": 112,
        "publisher": "Secker & Warburg",
    },
    {
        "title": "The Alchemist",
        "author": "Paulo Coelho",
        "genre": "Fiction",
        "published_year": 1988,
        "price": 10.99,
        "in_stock": True,
        "pages": 197,
        "publisher": "HarperOne",
    },
    {
        "title": "Moby Dick",
        "author": "Herman Melville",
        "genre": "Adventure",
        "published_year": 1851,
        "price": 12.50,
        "in_stock": False,
        "pages": 635,
        "publisher": "Harper & Brothers",
    },
    {
        "title": "Wuthering Heights",
        "author": "Emily Brontë",
        "genre": "Gothic Fiction",
        "published_year": 1847,
        "price": 9.99,
        "in_stock": True,
        "pages": 342,
        "publisher": "Thomas Cautley Newby",
    },
)


def sample_books() -> list[BookCreate]:
    """Validated copies of the sample data set."""
    return [BookCreate.model_validate(book) for book in SAMPLE_BOOKS]


async def seed_books(
    collection: Any,
    books: list[BookCreate] | None = None,
    *,
    drop: bool = False,
) -> int:
    """
    Insert books into the collection.

    Args:
        collection: Motor collection instance.
        books: Books to insert (default: the sample data set).
        drop: Delete every existing document first.

    Returns:
        Number of documents inserted.
    """
    if drop:
        result = await collection.delete_many({})
        logger.info("Cleared collection", collection=collection.name, deleted=result.deleted_count)

    documents = [book.to_document() for book in (books if books is not None else sample_books())]
    if not documents:
        return 0

    result = await collection.insert_many(documents)
    inserted = len(result.inserted_ids)
    logger.info("Seeded books", collection=collection.name, inserted=inserted)
    return inserted
