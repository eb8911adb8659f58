"""
Pytest configuration and fixtures for testing.

Provides database fixtures, mock Motor objects, data factories and
test utilities for the bookstore query runner.
"""

import io
import os
from typing import Any, AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure
from rich.console import Console

from bookstore.db import connection as connection_module
from bookstore.models.book import BookCreate
from bookstore.repositories.book_repository import BookRepository

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def mongo_client() -> AsyncGenerator[AsyncIOMotorClient, None]:
    """
    Create a MongoDB client for integration tests.

    Skips the test when no server answers at TEST_MONGO_URI.
    """
    mongo_uri = os.getenv("TEST_MONGO_URI", "mongodb://localhost:27017")

    client = AsyncIOMotorClient(mongo_uri, serverSelectionTimeoutMS=1500)

    try:
        try:
            await client.admin.command("ping")
        except ConnectionFailure as e:
            pytest.skip(f"MongoDB not available at {mongo_uri}: {e}")
        yield client
    finally:
        client.close()


@pytest_asyncio.fixture(scope="function")
async def test_db(mongo_client: AsyncIOMotorClient) -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Create a test database that gets dropped after each test.
    """
    db_name = f"test_bookstore_{ObjectId()}"
    db = mongo_client[db_name]

    yield db

    await mongo_client.drop_database(db_name)


@pytest_asyncio.fixture
async def book_repository(test_db: AsyncIOMotorDatabase) -> BookRepository:
    """Create a BookRepository over the test database."""
    return BookRepository(test_db)


@pytest.fixture(autouse=True)
def reset_global_connection(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no test leaks the module-level connection."""
    monkeypatch.setattr(connection_module, "_db_connection", None)


# =============================================================================
# Mock Motor Objects
# =============================================================================


def make_cursor(documents: list[dict[str, Any]] | None = None) -> MagicMock:
    """Build a Motor-like cursor whose chain methods return itself."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=documents or [])
    return cursor


@pytest.fixture
def mock_collection() -> MagicMock:
    """A Motor collection double with async CRUD methods."""
    collection = MagicMock()
    collection.name = "books"
    collection.find = MagicMock(return_value=make_cursor())
    collection.aggregate = MagicMock(return_value=make_cursor())
    collection.find_one = AsyncMock(return_value=None)
    collection.count_documents = AsyncMock(return_value=0)
    collection.update_one = AsyncMock(return_value=MagicMock(matched_count=1, modified_count=1))
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
    collection.insert_many = AsyncMock(
        side_effect=lambda docs: MagicMock(inserted_ids=[ObjectId() for _ in docs])
    )
    collection.create_indexes = AsyncMock(
        side_effect=lambda models: [model.document["name"] for model in models]
    )
    collection.index_information = AsyncMock(return_value={"_id_": {"key": [("_id", 1)]}})
    collection.drop_index = AsyncMock(return_value=None)
    return collection


@pytest.fixture
def mock_db(mock_collection: MagicMock) -> MagicMock:
    """
    Create a mock database for unit tests that don't need real MongoDB.

    Every collection lookup returns ``mock_collection``.
    """
    mock = MagicMock(spec=AsyncIOMotorDatabase)
    mock.__getitem__ = MagicMock(return_value=mock_collection)
    mock.command = AsyncMock(return_value={})
    return mock


@pytest.fixture
def mock_repository(mock_db: MagicMock) -> BookRepository:
    """BookRepository backed by the mock database."""
    return BookRepository(mock_db)


# =============================================================================
# Factory Fixtures
# =============================================================================


class BookFactory:
    """Factory for creating test book documents."""

    _counter = 0

    @classmethod
    def document(cls, **overrides: Any) -> dict[str, Any]:
        """A raw book document as MongoDB would return it."""
        cls._counter += 1
        document = {
            "_id": ObjectId(),
            "title": f"Test Book {cls._counter}",
            "author": "Test Author",
            "genre": "Fiction",
            "published_year": 1990 + cls._counter,
            "price": 10.0,
            "in_stock": True,
        }
        document.update(overrides)
        return document

    @classmethod
    def create_data(cls, **overrides: Any) -> BookCreate:
        """Create BookCreate data for insertion."""
        document = cls.document(**overrides)
        document.pop("_id")
        return BookCreate.model_validate(document)


@pytest.fixture
def book_factory() -> type[BookFactory]:
    """Provide BookFactory class."""
    BookFactory._counter = 0
    return BookFactory


# =============================================================================
# Sample Results
# =============================================================================

HOBBIT_IXSCAN_EXPLAIN: dict[str, Any] = {
    "queryPlanner": {
        "namespace": "plp_bookstore.books",
        "winningPlan": {
            "stage": "FETCH",
            "inputStage": {
                "stage": "IXSCAN",
                "keyPattern": {"title": 1},
                "indexName": "title_1",
            },
        },
    },
    "executionStats": {
        "nReturned": 1,
        "executionTimeMillis": 0,
        "totalKeysExamined": 1,
        "totalDocsExamined": 1,
    },
    "ok": 1.0,
}


@pytest.fixture
def ixscan_explain() -> dict[str, Any]:
    return HOBBIT_IXSCAN_EXPLAIN


@pytest.fixture
def fake_repository(book_factory: type[BookFactory]) -> MagicMock:
    """
    A BookRepository double returning realistic values for every step.

    ``mock_calls`` records the order in which the runner used it.
    """
    repo = MagicMock(spec=BookRepository)
    repo.find_by_genre.return_value = [
        {"title": "The Alchemist", "author": "Paulo Coelho", "price": 10.99}
    ]
    repo.find_published_after.return_value = []
    repo.find_by_author.return_value = [
        book_factory.document(title="1984", author="George Orwell")
    ]
    repo.set_price.return_value = book_factory.document(title="1984", price=12.5)
    repo.delete_by_title.return_value = None
    repo.find_in_stock_published_after.return_value = []
    repo.list_by_price.return_value = [{"title": "Pride and Prejudice", "price": 7.99}]
    repo.paginate.return_value = [{"title": "1984"}]
    repo.average_price_by_genre.return_value = [{"_id": "Fantasy", "avgPrice": 17.49, "count": 2}]
    repo.top_authors.return_value = [{"_id": "George Orwell", "count": 2}]
    repo.count_by_decade.return_value = [{"_id": 1940.0, "count": 2}]
    repo.create_title_index.return_value = "title_1"
    repo.create_author_year_index.return_value = "author_1_published_year_1"
    repo.explain_title_lookup.return_value = HOBBIT_IXSCAN_EXPLAIN
    return repo


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def recording_console() -> Console:
    """A rich console writing plain text to memory; read it with ``.file.getvalue()``."""
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)
