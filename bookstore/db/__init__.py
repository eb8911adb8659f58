"""
Database connection and management module.

Provides async MongoDB connectivity through Motor driver.
"""

from bookstore.db.connection import (
    DatabaseConnection,
    close_database,
    get_books_collection,
    get_connection,
    get_database,
)
from bookstore.db.indexes import describe_indexes, drop_indexes, ensure_indexes
from bookstore.db.seed import seed_books

__all__ = [
    "DatabaseConnection",
    "get_connection",
    "get_database",
    "get_books_collection",
    "close_database",
    "ensure_indexes",
    "describe_indexes",
    "drop_indexes",
    "seed_books",
]
