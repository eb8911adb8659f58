"""
Repository layer for data access.

Provides abstraction over MongoDB collections with async operations
using Motor driver.
"""

from bookstore.repositories.base import BaseRepository
from bookstore.repositories.book_repository import BookRepository

__all__ = [
    "BaseRepository",
    "BookRepository",
]
