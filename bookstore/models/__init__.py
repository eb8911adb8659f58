"""
Pydantic models for the bookstore.

This module exports the models used throughout the application:
- BookCreate: insertion payload
- ExplainSummary: digest of an explain document
"""

from bookstore.models.analytics import ExplainSummary
from bookstore.models.book import BookCreate

__all__ = [
    "BookCreate",
    "ExplainSummary",
]
