"""Bookstore query runner: MongoDB queries, aggregations and indexes over a books collection."""

__version__ = "0.1.0"
