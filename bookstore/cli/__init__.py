"""
Command Line Interface for the bookstore query runner.

Provides commands for running the query catalog, seeding sample data,
managing indexes and inspecting query plans.
"""

from bookstore.cli.commands import cli

__all__ = ["cli"]
