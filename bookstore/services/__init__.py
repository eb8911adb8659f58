"""
Service layer.

Holds the ordered query catalog and the runner that executes it
against the books repository.
"""

from bookstore.services.query_catalog import QUERY_CATALOG, QueryStep, select_steps
from bookstore.services.runner import (
    BookstoreError,
    ScriptRunner,
    StepFailedError,
    StepResult,
    run_catalog,
)

__all__ = [
    "QUERY_CATALOG",
    "QueryStep",
    "select_steps",
    "ScriptRunner",
    "StepResult",
    "BookstoreError",
    "StepFailedError",
    "run_catalog",
]
