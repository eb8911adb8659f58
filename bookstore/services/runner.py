"""
Script runner executing the query catalog against the books collection.

Runs the selected steps one at a time, printing each result. The first
failure stops the sequence; the connection is always released.
"""

from dataclasses import dataclass
from typing import Any

import structlog
from motor.motor_asyncio import AsyncIOMotorDatabase
from rich.console import Console
from rich.markup import escape

from bookstore.config.settings import Settings, get_settings
from bookstore.db.connection import close_database, get_database
from bookstore.repositories.book_repository import BookRepository
from bookstore.services.query_catalog import QUERY_CATALOG, QueryStep, select_steps

logger = structlog.get_logger(__name__)


class BookstoreError(Exception):
    """Base exception for bookstore runner errors."""

    pass


class StepFailedError(BookstoreError):
    """Raised when a catalog step fails; the driver error is the cause."""

    def __init__(self, step: QueryStep, cause: BaseException) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"Step {step.number} ({step.label}) failed: {cause}")


@dataclass
class StepResult:
    """What one step produced."""

    step: QueryStep
    value: Any


class ScriptRunner:
    """
    Executes catalog steps sequentially.

    Usage:
        runner = ScriptRunner(BookRepository(db))
        await runner.run()          # all fourteen steps
        await runner.run([4, 5])    # only the writes
    """

    def __init__(
        self,
        repository: BookRepository,
        *,
        console: Console | None = None,
        catalog: tuple[QueryStep, ...] = QUERY_CATALOG,
    ) -> None:
        self.repository = repository
        self.console = console or Console()
        self.catalog = catalog

    async def run(self, numbers: list[int] | tuple[int, ...] | None = None) -> list[StepResult]:
        """
        Run the selected steps (default: all) in catalog order.

        Raises:
            ValueError: If a requested step number does not exist
            StepFailedError: On the first failing step; later steps do not run
        """
        steps = select_steps(numbers, self.catalog)
        results: list[StepResult] = []

        for index, step in enumerate(steps):
            if index:
                self.console.print()
            self.console.print(f"[bold cyan]{step.number}) {escape(step.label)}:[/bold cyan]")

            log = logger.bind(step=step.number)
            log.debug("Running step", label=step.label)

            try:
                value = await step.action(self.repository)
            except Exception as e:
                raise StepFailedError(step, e) from e

            self.print_result(step, value)
            results.append(StepResult(step=step, value=value))
            log.debug("Step finished")

        return results

    def print_result(self, step: QueryStep, value: Any) -> None:
        """Print a step result as returned, without reshaping it."""
        if step.caption:
            self.console.print(step.caption, value)
        elif step.itemized and isinstance(value, dict):
            for caption, name in value.items():
                self.console.print(f"{caption}:", name)
        else:
            self.console.print(value)

        if step.summarize is not None:
            self.console.print(f"[dim]{escape(step.summarize(value))}[/dim]")


async def run_catalog(
    numbers: list[int] | tuple[int, ...] | None = None,
    *,
    settings: Settings | None = None,
    console: Console | None = None,
    error_console: Console | None = None,
    database: AsyncIOMotorDatabase | None = None,
) -> bool:
    """
    Connect, run the catalog, and always close the connection.

    Errors are logged with their traceback and printed to stderr; they do
    not propagate. ``Done.`` is printed on every path.

    Returns:
        True if every selected step succeeded
    """
    settings = settings or get_settings()
    console = console or Console()
    error_console = error_console or Console(stderr=True)

    try:
        db = database if database is not None else await get_database(settings)
        repository = BookRepository(db, settings.mongo.collection_name)
        await ScriptRunner(repository, console=console).run(numbers)
        return True
    except Exception as e:
        logger.exception("Query run aborted", error=str(e))
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        return False
    finally:
        await close_database()
        console.print("Done.")
