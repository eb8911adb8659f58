"""
CLI commands for the bookstore query runner.

Provides command-line access to the query catalog, sample data,
index management and query plan inspection.
"""

import asyncio
from functools import wraps
from typing import Callable

import click
from pymongo.errors import PyMongoError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bookstore import __version__
from bookstore.config.logging import configure_logging
from bookstore.config.settings import get_settings
from bookstore.db.connection import close_database, get_books_collection, get_database
from bookstore.db.indexes import describe_indexes, drop_indexes, ensure_indexes
from bookstore.db.seed import seed_books
from bookstore.models.analytics import ExplainSummary
from bookstore.repositories.book_repository import BookRepository
from bookstore.services.query_catalog import EXPLAIN_TITLE, QUERY_CATALOG
from bookstore.services.runner import run_catalog

console = Console()
error_console = Console(stderr=True)


def async_command(f: Callable) -> Callable:
    """Decorator to run async functions in Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def handle_errors(f: Callable) -> Callable:
    """Decorator to report database errors and always release the connection."""

    @wraps(f)
    async def wrapper(*args, **kwargs):
        try:
            return await f(*args, **kwargs)
        except (PyMongoError, ValueError) as e:
            error_console.print(f"[red]Error:[/red] {e}")
            raise click.exceptions.Exit(1) from e
        finally:
            await close_database()

    return wrapper


async def _repository() -> BookRepository:
    db = await get_database()
    return BookRepository(db, get_settings().mongo.collection_name)


# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="bookstore")
def cli():
    """Bookstore Query Runner - CLI Interface.

    Run the books query catalog, seed sample data and manage indexes.
    """
    configure_logging(get_settings().app.log_level)


# =============================================================================
# Query Commands
# =============================================================================


@cli.command("run")
@click.option(
    "--step",
    "-s",
    "steps",
    multiple=True,
    type=click.IntRange(1, len(QUERY_CATALOG)),
    help="Run only this step (repeatable). Default: all steps.",
)
@async_command
async def run(steps: tuple[int, ...]):
    """Run the query catalog in order, stopping at the first failure."""
    ok = await run_catalog(list(steps) or None, console=console, error_console=error_console)
    if not ok:
        raise click.exceptions.Exit(1)


@cli.command("steps")
def list_steps():
    """List the catalog steps."""
    table = Table(title="Query Catalog", box=box.ROUNDED)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Step")

    for step in QUERY_CATALOG:
        table.add_row(str(step.number), step.label)

    console.print(table)


@cli.command("page")
@click.option("--page", "-p", default=1, type=int, help="Page number (1-based)")
@click.option("--per-page", "-n", default=None, type=int, help="Books per page")
@async_command
@handle_errors
async def page(page: int, per_page: int | None):
    """Show one page of book titles."""
    per_page = per_page or get_settings().app.page_size
    repo = await _repository()

    titles = await repo.paginate(page, per_page)

    table = Table(title=f"Books (page {page}, {per_page} per page)", box=box.ROUNDED)
    table.add_column("Title", style="cyan")
    for doc in titles:
        table.add_row(doc.get("title", ""))

    console.print(table)


@cli.command("explain")
@click.option("--title", "-t", default=EXPLAIN_TITLE, show_default=True, help="Title to look up")
@click.option("--raw", is_flag=True, help="Print the full explain document")
@async_command
@handle_errors
async def explain(title: str, raw: bool):
    """Show the query plan for a title lookup."""
    repo = await _repository()
    plan = await repo.explain_title_lookup(title)

    if raw:
        console.print(plan)

    summary = ExplainSummary.from_explain(plan)
    style = "green" if summary.uses_index else "yellow"
    console.print(
        Panel(
            f"Namespace: {summary.namespace}\n"
            f"Stages: {' <- '.join(summary.stages) or 'unknown'}\n"
            f"Index: {', '.join(summary.index_names) or 'none'}\n"
            f"Returned: {summary.n_returned}\n"
            f"Keys examined: {summary.total_keys_examined}\n"
            f"Docs examined: {summary.total_docs_examined}\n"
            f"Time: {summary.execution_time_ms} ms",
            title=f"Plan for title = {title!r}",
            border_style=style,
        )
    )


# =============================================================================
# Data Commands
# =============================================================================


@cli.command("seed")
@click.option("--drop", is_flag=True, help="Delete existing books first")
@async_command
@handle_errors
async def seed(drop: bool):
    """Insert the sample books."""
    collection = await get_books_collection()
    inserted = await seed_books(collection, drop=drop)
    console.print(f"[green]Inserted {inserted} books into {collection.name}.[/green]")


@cli.command("indexes")
@click.option("--drop", is_flag=True, help="Drop the managed indexes instead")
@async_command
@handle_errors
async def indexes(drop: bool):
    """Create (or drop) the books indexes and list what exists."""
    settings = get_settings()
    db = await get_database()
    collection = db[settings.mongo.collection_name]

    if drop:
        dropped = await drop_indexes(collection)
        for name, was_dropped in dropped.items():
            mark = "[green]dropped[/green]" if was_dropped else "[dim]absent[/dim]"
            console.print(f"  {name}: {mark}")
    else:
        await ensure_indexes(db, settings.mongo.collection_name)

    info = await describe_indexes(collection)

    table = Table(title=f"Indexes on {collection.name}", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("Key", style="green")

    for name, spec in info.items():
        key = ", ".join(f"{field} {direction}" for field, direction in spec["key"])
        table.add_row(name, key)

    console.print(table)


# =============================================================================
# Database Commands
# =============================================================================


@cli.group()
def db():
    """Database management commands."""
    pass


@db.command("status")
@async_command
@handle_errors
async def db_status():
    """Check database connection status."""
    from bookstore.db.connection import get_connection

    conn = await get_connection()
    await conn.connect()

    health = await conn.health_check()

    if health["healthy"]:
        console.print(
            Panel(
                f"[green]Connected[/green]\n"
                f"Server: MongoDB {health.get('server_version', 'unknown')}\n"
                f"Latency: {health.get('latency_ms', 'N/A')} ms",
                title="Database Status",
                border_style="green",
            )
        )
    else:
        console.print(
            Panel(
                f"[red]Disconnected[/red]\nError: {health.get('error', 'Unknown')}",
                title="Database Status",
                border_style="red",
            )
        )


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    cli()
