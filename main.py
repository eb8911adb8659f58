"""
Bookstore Query Runner - Main Entry Point

Connects to MongoDB, runs the fourteen catalog steps against the books
collection in order, prints each result, and disconnects.
"""

import asyncio
import sys

from rich.console import Console
from rich.panel import Panel

from bookstore.config.logging import configure_logging
from bookstore.config.settings import get_settings
from bookstore.services.runner import run_catalog

console = Console()


async def main() -> None:
    """Main entry point."""
    settings = get_settings()
    configure_logging(settings.app.log_level)

    console.print(
        Panel.fit(
            f"[bold blue]{settings.app.name}[/bold blue]\n"
            f"{settings.mongo.db_name}.{settings.mongo.collection_name}",
            border_style="blue",
        )
    )

    try:
        ok = await run_catalog(settings=settings, console=console)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
