"""
The fixed, ordered catalog of bookstore queries.

Each step is independent: it takes the book repository, awaits one
operation and returns what should be printed. Steps 4 and 5 modify the
collection and step 13 creates indexes; every other step only reads.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from bookstore.models.analytics import ExplainSummary
from bookstore.repositories.book_repository import BookRepository

FICTION = "Fiction"
RECENT_YEAR = 2000
ORWELL = "George Orwell"
UPDATE_TITLE = "1984"
UPDATE_PRICE = 12.50
DELETE_TITLE = "Moby Dick"
IN_STOCK_AFTER_YEAR = 2010
FIRST_PAGE = 1
PAGE_SIZE = 5
EXPLAIN_TITLE = "The Hobbit"

StepAction = Callable[[BookRepository], Awaitable[Any]]


@dataclass(frozen=True)
class QueryStep:
    """One numbered entry of the catalog."""

    number: int
    label: str
    action: StepAction
    # Printed before the result, on the same line
    caption: str | None = None
    # Print a dict result one "key: value" line per item
    itemized: bool = False
    # Optional one-line digest printed after the result
    summarize: Callable[[Any], str] | None = None


async def _fiction_books(repo: BookRepository) -> Any:
    return await repo.find_by_genre(FICTION)


async def _recent_books(repo: BookRepository) -> Any:
    return await repo.find_published_after(RECENT_YEAR)


async def _orwell_books(repo: BookRepository) -> Any:
    return await repo.find_by_author(ORWELL)


async def _update_price(repo: BookRepository) -> Any:
    return await repo.set_price(UPDATE_TITLE, UPDATE_PRICE)


async def _delete_book(repo: BookRepository) -> Any:
    return await repo.delete_by_title(DELETE_TITLE)


async def _recent_in_stock(repo: BookRepository) -> Any:
    return await repo.find_in_stock_published_after(IN_STOCK_AFTER_YEAR)


async def _price_ascending(repo: BookRepository) -> Any:
    return await repo.list_by_price()


async def _price_descending(repo: BookRepository) -> Any:
    return await repo.list_by_price(descending=True)


async def _first_page(repo: BookRepository) -> Any:
    return await repo.paginate(FIRST_PAGE, PAGE_SIZE)


async def _avg_price_by_genre(repo: BookRepository) -> Any:
    return await repo.average_price_by_genre()


async def _top_author(repo: BookRepository) -> Any:
    return await repo.top_authors(limit=1)


async def _books_per_decade(repo: BookRepository) -> Any:
    return await repo.count_by_decade()


async def _create_indexes(repo: BookRepository) -> Any:
    return {
        "index title": await repo.create_title_index(),
        "index author+published_year": await repo.create_author_year_index(),
    }


async def _explain_title(repo: BookRepository) -> Any:
    return await repo.explain_title_lookup(EXPLAIN_TITLE)


def _describe_explain(explain: dict[str, Any]) -> str:
    return ExplainSummary.from_explain(explain).describe()


QUERY_CATALOG: tuple[QueryStep, ...] = (
    QueryStep(1, 'Find all books in genre "Fiction" (projection)', _fiction_books),
    QueryStep(2, "Find books published after 2000 (projection)", _recent_books),
    QueryStep(3, 'Find books by author "George Orwell"', _orwell_books),
    QueryStep(4, 'Update price of "1984" to 12.50', _update_price, caption="Updated:"),
    QueryStep(5, 'Delete book by title "Moby Dick"', _delete_book, caption="Exists now?"),
    QueryStep(
        6, "Find books in stock and published after 2010 (projection)", _recent_in_stock
    ),
    QueryStep(7, "Sort by price ascending", _price_ascending),
    QueryStep(8, "Sort by price descending", _price_descending),
    QueryStep(9, "Pagination (page 1, 5 per page)", _first_page),
    QueryStep(10, "Aggregation: average price by genre", _avg_price_by_genre),
    QueryStep(11, "Aggregation: author with most books", _top_author),
    QueryStep(12, "Aggregation: group by decade and count", _books_per_decade),
    QueryStep(
        13,
        "Create indexes (title, compound author+published_year)",
        _create_indexes,
        itemized=True,
    ),
    QueryStep(
        14,
        "Explain plan for a title search (executionStats)",
        _explain_title,
        summarize=_describe_explain,
    ),
)


def select_steps(
    numbers: list[int] | tuple[int, ...] | None = None,
    catalog: tuple[QueryStep, ...] = QUERY_CATALOG,
) -> list[QueryStep]:
    """
    Pick steps by number, keeping catalog order.

    Raises:
        ValueError: If a number is not in the catalog
    """
    if not numbers:
        return list(catalog)

    known = {step.number for step in catalog}
    unknown = sorted(set(numbers) - known)
    if unknown:
        raise ValueError(f"Unknown step number(s): {', '.join(map(str, unknown))}")

    wanted = set(numbers)
    return [step for step in catalog if step.number in wanted]
