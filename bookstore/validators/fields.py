"""
Field validators for book documents.

Applied on insert only; documents already stored are never re-validated.
"""

# Four-digit years only
MAX_PUBLISHED_YEAR = 9999


def validate_published_year(value: int) -> int:
    """
    Validate a publication year.

    Any year up to MAX_PUBLISHED_YEAR is accepted, including years before
    the common era written as negative numbers.
    """
    if value > MAX_PUBLISHED_YEAR:
        raise ValueError("Published year must have at most four digits")
    return value
