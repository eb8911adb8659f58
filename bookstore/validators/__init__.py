"""
Field validators shared by the Pydantic models.
"""

from bookstore.validators.fields import validate_published_year

__all__ = ["validate_published_year"]
