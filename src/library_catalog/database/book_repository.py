"""
Book repository implementation for the Library Catalog.

Adds the book-specific query used by the year filter on top of the base CRUD
contract. Queries are expressed in SQL and return Pydantic ``Book`` models.
"""

from sqlalchemy import select

from ..database.schema import Book as BookDB
from ..models.book import Book as BookModel
from .repository import BaseRepository


class BookRepository(BaseRepository[BookDB, BookModel]):
    """Repository for book data access."""

    @property
    def model_class(self):
        return BookDB

    @property
    def response_schema(self):
        return BookModel

    def published_since(self, min_year: int) -> list[BookModel]:
        """
        Get books published in ``min_year`` or later.

        Books without a published year are never returned.

        Args:
            min_year: Inclusive lower bound on the published year

        Returns:
            Matching books ordered by year, then id
        """
        query = (
            select(BookDB)
            .where(BookDB.published_year.is_not(None))
            .where(BookDB.published_year >= min_year)
            .order_by(BookDB.published_year.asc(), BookDB.id.asc())
        )
        return self._select_all(query)
