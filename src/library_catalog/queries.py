"""
Query and filter layer for the Library Catalog.

Derives read-only views over the book and member extents:

1. Text search - case-insensitive substring match across designated fields
2. Threshold filters - books by published year, members by join date
3. JSON projections - the compact shapes consumed by external client code

Text search runs over a snapshot of the full extent taken through the
repository, so the match semantics are Python's Unicode ``casefold`` rather
than whatever collation the store happens to use.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from typing import Any, TypeVar

from .database.book_repository import BookRepository
from .database.member_repository import MemberRepository
from .models.book import Book
from .models.member import Member

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fields searched by text queries; matching is OR across them
BOOK_SEARCH_FIELDS: tuple[str, ...] = ("title", "author")
MEMBER_SEARCH_FIELDS: tuple[str, ...] = ("full_name", "email")


def normalize_term(term: str | None) -> str | None:
    """
    Return the search needle, or None when the term means "everything".

    Only a missing or empty term means everything; whitespace is matched
    literally like any other character.
    """
    if not term:
        return None
    return term.casefold()


def matches_text(record: Any, fields: Iterable[str], needle: str) -> bool:
    """
    Check whether any of ``fields`` contains ``needle``.

    ``needle`` must already be casefolded. Missing or empty values never
    match.
    """
    for field in fields:
        value = getattr(record, field, None)
        if value and needle in str(value).casefold():
            return True
    return False


def filter_by_text(records: list[T], fields: tuple[str, ...], term: str | None) -> list[T]:
    needle = normalize_term(term)
    if needle is None:
        return records
    return [record for record in records if matches_text(record, fields, needle)]


def project_book(book: Book) -> dict[str, Any]:
    """Compact JSON shape of a book for the public search surface."""
    return {
        "id": book.id,
        "title": book.title or "",
        "author": book.author or "",
        "publishedYear": book.published_year,
        "price": float(book.price),
        "genre": book.genre or "",
    }


def project_member(member: Member) -> dict[str, Any]:
    """Compact JSON shape of a member; ``joinDate`` is an ISO date string."""
    return {
        "id": member.id,
        "fullName": member.full_name,
        "email": member.email,
        "joinDate": member.join_date.date().isoformat(),
    }


class CatalogQueries:
    """
    Search and filter operations over the book and member repositories.

    Every method is a pure read; nothing here writes to the store.
    """

    def __init__(self, books: BookRepository, members: MemberRepository):
        self.books = books
        self.members = members

    def search_books(self, term: str | None = None) -> list[Book]:
        """
        Books whose title or author contains ``term``, ignoring case.

        An empty or missing term returns the whole catalog.
        """
        results = filter_by_text(self.books.get_all(), BOOK_SEARCH_FIELDS, term)
        logger.debug("Book search %r matched %d record(s)", term, len(results))
        return results

    def search_members(self, term: str | None = None) -> list[Member]:
        """
        Members whose full name or email contains ``term``, ignoring case.

        An empty or missing term returns every member.
        """
        results = filter_by_text(self.members.get_all(), MEMBER_SEARCH_FIELDS, term)
        logger.debug("Member search %r matched %d record(s)", term, len(results))
        return results

    def books_published_since(self, min_year: int) -> list[Book]:
        """Books with a known published year of at least ``min_year``."""
        return self.books.published_since(min_year)

    def members_joined_since(self, min_date: datetime) -> list[Member]:
        """Members who joined on or after ``min_date``."""
        return self.members.joined_since(min_date)

    def members_joined_within(self, days: int, now: datetime | None = None) -> list[Member]:
        """
        Members who joined during the last ``days`` days.

        Args:
            days: Window length; must not be negative
            now: Reference point, defaults to the current time

        Raises:
            ValueError: If ``days`` is negative
        """
        if days < 0:
            raise ValueError("days must be >= 0")
        cutoff = (now or datetime.now()) - timedelta(days=days)
        return self.members_joined_since(cutoff)

    def search_books_json(self, term: str | None = None) -> list[dict[str, Any]]:
        return _project(self.search_books(term), project_book)

    def search_members_json(self, term: str | None = None) -> list[dict[str, Any]]:
        return _project(self.search_members(term), project_member)


def _project(records: list[T], projector: Callable[[T], dict[str, Any]]) -> list[dict[str, Any]]:
    return [projector(record) for record in records]
