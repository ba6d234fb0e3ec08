"""
Access boundary for the Library Catalog.

Every catalog operation is gated by the caller's role before it reaches a
repository. The rules live in one declarative table, ``ACCESS_POLICY``, that
maps each operation to the roles allowed to perform it:

| Operation class                          | Admin | Member | Anonymous |
|------------------------------------------|-------|--------|-----------|
| List / view / filter / report            | yes   | yes    | no        |
| Member search                            | yes   | yes    | no        |
| Book search (public lookup)              | yes   | yes    | yes       |
| Create / edit / delete                   | yes   | no     | no        |

Book search is the only anonymous operation. It backs the public lookup
surface; member search is not part of that surface and stays authenticated.

The role itself is resolved by an external auth provider and handed in on
every call.
"""

import enum
import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from .database.book_repository import BookRepository
from .database.member_repository import MemberRepository
from .exceptions import UnauthorizedError
from .models.book import Book
from .models.member import Member
from .queries import CatalogQueries
from .reports import LibraryReport, ReportingAggregator

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    """Roles a caller can hold."""

    ADMIN = "Admin"
    MEMBER = "Member"
    ANONYMOUS = "Anonymous"

    @classmethod
    def parse(cls, value: "Role | str | None") -> "Role":
        """
        Resolve a role token; a missing token means an anonymous caller.

        Raises:
            ValueError: If the token names no known role
        """
        if value is None:
            return cls.ANONYMOUS
        if isinstance(value, cls):
            return value
        for role in cls:
            if role.value.lower() == value.strip().lower():
                return role
        raise ValueError(f"Unknown role: {value!r}")


class Operation(str, enum.Enum):
    """Operations exposed through the boundary."""

    LIST_BOOKS = "list_books"
    VIEW_BOOK = "view_book"
    SEARCH_BOOKS = "search_books"
    FILTER_BOOKS = "filter_books"
    CREATE_BOOK = "create_book"
    EDIT_BOOK = "edit_book"
    DELETE_BOOK = "delete_book"

    LIST_MEMBERS = "list_members"
    VIEW_MEMBER = "view_member"
    SEARCH_MEMBERS = "search_members"
    FILTER_MEMBERS = "filter_members"
    CREATE_MEMBER = "create_member"
    EDIT_MEMBER = "edit_member"
    DELETE_MEMBER = "delete_member"

    VIEW_REPORTS = "view_reports"


AUTHENTICATED = frozenset({Role.ADMIN, Role.MEMBER})
ADMIN_ONLY = frozenset({Role.ADMIN})
EVERYONE = frozenset(Role)

ACCESS_POLICY: dict[Operation, frozenset[Role]] = {
    Operation.LIST_BOOKS: AUTHENTICATED,
    Operation.VIEW_BOOK: AUTHENTICATED,
    Operation.SEARCH_BOOKS: EVERYONE,
    Operation.FILTER_BOOKS: AUTHENTICATED,
    Operation.CREATE_BOOK: ADMIN_ONLY,
    Operation.EDIT_BOOK: ADMIN_ONLY,
    Operation.DELETE_BOOK: ADMIN_ONLY,
    Operation.LIST_MEMBERS: AUTHENTICATED,
    Operation.VIEW_MEMBER: AUTHENTICATED,
    Operation.SEARCH_MEMBERS: AUTHENTICATED,
    Operation.FILTER_MEMBERS: AUTHENTICATED,
    Operation.CREATE_MEMBER: ADMIN_ONLY,
    Operation.EDIT_MEMBER: ADMIN_ONLY,
    Operation.DELETE_MEMBER: ADMIN_ONLY,
    Operation.VIEW_REPORTS: AUTHENTICATED,
}


def is_permitted(role: Role | str | None, operation: Operation) -> bool:
    """Check the policy table; unknown operations are denied."""
    return Role.parse(role) in ACCESS_POLICY.get(operation, frozenset())


def authorize(role: Role | str | None, operation: Operation) -> Role:
    """
    Enforce the policy for one operation.

    Returns:
        The resolved role

    Raises:
        UnauthorizedError: If the role may not perform the operation
    """
    resolved = Role.parse(role)
    if not is_permitted(resolved, operation):
        logger.warning("Denied %s to role %s", operation.value, resolved.value)
        raise UnauthorizedError(f"Role {resolved.value} may not {operation.value}")
    return resolved


class AccessBoundary:
    """
    Role-checked entry point to the catalog.

    Each method authorizes first and only then touches the store, so a denied
    call has no side effects and performs no reads.
    """

    def __init__(self, session: Session):
        self.books = BookRepository(session)
        self.members = MemberRepository(session)
        self.queries = CatalogQueries(self.books, self.members)
        self.reports = ReportingAggregator(session)

    # === Books ===

    def list_books(self, role: Role | str | None) -> list[Book]:
        authorize(role, Operation.LIST_BOOKS)
        return self.books.get_all()

    def get_book(self, role: Role | str | None, book_id: int) -> Book | None:
        authorize(role, Operation.VIEW_BOOK)
        return self.books.get_by_id(book_id)

    def search_books(self, role: Role | str | None, term: str | None = None) -> list[Book]:
        authorize(role, Operation.SEARCH_BOOKS)
        return self.queries.search_books(term)

    def search_books_json(
        self, role: Role | str | None, term: str | None = None
    ) -> list[dict[str, Any]]:
        authorize(role, Operation.SEARCH_BOOKS)
        return self.queries.search_books_json(term)

    def books_published_since(self, role: Role | str | None, min_year: int) -> list[Book]:
        authorize(role, Operation.FILTER_BOOKS)
        return self.queries.books_published_since(min_year)

    def create_book(self, role: Role | str | None, book: Book) -> Book:
        authorize(role, Operation.CREATE_BOOK)
        return self.books.add(book)

    def update_book(self, role: Role | str | None, book: Book) -> Book:
        authorize(role, Operation.EDIT_BOOK)
        return self.books.update(book)

    def delete_book(self, role: Role | str | None, book_id: int) -> bool:
        authorize(role, Operation.DELETE_BOOK)
        return self.books.delete(book_id)

    # === Members ===

    def list_members(self, role: Role | str | None) -> list[Member]:
        authorize(role, Operation.LIST_MEMBERS)
        return self.members.get_all()

    def get_member(self, role: Role | str | None, member_id: int) -> Member | None:
        authorize(role, Operation.VIEW_MEMBER)
        return self.members.get_by_id(member_id)

    def search_members(self, role: Role | str | None, term: str | None = None) -> list[Member]:
        authorize(role, Operation.SEARCH_MEMBERS)
        return self.queries.search_members(term)

    def search_members_json(
        self, role: Role | str | None, term: str | None = None
    ) -> list[dict[str, Any]]:
        authorize(role, Operation.SEARCH_MEMBERS)
        return self.queries.search_members_json(term)

    def members_joined_since(self, role: Role | str | None, min_date: datetime) -> list[Member]:
        authorize(role, Operation.FILTER_MEMBERS)
        return self.queries.members_joined_since(min_date)

    def members_joined_within(
        self, role: Role | str | None, days: int, now: datetime | None = None
    ) -> list[Member]:
        authorize(role, Operation.FILTER_MEMBERS)
        return self.queries.members_joined_within(days, now=now)

    def create_member(self, role: Role | str | None, member: Member) -> Member:
        authorize(role, Operation.CREATE_MEMBER)
        return self.members.add(member)

    def update_member(self, role: Role | str | None, member: Member) -> Member:
        authorize(role, Operation.EDIT_MEMBER)
        return self.members.update(member)

    def delete_member(self, role: Role | str | None, member_id: int) -> bool:
        authorize(role, Operation.DELETE_MEMBER)
        return self.members.delete(member_id)

    # === Reports ===

    def count_books(self, role: Role | str | None) -> int:
        authorize(role, Operation.VIEW_REPORTS)
        return self.reports.count_books()

    def count_members(self, role: Role | str | None) -> int:
        authorize(role, Operation.VIEW_REPORTS)
        return self.reports.count_members()

    def most_recent_member(self, role: Role | str | None) -> Member | None:
        authorize(role, Operation.VIEW_REPORTS)
        return self.reports.most_recent_member()

    def report(self, role: Role | str | None) -> LibraryReport:
        authorize(role, Operation.VIEW_REPORTS)
        return self.reports.summary()
