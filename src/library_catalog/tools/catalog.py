"""
Catalog tools for the Library Catalog MCP server.

Tools are the operations a client invokes by name with JSON arguments:

1. Search - ``search_books`` (public) and ``search_members``
2. Filters - ``books_published_since`` and ``members_joined_within``
3. Writes - create, update and delete for books and members

Every handler opens its own short-lived session from the ``DatabaseManager``
it was built with and goes through the ``AccessBoundary`` using the role the
client was resolved to. Catalog errors become ``ToolError``s; store failures
are logged here and reported to the client only as a generic message.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, TypeVar

from fastmcp.exceptions import ToolError
from pydantic import ValidationError

from ..access import AccessBoundary, Role
from ..database.session import DatabaseManager
from ..exceptions import (
    ConstraintViolationError,
    LibraryCatalogError,
    NotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
)
from ..models.book import Book
from ..models.member import Member

logger = logging.getLogger(__name__)

T = TypeVar("T")

STORE_FAILURE_MESSAGE = "The library is temporarily unavailable. Please try again later."


@contextmanager
def tool_errors(action: str) -> Iterator[None]:
    """Translate catalog exceptions raised while performing ``action``."""
    try:
        yield
    except UnauthorizedError as e:
        raise ToolError(f"Unauthorized: {e}") from e
    except (NotFoundError, ConstraintViolationError) as e:
        raise ToolError(str(e)) from e
    except ValidationError as e:
        logger.info("Invalid input for %s: %s", action, e)
        raise ToolError(f"Invalid input for {action}: {e}") from e
    except StoreUnavailableError as e:
        logger.exception("Store unavailable during %s", action)
        raise ToolError(STORE_FAILURE_MESSAGE) from e
    except LibraryCatalogError as e:
        logger.exception("Catalog error during %s", action)
        raise ToolError(f"Failed to {action}") from e


def build_catalog_tools(db: DatabaseManager, role: Role | str | None) -> list[dict[str, Any]]:
    """
    Build the catalog tool definitions bound to one store and one role.

    Args:
        db: Store handle owned by the composition root
        role: Role of the connected client

    Returns:
        Tool definitions with ``name``, ``description`` and ``handler``
    """
    client_role = Role.parse(role)

    def run(action: str, operation: Callable[[AccessBoundary], T]) -> T:
        with tool_errors(action), db.session_scope() as session:
            return operation(AccessBoundary(session))

    async def search_books(search_term: str | None = None) -> list[dict[str, Any]]:
        """Public catalog lookup by title or author."""
        logger.debug("Tool search_books: term=%r role=%s", search_term, client_role.value)
        return run("search books", lambda b: b.search_books_json(client_role, search_term))

    async def search_members(search_term: str | None = None) -> list[dict[str, Any]]:
        logger.debug("Tool search_members: term=%r role=%s", search_term, client_role.value)
        return run("search members", lambda b: b.search_members_json(client_role, search_term))

    async def books_published_since(min_year: int) -> list[dict[str, Any]]:
        books = run(
            "filter books", lambda b: b.books_published_since(client_role, min_year)
        )
        return [book.model_dump(mode="json") for book in books]

    async def members_joined_within(days: int) -> list[dict[str, Any]]:
        def operation(boundary: AccessBoundary) -> list[Member]:
            try:
                return boundary.members_joined_within(client_role, days)
            except ValueError as e:
                raise ToolError(str(e)) from e

        members = run("filter members", operation)
        return [member.model_dump(mode="json") for member in members]

    async def create_book(
        title: str,
        author: str,
        price: float,
        published_year: int | None = None,
        genre: str | None = None,
    ) -> dict[str, Any]:
        def operation(boundary: AccessBoundary) -> Book:
            book = Book(
                title=title,
                author=author,
                price=price,
                published_year=published_year,
                genre=genre,
            )
            return boundary.create_book(client_role, book)

        created = run("create book", operation)
        logger.info("Book created: %s (%s)", created.title, created.id)
        return created.model_dump(mode="json")

    async def update_book(
        book_id: int,
        title: str,
        author: str,
        price: float,
        published_year: int | None = None,
        genre: str | None = None,
    ) -> dict[str, Any]:
        def operation(boundary: AccessBoundary) -> Book:
            book = Book(
                id=book_id,
                title=title,
                author=author,
                price=price,
                published_year=published_year,
                genre=genre,
            )
            return boundary.update_book(client_role, book)

        return run("update book", operation).model_dump(mode="json")

    async def delete_book(book_id: int) -> dict[str, Any]:
        deleted = run("delete book", lambda b: b.delete_book(client_role, book_id))
        return {"book_id": book_id, "deleted": deleted}

    async def create_member(
        full_name: str,
        email: str,
        join_date: datetime | None = None,
    ) -> dict[str, Any]:
        def operation(boundary: AccessBoundary) -> Member:
            fields: dict[str, Any] = {"full_name": full_name, "email": email}
            if join_date is not None:
                fields["join_date"] = join_date
            return boundary.create_member(client_role, Member(**fields))

        created = run("create member", operation)
        logger.info("Member created: %s (%s)", created.full_name, created.id)
        return created.model_dump(mode="json")

    async def update_member(
        member_id: int,
        full_name: str,
        email: str,
        join_date: datetime,
    ) -> dict[str, Any]:
        def operation(boundary: AccessBoundary) -> Member:
            member = Member(id=member_id, full_name=full_name, email=email, join_date=join_date)
            return boundary.update_member(client_role, member)

        return run("update member", operation).model_dump(mode="json")

    async def delete_member(member_id: int) -> dict[str, Any]:
        deleted = run("delete member", lambda b: b.delete_member(client_role, member_id))
        return {"member_id": member_id, "deleted": deleted}

    return [
        {
            "name": "search_books",
            "description": (
                "Search the catalog by title or author (case-insensitive substring). "
                "An empty term returns every book. Available without signing in."
            ),
            "handler": search_books,
        },
        {
            "name": "search_members",
            "description": "Search members by full name or email (case-insensitive substring).",
            "handler": search_members,
        },
        {
            "name": "books_published_since",
            "description": "List books published in the given year or later.",
            "handler": books_published_since,
        },
        {
            "name": "members_joined_within",
            "description": "List members who joined during the last N days.",
            "handler": members_joined_within,
        },
        {
            "name": "create_book",
            "description": "Add a book to the catalog (Admin only).",
            "handler": create_book,
        },
        {
            "name": "update_book",
            "description": "Replace every field of an existing book (Admin only).",
            "handler": update_book,
        },
        {
            "name": "delete_book",
            "description": "Remove a book; removing a missing book is a no-op (Admin only).",
            "handler": delete_book,
        },
        {
            "name": "create_member",
            "description": "Register a member; emails must be unique (Admin only).",
            "handler": create_member,
        },
        {
            "name": "update_member",
            "description": "Replace every field of an existing member (Admin only).",
            "handler": update_member,
        },
        {
            "name": "delete_member",
            "description": "Remove a member; removing a missing member is a no-op (Admin only).",
            "handler": delete_member,
        },
    ]
