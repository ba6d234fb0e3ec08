"""Catalog Resources - Read-only Catalog and Report Access

Exposes catalog data and summary statistics via read-only resources.

Resources:
- library://books/list - Every book in the catalog
- library://books/{book_id} - Individual book by id
- library://members/list - Every registered member
- library://members/{member_id} - Individual member by id
- library://reports/summary - Book/member counts and the most recent member
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastmcp.exceptions import ResourceError

from ..access import AccessBoundary, Role
from ..database.session import DatabaseManager
from ..exceptions import LibraryCatalogError, StoreUnavailableError, UnauthorizedError

logger = logging.getLogger(__name__)


@contextmanager
def resource_errors(uri: str) -> Iterator[None]:
    """Translate catalog exceptions raised while reading ``uri``."""
    try:
        yield
    except UnauthorizedError as e:
        raise ResourceError(f"Unauthorized: {e}") from e
    except StoreUnavailableError as e:
        logger.exception("Store unavailable while reading %s", uri)
        raise ResourceError("The library is temporarily unavailable") from e
    except LibraryCatalogError as e:
        logger.exception("Error in %s resource", uri)
        raise ResourceError(f"Failed to read {uri}") from e


def _parse_id(value: str, kind: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ResourceError(f"Invalid {kind} id: {value}") from e


def build_catalog_resources(
    db: DatabaseManager, role: Role | str | None
) -> list[dict[str, Any]]:
    """
    Build the catalog resource definitions bound to one store and one role.

    Args:
        db: Store handle owned by the composition root
        role: Role of the connected client

    Returns:
        Resource definitions with ``uri``, ``name``, ``description``,
        ``mime_type`` and ``handler``
    """
    client_role = Role.parse(role)

    async def list_books_handler() -> dict[str, Any]:
        logger.debug("Resource request - books/list")
        with resource_errors("library://books/list"), db.session_scope() as session:
            books = AccessBoundary(session).list_books(client_role)
            return {
                "books": [book.model_dump(mode="json") for book in books],
                "total": len(books),
            }

    async def get_book_handler(book_id: str) -> dict[str, Any]:
        logger.debug("Resource request - books/%s", book_id)
        book_key = _parse_id(book_id, "book")
        with resource_errors(f"library://books/{book_id}"), db.session_scope() as session:
            book = AccessBoundary(session).get_book(client_role, book_key)
        if book is None:
            raise ResourceError(f"Book not found: {book_id}")
        return book.model_dump(mode="json")

    async def list_members_handler() -> dict[str, Any]:
        logger.debug("Resource request - members/list")
        with resource_errors("library://members/list"), db.session_scope() as session:
            members = AccessBoundary(session).list_members(client_role)
            return {
                "members": [member.model_dump(mode="json") for member in members],
                "total": len(members),
            }

    async def get_member_handler(member_id: str) -> dict[str, Any]:
        logger.debug("Resource request - members/%s", member_id)
        member_key = _parse_id(member_id, "member")
        with resource_errors(f"library://members/{member_id}"), db.session_scope() as session:
            member = AccessBoundary(session).get_member(client_role, member_key)
        if member is None:
            raise ResourceError(f"Member not found: {member_id}")
        return member.model_dump(mode="json")

    async def report_summary_handler() -> dict[str, Any]:
        logger.debug("Resource request - reports/summary")
        with resource_errors("library://reports/summary"), db.session_scope() as session:
            return AccessBoundary(session).report(client_role).model_dump(mode="json")

    return [
        {
            "uri": "library://books/list",
            "name": "Book Catalog",
            "description": "Every book in the library catalog",
            "mime_type": "application/json",
            "handler": list_books_handler,
        },
        {
            "uri": "library://books/{book_id}",
            "name": "Book Details",
            "description": "A single book by id",
            "mime_type": "application/json",
            "handler": get_book_handler,
        },
        {
            "uri": "library://members/list",
            "name": "Member Directory",
            "description": "Every registered library member",
            "mime_type": "application/json",
            "handler": list_members_handler,
        },
        {
            "uri": "library://members/{member_id}",
            "name": "Member Details",
            "description": "A single member by id",
            "mime_type": "application/json",
            "handler": get_member_handler,
        },
        {
            "uri": "library://reports/summary",
            "name": "Library Summary",
            "description": "Total books, total members and the most recently joined member",
            "mime_type": "application/json",
            "handler": report_summary_handler,
        },
    ]
