"""
Database package for the Library Catalog.

This package provides:
- SQLAlchemy schema definitions (schema.py)
- Session management and connection handling (session.py)
- The generic repository and one repository per entity
- Idempotent bootstrap seeding (seed.py, imported directly)
"""

from ..exceptions import (
    ConstraintViolationError,
    LibraryCatalogError,
    NotFoundError,
    StoreUnavailableError,
)
from .book_repository import BookRepository
from .member_repository import MemberRepository
from .repository import BaseRepository
from .schema import Base, Book, Member, Role, UserAccount
from .session import DatabaseManager, store_safe_commit, store_safe_query

__all__ = [
    "Base",
    "BaseRepository",
    "Book",
    "BookRepository",
    "ConstraintViolationError",
    "DatabaseManager",
    "LibraryCatalogError",
    "Member",
    "MemberRepository",
    "NotFoundError",
    "Role",
    "StoreUnavailableError",
    "UserAccount",
    "store_safe_commit",
    "store_safe_query",
]
