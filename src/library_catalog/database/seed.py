"""
Bootstrap seeding for the Library Catalog store.

Seeding is a set of ensure-present operations, each idempotent on its own and
safe to re-run against a populated store:

1. ``ensure_role`` - the ``Admin`` and ``Member`` roles exist
2. ``ensure_user`` - one bootstrap user per role exists
3. ``ensure_sample_book`` - the catalog holds at least one book

This is an initialization check, not a migration system.
"""

import logging
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..access import Role
from ..config import CatalogConfig
from ..models.book import Book as BookModel
from .book_repository import BookRepository
from .schema import Book as BookDB
from .schema import Role as RoleDB
from .schema import UserAccount
from .session import store_safe_commit, store_safe_query

logger = logging.getLogger(__name__)

# Roles the store must know about; Anonymous is the absence of a role
STORE_ROLES = (Role.ADMIN, Role.MEMBER)

SAMPLE_BOOK = BookModel(
    title="Test Book",
    author="Test Author",
    published_year=2023,
    price=Decimal("29.99"),
    genre="Fiction",
)


class SeedReport(BaseModel):
    """What a seeding run actually created."""

    roles_created: list[str] = []
    users_created: list[str] = []
    sample_book_created: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.roles_created or self.users_created or self.sample_book_created)


def ensure_role(session: Session, role: Role) -> bool:
    """
    Ensure a role row exists.

    Returns:
        True if the role was created, False if it was already present
    """
    existing = store_safe_query(
        session,
        lambda s: s.execute(select(RoleDB).where(RoleDB.name == role.value)).scalar_one_or_none(),
        "Failed to look up role",
    )
    if existing is not None:
        return False

    session.add(RoleDB(name=role.value))
    store_safe_commit(session, f"create role {role.value}")
    logger.info("Created role %s", role.value)
    return True


def ensure_user(session: Session, email: str, role: Role) -> bool:
    """
    Ensure a bootstrap user bound to ``role`` exists.

    An existing user with this email is left untouched, whatever its role.

    Returns:
        True if the user was created, False if it was already present
    """
    existing = store_safe_query(
        session,
        lambda s: s.execute(
            select(UserAccount).where(UserAccount.email == email)
        ).scalar_one_or_none(),
        "Failed to look up user",
    )
    if existing is not None:
        return False

    ensure_role(session, role)
    role_row = store_safe_query(
        session,
        lambda s: s.execute(select(RoleDB).where(RoleDB.name == role.value)).scalar_one(),
        "Failed to load role",
    )

    session.add(UserAccount(email=email, role_id=role_row.id))
    store_safe_commit(session, f"create user {email}")
    logger.info("Created bootstrap %s user %s", role.value, email)
    return True


def ensure_sample_book(session: Session, book: BookModel = SAMPLE_BOOK) -> bool:
    """
    Ensure the catalog holds at least one book.

    Returns:
        True if the sample book was added, False if any book already existed
    """
    count = store_safe_query(
        session,
        lambda s: s.execute(select(func.count()).select_from(BookDB)).scalar(),
        "Failed to count books",
    )
    if count:
        return False

    BookRepository(session).add(book)
    return True


def seed_database(session: Session, config: CatalogConfig) -> SeedReport:
    """
    Run every ensure-present step against the store.

    Args:
        session: Database session
        config: Supplies the bootstrap user identities

    Returns:
        Report of what was created
    """
    report = SeedReport()

    for role in STORE_ROLES:
        if ensure_role(session, role):
            report.roles_created.append(role.value)

    bootstrap_users = (
        (config.bootstrap_admin_email, Role.ADMIN),
        (config.bootstrap_member_email, Role.MEMBER),
    )
    for email, role in bootstrap_users:
        if ensure_user(session, email, role):
            report.users_created.append(email)

    report.sample_book_created = ensure_sample_book(session)

    if report.changed:
        logger.info(
            "Seeded store: roles=%s users=%s sample_book=%s",
            report.roles_created,
            report.users_created,
            report.sample_book_created,
        )
    else:
        logger.debug("Store already seeded")

    return report
