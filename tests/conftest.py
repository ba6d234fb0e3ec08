"""Test configuration and fixtures for the Library Catalog.

1. Isolated test databases - each test gets its own SQLite file
2. Configuration overrides - test-specific settings with a reset singleton
3. Repository and boundary fixtures built on the same session
4. Sample records for books and members
"""

from collections.abc import Generator
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from faker import Faker
from sqlalchemy.orm import Session

from library_catalog.access import AccessBoundary
from library_catalog.config import CatalogConfig, reset_config
from library_catalog.database import BookRepository, DatabaseManager, MemberRepository
from library_catalog.models import Book, Member
from library_catalog.queries import CatalogQueries
from library_catalog.reports import ReportingAggregator

# === Test Database Fixtures ===


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for each test."""
    return tmp_path / "test_library_catalog.db"


@pytest.fixture
def test_database_url(test_db_path: Path) -> str:
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db_manager(test_database_url: str) -> Generator[DatabaseManager, None, None]:
    """Provide a store handle with the schema created."""
    manager = DatabaseManager(test_database_url)
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def test_session(db_manager: DatabaseManager) -> Generator[Session, None, None]:
    session = db_manager.create_session()
    try:
        yield session
    finally:
        session.close()


# === Repository Fixtures ===


@pytest.fixture
def book_repo(test_session: Session) -> BookRepository:
    return BookRepository(test_session)


@pytest.fixture
def member_repo(test_session: Session) -> MemberRepository:
    return MemberRepository(test_session)


@pytest.fixture
def queries(book_repo: BookRepository, member_repo: MemberRepository) -> CatalogQueries:
    return CatalogQueries(book_repo, member_repo)


@pytest.fixture
def aggregator(test_session: Session) -> ReportingAggregator:
    return ReportingAggregator(test_session)


@pytest.fixture
def boundary(test_session: Session) -> AccessBoundary:
    return AccessBoundary(test_session)


# === Configuration Fixtures ===


@pytest.fixture
def test_config(test_db_path: Path) -> Generator[CatalogConfig, None, None]:
    """Provide a test-specific configuration."""
    reset_config()

    config = CatalogConfig(
        server_name="test-library-catalog",
        server_version="0.0.1-test",
        database_path=test_db_path,
        debug=True,
        log_level="DEBUG",
    )

    yield config

    reset_config()


# === Sample Data Fixtures ===


@pytest.fixture
def dune() -> Book:
    return Book(
        title="Dune",
        author="Herbert",
        published_year=1965,
        price=Decimal("15.00"),
    )


@pytest.fixture
def sample_books() -> list[Book]:
    return [
        Book(
            title="Dune",
            author="Frank Herbert",
            published_year=1965,
            price=Decimal("15.00"),
            genre="Science Fiction",
        ),
        Book(
            title="The Left Hand of Darkness",
            author="Ursula K. Le Guin",
            published_year=1969,
            price=Decimal("12.50"),
            genre="Science Fiction",
        ),
        Book(
            title="Neuromancer",
            author="William Gibson",
            published_year=1984,
            price=Decimal("9.99"),
        ),
        Book(
            title="Untitled Manuscript",
            author="Anonymous",
            published_year=None,
            price=Decimal("0.00"),
            genre=None,
        ),
    ]


@pytest.fixture
def sample_members() -> list[Member]:
    return [
        Member(full_name="Ada Lovelace", email="ada@example.com", join_date=datetime(2023, 1, 15)),
        Member(full_name="Alan Turing", email="alan@example.com", join_date=datetime(2023, 6, 1)),
        Member(
            full_name="Grace Hopper", email="grace@navy.example.org", join_date=datetime(2024, 2, 29)
        ),
    ]


@pytest.fixture
def populated_store(
    book_repo: BookRepository,
    member_repo: MemberRepository,
    sample_books: list[Book],
    sample_members: list[Member],
) -> dict[str, list]:
    """Store the sample books and members; returns the stored records."""
    return {
        "books": [book_repo.add(book) for book in sample_books],
        "members": [member_repo.add(member) for member in sample_members],
    }


@pytest.fixture
def fake() -> Faker:
    fake = Faker()
    Faker.seed(1234)
    return fake
