"""
Tests for store handling.

Verifies the ``DatabaseManager`` lifecycle and that an unreachable store
surfaces as ``StoreUnavailableError`` from every layer.
"""

from decimal import Decimal

import pytest
from sqlalchemy import inspect

from library_catalog.database import BookRepository, DatabaseManager, MemberRepository
from library_catalog.exceptions import StoreUnavailableError
from library_catalog.models import Book
from library_catalog.queries import CatalogQueries
from library_catalog.reports import ReportingAggregator


@pytest.fixture
def unreachable_db(tmp_path):
    """A store whose database file lives in a directory that does not exist."""
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'missing' / 'nested' / 'library.db'}")
    yield manager
    manager.close()


def test_init_database_creates_tables(db_manager):
    tables = set(inspect(db_manager.engine).get_table_names())

    assert {"books", "members", "roles", "user_accounts"} <= tables


def test_verify_connection(db_manager, unreachable_db):
    assert db_manager.verify_connection() is True
    assert unreachable_db.verify_connection() is False


def test_session_scope_commits(db_manager):
    with db_manager.session_scope() as session:
        BookRepository(session).add(Book(title="Dune", author="Herbert", price=Decimal("15.00")))

    with db_manager.session_scope() as session:
        assert BookRepository(session).count() == 1


def test_session_scope_reraises(db_manager):
    with pytest.raises(RuntimeError), db_manager.session_scope():
        raise RuntimeError("boom")


def test_init_database_on_unreachable_store(unreachable_db):
    with pytest.raises(StoreUnavailableError):
        unreachable_db.init_database()


def test_repository_reads_raise_store_unavailable(unreachable_db):
    session = unreachable_db.create_session()
    try:
        with pytest.raises(StoreUnavailableError):
            BookRepository(session).get_all()
        with pytest.raises(StoreUnavailableError):
            MemberRepository(session).get_by_id(1)
    finally:
        session.close()


def test_queries_and_reports_propagate_store_unavailable(unreachable_db):
    session = unreachable_db.create_session()
    try:
        queries = CatalogQueries(BookRepository(session), MemberRepository(session))
        with pytest.raises(StoreUnavailableError):
            queries.search_books("dune")
        with pytest.raises(StoreUnavailableError):
            ReportingAggregator(session).count_members()
    finally:
        session.close()


def test_store_unavailable_message_hides_detail(unreachable_db):
    session = unreachable_db.create_session()
    try:
        with pytest.raises(StoreUnavailableError) as exc_info:
            BookRepository(session).get_all()
    finally:
        session.close()

    assert str(exc_info.value) == "The library store is unavailable"
    assert "missing" not in str(exc_info.value)
