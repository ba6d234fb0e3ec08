"""
Database session management for the Library Catalog.

This module provides connection management and session handling for
SQLAlchemy. The ``DatabaseManager`` is the store handle: it is created once by
the composition root and passed explicitly to whatever needs sessions. There
is no module-level manager.

Key Considerations:
- Sessions should be short-lived (one per server request)
- Use ``session_scope()`` to ensure proper cleanup
- Store failures are translated into the catalog's exception taxonomy
"""

import logging
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..exceptions import ConstraintViolationError, LibraryCatalogError, StoreUnavailableError
from .schema import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors meaning the store itself could not be reached or used
STORE_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, DisconnectionError)


class DatabaseManager:
    """
    Owns the engine and session factory for one store.

    This class provides:
    - Lazy engine creation with SQLite-specific settings
    - A session factory and a transactional ``session_scope``
    - Schema initialization and connection verification
    """

    def __init__(self, database_url: str):
        """
        Initialize the database manager.

        Args:
            database_url: SQLAlchemy database URL
        """
        self.database_url = database_url
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        """
        Get or create the database engine.

        SQLite engines use a StaticPool (a single shared connection) and have
        foreign key enforcement switched on for every connection.
        """
        if self._engine is None:
            if self.database_url.startswith("sqlite"):
                self._engine = create_engine(
                    self.database_url,
                    # A single connection prevents "database is locked" errors
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                    echo=False,
                )

                @event.listens_for(self._engine, "connect")
                def set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ARG001
                    cursor = dbapi_connection.cursor()
                    cursor.execute("PRAGMA foreign_keys=ON")
                    cursor.close()
            else:
                self._engine = create_engine(
                    self.database_url,
                    pool_size=10,
                    max_overflow=20,
                    pool_pre_ping=True,
                    echo=False,
                )

            logger.info("Database engine created: %s", self._engine.url)

        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                autoflush=False,
                # Keep returned objects usable after commit
                expire_on_commit=False,
            )
        return self._session_factory

    def create_session(self) -> Session:
        """
        Create a new database session.

        Sessions should be closed by the caller; prefer ``session_scope``.
        """
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope for database operations.

        ```python
        with db_manager.session_scope() as session:
            books = BookRepository(session).get_all()
        ```

        Yields:
            Database session

        Raises:
            Any error is rolled back and re-raised; database errors are logged
        """
        session = self.create_session()
        try:
            yield session
            session.commit()
            logger.debug("Database transaction committed successfully")
        except SQLAlchemyError:
            logger.exception("Database error, rolling back")
            session.rollback()
            raise
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self, drop_existing: bool = False) -> None:
        """
        Initialize the database schema.

        Args:
            drop_existing: If True, drop all tables before creating

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        try:
            if drop_existing:
                logger.warning("Dropping all existing tables...")
                Base.metadata.drop_all(bind=self.engine)

            logger.info("Creating database tables...")
            Base.metadata.create_all(bind=self.engine)
        except STORE_UNAVAILABLE_ERRORS as e:
            logger.exception("Schema initialization failed")
            raise StoreUnavailableError("The library store is unavailable") from e
        logger.info("Database initialization complete")

    def verify_connection(self) -> bool:
        """
        Verify the database connection is working.

        Returns:
            True if connection is successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection verified")
            return True
        except SQLAlchemyError:
            logger.exception("Database connection failed")
            return False

    def close(self) -> None:
        """Dispose of the engine and forget the session factory."""
        if self._engine:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None


def store_safe_commit(session: Session, operation: str) -> None:
    """
    Commit a session, translating store failures.

    The session is rolled back on any failure so nothing is partially applied.

    Args:
        session: The database session
        operation: Description of the operation (for error messages)

    Raises:
        ConstraintViolationError: If a constraint rejected the write
        StoreUnavailableError: If the store could not be reached
        LibraryCatalogError: On any other database error
    """
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.info("Constraint violation during '%s': %s", operation, e.orig)
        raise ConstraintViolationError(f"Cannot {operation}: constraint violated") from e
    except STORE_UNAVAILABLE_ERRORS as e:
        session.rollback()
        logger.exception("Store unavailable during '%s'", operation)
        raise StoreUnavailableError("The library store is unavailable") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Database operation '%s' failed", operation)
        raise LibraryCatalogError(f"Database operation '{operation}' failed") from e


def store_safe_query(session: Session, query_func: Callable[[Session], T], error_msg: str) -> T:
    """
    Execute a read, translating store failures.

    Args:
        session: The database session
        query_func: Function that performs the query
        error_msg: Error message for the caller

    Returns:
        Query result

    Raises:
        StoreUnavailableError: If the store could not be reached
        LibraryCatalogError: On any other database error
    """
    try:
        return query_func(session)
    except STORE_UNAVAILABLE_ERRORS as e:
        logger.exception("Query failed: %s", error_msg)
        raise StoreUnavailableError("The library store is unavailable") from e
    except SQLAlchemyError as e:
        logger.exception("Query failed: %s", error_msg)
        raise LibraryCatalogError(f"{error_msg}: Database query failed") from e
