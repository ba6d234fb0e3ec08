"""
Repository pattern implementation for the Library Catalog.

This module provides the uniform data access contract shared by every entity:

1. **Uniform CRUD**: ``get_all``, ``get_by_id``, ``add``, ``update``, ``delete``
2. **Explicit store handle**: each repository is built around a ``Session``
   handed to it by the caller; nothing is looked up globally
3. **Immediate commits**: every write commits on its own; there is no
   transaction spanning calls
4. **Pydantic results**: rows are converted to Pydantic models before they
   leave the repository

The base repository provides the common operations, while the entity
repositories name their table and model and add entity-specific queries.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..database.schema import Base
from ..database.session import store_safe_commit, store_safe_query
from ..exceptions import (
    ConstraintViolationError,
    LibraryCatalogError,
    NotFoundError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

# Type variables for generic repository
ModelType = TypeVar("ModelType", bound=Base)
SchemaType = TypeVar("SchemaType", bound=BaseModel)

__all__ = [
    "BaseRepository",
    "ConstraintViolationError",
    "LibraryCatalogError",
    "NotFoundError",
    "StoreUnavailableError",
]


class BaseRepository(ABC, Generic[ModelType, SchemaType]):
    """
    Abstract base repository providing the CRUD contract.

    Subclasses declare the SQLAlchemy table (``model_class``) and the Pydantic
    record type (``response_schema``). All reads go through
    ``store_safe_query`` and all writes through ``store_safe_commit`` so that
    store failures surface as catalog exceptions.
    """

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        self.session = session

    @property
    @abstractmethod
    def model_class(self) -> type[ModelType]:
        """Return the SQLAlchemy model class."""

    @property
    @abstractmethod
    def response_schema(self) -> type[SchemaType]:
        """Return the Pydantic response schema."""

    @property
    def entity_name(self) -> str:
        return self.model_class.__name__

    def _to_response_model(self, db_obj: ModelType) -> SchemaType:
        """Convert database model to Pydantic response model."""
        return self.response_schema.model_validate(db_obj, from_attributes=True)

    def _to_columns(self, entity: SchemaType) -> dict:
        """Column values for a write; identity is owned by the store."""
        return entity.model_dump(exclude={"id"})

    def _fetch(self, id: int) -> ModelType | None:
        return store_safe_query(
            self.session,
            lambda s: s.get(self.model_class, id),
            f"Failed to get {self.entity_name} by ID",
        )

    def _select_all(self, query) -> list[SchemaType]:
        results = store_safe_query(
            self.session,
            lambda s: s.execute(query).scalars().all(),
            f"Failed to list {self.entity_name} records",
        )
        return [self._to_response_model(item) for item in results]

    def get_all(self) -> list[SchemaType]:
        """
        Get every stored record, ordered by id.

        Returns:
            List of entities; empty when the store holds none

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        query = select(self.model_class).order_by(self.model_class.id.asc())
        return self._select_all(query)

    def get_by_id(self, id: int) -> SchemaType | None:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Pydantic model or None if not found
        """
        db_obj = self._fetch(id)
        if db_obj is None:
            logger.debug("%s %s not found", self.entity_name, id)
            return None

        return self._to_response_model(db_obj)

    def add(self, entity: SchemaType) -> SchemaType:
        """
        Persist a new entity and commit immediately.

        Any ``id`` on the input is ignored; the store assigns a fresh one.

        Args:
            entity: Pydantic record to store

        Returns:
            The stored entity, including its new id

        Raises:
            ConstraintViolationError: If a uniqueness or required-field rule breaks
            StoreUnavailableError: If the store cannot be reached
        """
        db_obj = self.model_class(**self._to_columns(entity))
        self.session.add(db_obj)
        store_safe_commit(self.session, f"add {self.entity_name}")
        self.session.refresh(db_obj)

        logger.info("Added %s %s", self.entity_name, db_obj.id)
        return self._to_response_model(db_obj)

    def update(self, entity: SchemaType) -> SchemaType:
        """
        Replace the full record identified by ``entity.id``.

        Args:
            entity: Pydantic record carrying the id and every field

        Returns:
            The updated entity

        Raises:
            NotFoundError: If no record has this id
            ConstraintViolationError: If a uniqueness or required-field rule breaks
        """
        if entity.id is None:
            raise NotFoundError(f"{self.entity_name} without an id cannot be updated")

        db_obj = self._fetch(entity.id)
        if db_obj is None:
            raise NotFoundError(f"{self.entity_name} {entity.id} not found")

        for field, value in self._to_columns(entity).items():
            setattr(db_obj, field, value)

        store_safe_commit(self.session, f"update {self.entity_name}")
        self.session.refresh(db_obj)

        logger.info("Updated %s %s", self.entity_name, db_obj.id)
        return self._to_response_model(db_obj)

    def delete(self, id: int) -> bool:
        """
        Delete entity by ID; deleting a missing id is a no-op.

        Args:
            id: Entity ID

        Returns:
            True if deleted, False if not found
        """
        db_obj = self._fetch(id)
        if db_obj is None:
            logger.debug("Delete skipped, %s %s not found", self.entity_name, id)
            return False

        self.session.delete(db_obj)
        store_safe_commit(self.session, f"delete {self.entity_name}")

        logger.info("Deleted %s %s", self.entity_name, id)
        return True

    def count(self) -> int:
        """Number of records in the extent."""
        query = select(func.count()).select_from(self.model_class)
        return (
            store_safe_query(
                self.session, lambda s: s.execute(query).scalar(), "Failed to get total count"
            )
            or 0
        )

    def exists(self, id: int) -> bool:
        """
        Check if entity exists by ID.

        Args:
            id: Entity ID

        Returns:
            True if exists, False otherwise
        """
        query = (
            select(func.count()).select_from(self.model_class).where(self.model_class.id == id)
        )
        count = store_safe_query(
            self.session, lambda s: s.execute(query).scalar(), "Failed to check existence"
        )
        return count > 0
