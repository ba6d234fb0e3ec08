"""
Member repository implementation for the Library Catalog.

Members carry the one uniqueness rule of the catalog: email addresses are
unique across all members. The rule is enforced by the store's unique index at
write time, so two concurrent writers cannot both succeed; the loser's commit
fails and surfaces as ``ConstraintViolationError``.
"""

from datetime import datetime

from sqlalchemy import select

from ..database.schema import Member as MemberDB
from ..database.session import store_safe_query
from ..models.member import Member as MemberModel
from ..models.member import to_local_naive
from .repository import BaseRepository


class MemberRepository(BaseRepository[MemberDB, MemberModel]):
    """Repository for member data access."""

    @property
    def model_class(self):
        return MemberDB

    @property
    def response_schema(self):
        return MemberModel

    def get_by_email(self, email: str) -> MemberModel | None:
        """
        Get a member by email address, ignoring case.

        Args:
            email: Email address in any case

        Returns:
            Member model or None if not found
        """
        query = select(MemberDB).where(MemberDB.email == email.lower())
        result = store_safe_query(
            self.session,
            lambda s: s.execute(query).scalar_one_or_none(),
            "Failed to get member by email",
        )

        if result is None:
            return None

        return self._to_response_model(result)

    def joined_since(self, min_date: datetime) -> list[MemberModel]:
        """
        Get members whose join date is ``min_date`` or later.

        Args:
            min_date: Inclusive lower bound; aware values are read as local time

        Returns:
            Matching members ordered by join date, then id
        """
        query = (
            select(MemberDB)
            .where(MemberDB.join_date >= to_local_naive(min_date))
            .order_by(MemberDB.join_date.asc(), MemberDB.id.asc())
        )
        return self._select_all(query)
