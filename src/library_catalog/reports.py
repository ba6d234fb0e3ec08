"""Reporting Aggregator - Library Summary Statistics

Computes aggregate figures directly against the store:
- total number of books
- total number of members
- the most recently joined member

Nothing is cached; every call reflects the current store state.
"""

import logging
from datetime import datetime

from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .database.schema import Book as BookDB
from .database.schema import Member as MemberDB
from .database.session import store_safe_query
from .models.member import Member

logger = logging.getLogger(__name__)


class LibraryReport(BaseModel):
    """Summary statistics over both extents."""

    total_books: int = Field(..., description="Number of books in the catalog")
    total_members: int = Field(..., description="Number of registered members")
    most_recent_member: Member | None = Field(
        None, description="Member with the latest join date"
    )
    generated_at: datetime = Field(
        default_factory=datetime.now, description="When the report was computed"
    )


class ReportingAggregator:
    """Read-only aggregate queries over the store."""

    def __init__(self, session: Session):
        self.session = session

    def _count(self, model) -> int:
        query = select(func.count()).select_from(model)
        return (
            store_safe_query(
                self.session,
                lambda s: s.execute(query).scalar(),
                f"Failed to count {model.__tablename__}",
            )
            or 0
        )

    def count_books(self) -> int:
        return self._count(BookDB)

    def count_members(self) -> int:
        return self._count(MemberDB)

    def most_recent_member(self) -> Member | None:
        """
        The member with the latest join date.

        Equal join dates resolve to the lowest id so repeated calls on the same
        data return the same member.
        """
        query = (
            select(MemberDB)
            .order_by(MemberDB.join_date.desc(), MemberDB.id.asc())
            .limit(1)
        )
        result = store_safe_query(
            self.session,
            lambda s: s.execute(query).scalar_one_or_none(),
            "Failed to get most recent member",
        )

        if result is None:
            return None

        return Member.model_validate(result, from_attributes=True)

    def summary(self) -> LibraryReport:
        report = LibraryReport(
            total_books=self.count_books(),
            total_members=self.count_members(),
            most_recent_member=self.most_recent_member(),
        )
        logger.debug(
            "Report computed: books=%d members=%d", report.total_books, report.total_members
        )
        return report
