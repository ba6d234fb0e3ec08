"""
SQLAlchemy database schema for the Library Catalog.

This module defines the tables backing the Pydantic models:

1. books - catalog records, integer identity, fixed-point price
2. members - registered members, unique email
3. roles / user_accounts - the two access roles and their bootstrap users

Identity columns use SQLite AUTOINCREMENT so an id is never handed out again
after its row is deleted.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

# Base class for all SQLAlchemy models
Base = declarative_base()


class Book(Base):
    """Books table - the library's catalog."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    author = Column(String(200), nullable=False)
    published_year = Column(Integer, nullable=True)
    price = Column(Numeric(18, 2), nullable=False)
    genre = Column(String(100), nullable=True)

    __table_args__ = (
        Index("idx_book_title", "title"),
        Index("idx_book_published_year", "published_year"),
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        {"sqlite_autoincrement": True},
    )


class Member(Base):
    """Members table - people registered with the library."""

    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    join_date = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_member_join_date", "join_date"),
        {"sqlite_autoincrement": True},
    )


class Role(Base):
    """Roles table - the access roles known to the store (Admin, Member)."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)

    users = relationship("UserAccount", back_populates="role")


class UserAccount(Base):
    """
    User accounts table - binds an identity to a role.

    Credentials are owned by the external auth provider; only the
    identity-to-role binding lives here.
    """

    __tablename__ = "user_accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=func.now())

    role = relationship("Role", back_populates="users")
