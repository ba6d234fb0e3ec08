"""
Tests for the access boundary.

These tests verify that:
1. The policy table grants exactly the documented permissions
2. Denied calls raise UnauthorizedError and never touch the store
3. Permitted calls delegate to the repositories, queries and reports
"""

from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from library_catalog.access import (
    ACCESS_POLICY,
    AccessBoundary,
    Operation,
    Role,
    authorize,
    is_permitted,
)
from library_catalog.exceptions import UnauthorizedError
from library_catalog.models import Book, Member

WRITE_OPERATIONS = {
    Operation.CREATE_BOOK,
    Operation.EDIT_BOOK,
    Operation.DELETE_BOOK,
    Operation.CREATE_MEMBER,
    Operation.EDIT_MEMBER,
    Operation.DELETE_MEMBER,
}


class TestRole:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            (None, Role.ANONYMOUS),
            ("Admin", Role.ADMIN),
            ("member", Role.MEMBER),
            (" ANONYMOUS ", Role.ANONYMOUS),
            (Role.ADMIN, Role.ADMIN),
        ],
    )
    def test_parse(self, token, expected):
        assert Role.parse(token) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            Role.parse("Librarian")


class TestPolicyTable:
    def test_every_operation_has_a_policy(self):
        assert set(ACCESS_POLICY) == set(Operation)

    @pytest.mark.parametrize("operation", sorted(WRITE_OPERATIONS, key=lambda o: o.value))
    def test_writes_are_admin_only(self, operation):
        assert is_permitted(Role.ADMIN, operation)
        assert not is_permitted(Role.MEMBER, operation)
        assert not is_permitted(Role.ANONYMOUS, operation)

    @pytest.mark.parametrize(
        "operation",
        sorted(set(Operation) - WRITE_OPERATIONS, key=lambda o: o.value),
    )
    def test_reads_open_to_admin_and_member(self, operation):
        assert is_permitted(Role.ADMIN, operation)
        assert is_permitted(Role.MEMBER, operation)

    def test_book_search_is_the_only_anonymous_operation(self):
        anonymous = {op for op in Operation if is_permitted(Role.ANONYMOUS, op)}

        assert anonymous == {Operation.SEARCH_BOOKS}

    def test_authorize_returns_resolved_role(self):
        assert authorize("admin", Operation.DELETE_BOOK) is Role.ADMIN

    def test_authorize_denies(self):
        with pytest.raises(UnauthorizedError):
            authorize(None, Operation.LIST_BOOKS)


class TestBoundaryDenials:
    """A denied caller gets UnauthorizedError before any store access."""

    @pytest.fixture
    def untouched_session(self):
        return MagicMock(name="session")

    @pytest.mark.parametrize(
        ("method", "args"),
        [
            ("create_book", (Book(title="X", author="Y", price=Decimal("1.00")),)),
            ("update_book", (Book(id=1, title="X", author="Y", price=Decimal("1.00")),)),
            ("delete_book", (1,)),
            ("create_member", (Member(full_name="X", email="x@x.com"),)),
            ("update_member", (Member(id=1, full_name="X", email="x@x.com"),)),
            ("delete_member", (1,)),
            ("list_books", ()),
            ("list_members", ()),
            ("search_members", ("a",)),
            ("books_published_since", (1900,)),
            ("report", ()),
        ],
    )
    def test_anonymous_denied_without_store_access(self, untouched_session, method, args):
        boundary = AccessBoundary(untouched_session)

        with pytest.raises(UnauthorizedError):
            getattr(boundary, method)(Role.ANONYMOUS, *args)

        assert untouched_session.mock_calls == []

    @pytest.mark.parametrize("method", ["create_book", "update_book", "delete_book"])
    def test_member_cannot_write_books(self, untouched_session, method):
        boundary = AccessBoundary(untouched_session)
        arg = 1 if method == "delete_book" else Book(id=1, title="X", author="Y", price=1)

        with pytest.raises(UnauthorizedError):
            getattr(boundary, method)(Role.MEMBER, arg)

        assert untouched_session.mock_calls == []


class TestBoundaryDelegation:
    """Permitted calls reach the real store."""

    def test_anonymous_write_leaves_extent_unchanged(self, boundary, populated_store):
        before = boundary.list_books(Role.ADMIN)

        with pytest.raises(UnauthorizedError):
            boundary.create_book(
                Role.ANONYMOUS, Book(title="Sneaky", author="Nobody", price=Decimal("1.00"))
            )
        with pytest.raises(UnauthorizedError):
            boundary.delete_book(Role.ANONYMOUS, before[0].id)

        assert boundary.list_books(Role.ADMIN) == before

    def test_anonymous_search_succeeds(self, boundary, populated_store):
        assert [b.title for b in boundary.search_books(Role.ANONYMOUS, "dune")] == ["Dune"]
        assert boundary.search_books_json(None, "")[0]["title"] == "Dune"

    def test_anonymous_member_search_denied(self, boundary, populated_store):
        with pytest.raises(UnauthorizedError):
            boundary.search_members_json(Role.ANONYMOUS, "ada")

    def test_admin_crud_cycle(self, boundary):
        created = boundary.create_book(
            "Admin", Book(title="Dune", author="Herbert", price=Decimal("15.00"))
        )
        assert boundary.get_book("Member", created.id) == created

        updated = boundary.update_book(
            "Admin", created.model_copy(update={"published_year": 1965})
        )
        assert updated.published_year == 1965

        assert boundary.delete_book("Admin", created.id) is True
        assert boundary.get_book("Admin", created.id) is None

    def test_member_reads(self, boundary, populated_store):
        assert len(boundary.list_members(Role.MEMBER)) == 3
        assert boundary.count_books(Role.MEMBER) == 4
        assert boundary.count_members(Role.MEMBER) == 3
        assert boundary.most_recent_member(Role.MEMBER).full_name == "Grace Hopper"
        assert boundary.report(Role.MEMBER).total_books == 4
        assert [
            m.full_name for m in boundary.members_joined_since(Role.MEMBER, datetime(2024, 1, 1))
        ] == ["Grace Hopper"]
        assert len(
            boundary.members_joined_within(Role.MEMBER, 30, now=datetime(2024, 3, 1))
        ) == 1

    def test_admin_member_writes(self, boundary):
        created = boundary.create_member(Role.ADMIN, Member(full_name="A", email="a@x.com"))
        updated = boundary.update_member(
            Role.ADMIN, created.model_copy(update={"full_name": "Alice"})
        )

        assert boundary.get_member(Role.MEMBER, created.id) == updated
        assert boundary.delete_member(Role.ADMIN, created.id) is True
        assert boundary.delete_member(Role.ADMIN, created.id) is False
