"""Tests for the shared SQLite unit of work and repository constraints."""

import sqlite3

import pytest

from storefront.domain.models import PageRequest, Role
from storefront.infrastructure.persistence.sqlite import SQLiteDatabase
from storefront.infrastructure.repositories.user_repository import UserRepository


@pytest.fixture
def database(tmp_path):
    db = SQLiteDatabase(tmp_path / "persistence.db")
    yield db
    db.close()


@pytest.fixture
def users(database):
    return UserRepository(database)


def _create(users, name):
    return users.create_user(
        username=name,
        email=f"{name}@example.com",
        password_hash="hash",
        role=Role.USER,
        is_active=True,
    )


def test_roles_are_seeded(database):
    rows = {row["name"]: row["description"] for row in database.fetchall("SELECT name, description FROM roles")}
    assert rows == {
        "admin": "Administrator with full system access",
        "user": "Regular customer account",
    }


def test_failed_transaction_rolls_back_every_write(database, users):
    with pytest.raises(RuntimeError):
        with database.transaction():
            _create(users, "first")
            _create(users, "second")
            raise RuntimeError("boom")

    assert database.count("SELECT COUNT(*) FROM users") == 0


def test_nested_transaction_joins_outer(database, users):
    with pytest.raises(RuntimeError):
        with database.transaction():
            with database.transaction():
                _create(users, "inner")
            assert database.in_transaction
            raise RuntimeError("boom")

    assert users.get_user_by_username("inner") is None


def test_commit_callbacks_run_after_commit(database, users):
    seen = []

    with database.transaction() as tx:
        user = _create(users, "alice")
        tx.on_commit(lambda: seen.append(users.get_user_by_id(user.id) is not None))
        assert seen == []

    assert seen == [True]


def test_commit_callbacks_skipped_on_rollback(database, users):
    seen = []
    with pytest.raises(RuntimeError):
        with database.transaction() as tx:
            _create(users, "bob")
            tx.on_commit(lambda: seen.append("sent"))
            raise RuntimeError("boom")

    assert seen == []


def test_failing_callback_does_not_undo_commit(database, users):
    def explode():
        raise ValueError("smtp down")

    with database.transaction() as tx:
        _create(users, "carol")
        tx.on_commit(explode)

    assert users.get_user_by_username("carol") is not None


def test_unique_email_enforced(database, users):
    _create(users, "dave")
    with pytest.raises(sqlite3.IntegrityError):
        users.create_user(
            username="dave2",
            email="dave@example.com",
            password_hash="hash",
            role=Role.USER,
            is_active=True,
        )


def test_paginate_counts_whole_result(database, users):
    for index in range(5):
        _create(users, f"user{index}")

    page = database.paginate(
        "SELECT * FROM users",
        "WHERE is_active = ?",
        [1],
        PageRequest(page=2, limit=2, sort_by="username", sort_order="ASC"),
        {"username": "username"},
        lambda row: row["username"],
    )

    assert page.total_items == 5
    assert page.total_pages == 3
    assert page.items == ["user2", "user3"]
