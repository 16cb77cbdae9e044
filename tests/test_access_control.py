from datetime import timedelta

import pytest

from storefront.application.services.access_control import AccessControlService
from storefront.domain.errors import ForbiddenError, UnauthenticatedError
from storefront.domain.models import Role
from storefront.infrastructure.persistence.sqlite import SQLiteDatabase
from storefront.infrastructure.repositories.refresh_token_repository import RefreshTokenRepository
from storefront.infrastructure.repositories.user_repository import UserRepository
from storefront.services.token_service import TokenService


@pytest.fixture
def database(tmp_path):
    db = SQLiteDatabase(tmp_path / "access.db")
    yield db
    db.close()


@pytest.fixture
def users(database):
    return UserRepository(database)


@pytest.fixture
def tokens(database):
    return TokenService(
        RefreshTokenRepository(database),
        secret_key="access-control-test-secret-key-long-enough-for-hs256",
    )


@pytest.fixture
def access(users, tokens):
    return AccessControlService(users, tokens)


def _account(users, name, role, active=True):
    return users.create_user(
        username=name,
        email=f"{name}@example.com",
        password_hash="hash",
        role=role,
        is_active=active,
    )


def test_missing_token(access):
    with pytest.raises(UnauthenticatedError) as exc:
        access.authenticate("", Role.USER)
    assert exc.value.message == "No token, authorization denied"


def test_garbage_token(access):
    with pytest.raises(UnauthenticatedError) as exc:
        access.authenticate("not.a.jwt", Role.USER)
    assert exc.value.message == "Invalid token"


def test_expired_token(access, users, tokens):
    user = _account(users, "late", Role.USER)
    token = tokens.issue_access_token(user.id, Role.USER, ttl=timedelta(seconds=-1))

    with pytest.raises(UnauthenticatedError):
        access.authenticate(token, Role.USER)


def test_user_token_on_admin_gate(access, users, tokens):
    user = _account(users, "eve", Role.USER)
    token = tokens.issue_access_token(user.id, Role.USER)

    with pytest.raises(ForbiddenError) as exc:
        access.authenticate(token, Role.ADMIN)
    assert exc.value.message == "Access denied. Admin only"


def test_admin_token_on_user_gate(access, users, tokens):
    admin = _account(users, "root", Role.ADMIN)
    token = tokens.issue_access_token(admin.id, Role.ADMIN)

    with pytest.raises(ForbiddenError) as exc:
        access.authenticate(token, Role.USER)
    assert exc.value.message == "Access denied. User only"


def test_unknown_account(access, tokens):
    token = tokens.issue_access_token("missing", Role.USER)

    with pytest.raises(ForbiddenError) as exc:
        access.authenticate(token, Role.USER)
    assert exc.value.message == "User not found"


def test_inactive_user(access, users, tokens):
    user = _account(users, "pending", Role.USER, active=False)
    token = tokens.issue_access_token(user.id, Role.USER)

    with pytest.raises(ForbiddenError) as exc:
        access.authenticate(token, Role.USER)
    assert exc.value.message == "Your account is inactive. Please verify your email."
    assert access.authenticate(token, Role.USER, allow_inactive=True).id == user.id


def test_inactive_admin(access, users, tokens):
    admin = _account(users, "locked", Role.ADMIN, active=False)
    token = tokens.issue_access_token(admin.id, Role.ADMIN)

    with pytest.raises(ForbiddenError) as exc:
        access.authenticate(token, Role.ADMIN)
    assert exc.value.message == "Account is locked or inactive"


def test_active_user_passes(access, users, tokens):
    user = _account(users, "ok", Role.USER)
    token = tokens.issue_access_token(user.id, Role.USER)

    assert access.authenticate(token, Role.USER).id == user.id
