"""Unit tests for the credential services.

Tests for:
- Password hashing limits
- Access, password-reset and refresh token handling
- OTP generation, expiry and cooldown arithmetic
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from storefront.domain.errors import ValidationError
from storefront.domain.models import Role
from storefront.infrastructure.persistence.sqlite import SQLiteDatabase
from storefront.infrastructure.repositories.otp_repository import OtpRepository
from storefront.infrastructure.repositories.refresh_token_repository import RefreshTokenRepository
from storefront.infrastructure.repositories.user_repository import UserRepository
from storefront.services.otp_service import OtpService
from storefront.services.password_hasher import PasswordHasher
from storefront.services.token_service import (
    PASSWORD_RESET_TOKEN_TYPE,
    InvalidTokenError,
    TokenService,
)

SECRET = "unit-test-secret-key-that-is-long-enough-for-hs256"


class FakeClock:
    def __init__(self) -> None:
        self.current = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def database(tmp_path):
    db = SQLiteDatabase(tmp_path / "unit.db")
    yield db
    db.close()


@pytest.fixture
def account(database):
    return UserRepository(database).create_user(
        username="unit",
        email="unit@example.com",
        password_hash="x",
        role=Role.USER,
        is_active=False,
    )


@pytest.fixture
def tokens(database, clock):
    return TokenService(RefreshTokenRepository(database), secret_key=SECRET, now=clock)


@pytest.fixture
def otps(database, clock):
    return OtpService(OtpRepository(database), expiry_minutes=5, now=clock)


class TestPasswordHasher:
    def test_hash_round_trip(self):
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("Secret123")

        assert hashed != "Secret123"
        assert hasher.verify("Secret123", hashed)
        assert not hasher.verify("Secret124", hashed)

    def test_rejects_passwords_over_72_bytes(self):
        hasher = PasswordHasher(rounds=4)
        with pytest.raises(ValidationError):
            hasher.hash("é" * 40)

    def test_verify_tolerates_garbage_hash(self):
        assert PasswordHasher(rounds=4).verify("Secret123", "not-a-bcrypt-hash") is False


class TestTokenService:
    def test_access_token_carries_subject_and_role(self, tokens, account):
        token = tokens.issue_access_token(account.id, Role.USER)
        claims = tokens.verify_access_token(token)

        assert claims["sub"] == account.id
        assert claims["role"] == "user"
        assert claims["type"] == "access"

    def test_expiry_follows_service_clock(self, tokens, account, clock):
        token = tokens.issue_access_token(account.id, Role.USER)
        clock.advance(minutes=59)
        assert tokens.verify_access_token(token)["sub"] == account.id

        clock.advance(minutes=1)
        with pytest.raises(InvalidTokenError):
            tokens.verify_access_token(token)

    def test_reset_token_expires_after_fifteen_minutes(self, tokens, account, clock):
        reset = tokens.issue_password_reset_token(account.id, account.email)
        clock.advance(minutes=14)
        tokens.verify_access_token(reset, expected_type=PASSWORD_RESET_TOKEN_TYPE)

        clock.advance(minutes=1)
        with pytest.raises(InvalidTokenError):
            tokens.verify_access_token(reset, expected_type=PASSWORD_RESET_TOKEN_TYPE)

    def test_expired_access_token_is_rejected_on_wall_clock(self, database, account):
        issued = datetime.now(tz=timezone.utc) - timedelta(hours=2)
        stale = TokenService(RefreshTokenRepository(database), secret_key=SECRET, now=lambda: issued)
        token = stale.issue_access_token(account.id, Role.USER)
        live = TokenService(RefreshTokenRepository(database), secret_key=SECRET)

        with pytest.raises(InvalidTokenError):
            live.verify_access_token(token)

    def test_missing_expiry_is_rejected(self, tokens, account):
        unbounded = jwt.encode(
            {"sub": account.id, "role": "user", "type": "access", "iat": 1},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            tokens.verify_access_token(unbounded)

    def test_wrong_signature_is_rejected(self, tokens, account):
        forged = jwt.encode(
            {"sub": account.id, "role": "admin", "type": "access", "iat": 1, "exp": 4102444800},
            "some-other-secret-entirely-different-from-the-real-one",
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            tokens.verify_access_token(forged)

    def test_reset_token_is_not_an_access_token(self, tokens, account):
        reset = tokens.issue_password_reset_token(account.id, account.email)

        with pytest.raises(InvalidTokenError):
            tokens.verify_access_token(reset)
        claims = tokens.verify_access_token(reset, expected_type=PASSWORD_RESET_TOKEN_TYPE)
        assert claims["email"] == account.email

    def test_refresh_token_is_random_hex(self, tokens, account):
        first = tokens.issue_refresh_token(account.id)
        second = tokens.issue_refresh_token(account.id)

        assert len(first.token) == 80
        int(first.token, 16)
        assert first.token != second.token

    def test_refresh_token_expires_after_seven_days(self, tokens, account, clock):
        record = tokens.issue_refresh_token(account.id)
        clock.advance(days=6, hours=23)
        assert tokens.verify_refresh_token(record.token) is not None

        clock.advance(hours=1)
        assert tokens.verify_refresh_token(record.token) is None

    def test_revoked_refresh_token_is_unusable(self, tokens, account):
        record = tokens.issue_refresh_token(account.id)

        assert tokens.revoke_refresh_token(record.token) is True
        assert tokens.verify_refresh_token(record.token) is None
        assert tokens.revoke_refresh_token(record.token) is False

    def test_revoke_checks_owner(self, tokens, account):
        record = tokens.issue_refresh_token(account.id)

        assert tokens.revoke_refresh_token(record.token, "someone-else") is False
        assert tokens.verify_refresh_token(record.token) is not None

    def test_purge_removes_revoked_and_expired(self, tokens, account, clock):
        revoked = tokens.issue_refresh_token(account.id)
        tokens.revoke_refresh_token(revoked.token)
        expiring = tokens.issue_refresh_token(account.id)
        clock.advance(days=3)
        live = tokens.issue_refresh_token(account.id)
        clock.advance(days=5)

        assert tokens.purge_expired_refresh_tokens() == 2
        assert tokens.verify_refresh_token(live.token) is not None
        assert tokens.verify_refresh_token(expiring.token) is None


class TestOtpService:
    def test_generated_code_is_six_digits(self):
        for _ in range(50):
            code = OtpService.generate_code()
            assert len(code) == 6
            assert code.isdigit()

    def test_verify_consumes_code(self, otps, account):
        otp = otps.create_otp(account.id)

        assert otps.verify_otp(account.id, otp.code) is True
        assert otps.verify_otp(account.id, otp.code) is False

    def test_wrong_code_keeps_otp_usable(self, otps, account):
        otp = otps.create_otp(account.id)
        wrong = "000000" if otp.code != "000000" else "111111"

        assert otps.verify_otp(account.id, wrong) is False
        assert otps.verify_otp(account.id, otp.code) is True

    def test_expired_code_is_burned(self, otps, account, clock):
        otp = otps.create_otp(account.id)
        clock.advance(minutes=5)

        assert otps.verify_otp(account.id, otp.code) is False
        clock.current -= timedelta(minutes=5)
        assert otps.verify_otp(account.id, otp.code) is False

    def test_only_latest_code_counts(self, otps, account, clock):
        first = otps.create_otp(account.id)
        clock.advance(seconds=1)
        second = otps.create_otp(account.id)

        if first.code != second.code:
            assert otps.verify_otp(account.id, first.code) is False
        assert otps.verify_otp(account.id, second.code) is True

    def test_time_remaining(self, otps, account, clock):
        assert otps.get_time_remaining(account.id) == 0

        otps.create_otp(account.id)
        assert otps.get_time_remaining(account.id) == 300
        clock.advance(seconds=280)
        assert otps.get_time_remaining(account.id) == 20
        clock.advance(minutes=1)
        assert otps.get_time_remaining(account.id) == 0

    def test_invalidate_all(self, otps, account):
        otp = otps.create_otp(account.id)

        assert otps.invalidate_all(account.id) == 1
        assert otps.verify_otp(account.id, otp.code) is False
