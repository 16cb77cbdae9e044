from __future__ import annotations

import logging
from typing import Optional

from ...domain.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidOtpError,
    OtpCooldownError,
    ValidationError,
)
from ...domain.models import Role, User
from ...domain.ports.persistence import TransactionManager, UserRepository
from ...services.email_service import EmailService
from ...services.otp_service import OtpService
from ...services.password_hasher import PasswordHasher
from ...services.token_service import (
    PASSWORD_RESET_TOKEN_TYPE,
    InvalidTokenError,
    TokenService,
)
from .base_auth_service import AuthSession, BaseAuthService, normalize_email

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If your email exists in our system, you will receive a password reset link"


class UserAuthService(BaseAuthService):
    """Customer lifecycle: Unregistered -> PendingVerification -> Active."""

    role = Role.USER

    def __init__(
        self,
        database: TransactionManager,
        users: UserRepository,
        tokens: TokenService,
        otps: OtpService,
        hasher: PasswordHasher,
        email_service: EmailService,
        frontend_base_url: str,
        otp_expiry_minutes: int = 5,
        otp_resend_grace_seconds: int = 30,
        password_reset_exp_minutes: int = 15,
    ) -> None:
        super().__init__(database, users, tokens, hasher)
        self._otps = otps
        self._email_service = email_service
        self._frontend_base_url = frontend_base_url.rstrip("/")
        self._otp_expiry_minutes = otp_expiry_minutes
        self._otp_resend_grace_seconds = otp_resend_grace_seconds
        self._password_reset_exp_minutes = password_reset_exp_minutes

    # ------------------------------------------------------------------
    def signup(self, username: str, email: str, password: str, phone: Optional[str] = None) -> AuthSession:
        email_clean = normalize_email(email)
        password_hash = self._hasher.hash(password)
        with self._db.transaction() as tx:
            if self._users.get_user_by_email(email_clean):
                raise DuplicateEmailError()
            if self._users.get_user_by_username(username):
                raise ValidationError("Username already in use")
            user = self._users.create_user(
                username=username,
                email=email_clean,
                password_hash=password_hash,
                role=Role.USER,
                is_active=False,
                phone=phone,
            )
            tokens = self._tokens.issue_token_pair(user.id, Role.USER)
            otp = self._otps.create_otp(user.id)
            tx.on_commit(lambda: self._send_otp(user, otp.code))
        logger.info("Registered user %s pending email verification", user.id)
        return AuthSession(user=user, tokens=tokens)

    def verify_otp(self, account: User, code: str) -> AuthSession:
        with self._db.transaction():
            valid = self._otps.verify_otp(account.id, code)
            if valid:
                user = self._users.set_user_active(account.id, True)
                tokens = self._tokens.issue_token_pair(user.id, Role.USER)
        # raised after commit so an expired code stays burned
        if not valid:
            logger.info("OTP verification failed for user %s", account.id)
            raise InvalidOtpError()
        logger.info("User %s verified their email", account.id)
        return AuthSession(user=user, tokens=tokens)

    def resend_otp(self, account: User) -> None:
        with self._db.transaction() as tx:
            remaining = self._otps.get_time_remaining(account.id)
            if remaining > self._otp_resend_grace_seconds:
                raise OtpCooldownError(remaining)
            self._otps.invalidate_all(account.id)
            otp = self._otps.create_otp(account.id)
            tx.on_commit(lambda: self._send_otp(account, otp.code))

    def login(self, email: str, password: str) -> AuthSession:
        user = self._users.get_user_by_email(normalize_email(email))
        if not user or user.role is not Role.USER:
            raise InvalidCredentialsError()
        if not self._hasher.verify(password, user.password_hash):
            logger.info("Failed login for user %s", user.id)
            raise InvalidCredentialsError()
        with self._db.transaction() as tx:
            tokens = self._tokens.issue_token_pair(user.id, Role.USER)
            if not user.is_active:
                self._otps.invalidate_all(user.id)
                otp = self._otps.create_otp(user.id)
                tx.on_commit(lambda: self._send_otp(user, otp.code))
        logger.info("User %s logged in", user.id)
        return AuthSession(user=user, tokens=tokens, require_verification=not user.is_active)

    def forgot_password(self, email: str) -> str:
        """Email a reset link when the account exists; the reply never says which."""
        user = self._users.get_user_by_email(normalize_email(email))
        if user:
            token = self._tokens.issue_password_reset_token(user.id, user.email)
            reset_url = f"{self._frontend_base_url}/reset-password?token={token}"
            self._email_service.send_password_reset_email(
                user.email, user.username, reset_url, self._password_reset_exp_minutes
            )
            logger.info("Password reset requested for user %s", user.id)
        return FORGOT_PASSWORD_MESSAGE

    def reset_password(self, token: str, new_password: str) -> None:
        try:
            claims = self._tokens.verify_access_token(token, expected_type=PASSWORD_RESET_TOKEN_TYPE)
        except InvalidTokenError as exc:
            raise ValidationError("Invalid or expired token") from exc
        password_hash = self._hasher.hash(new_password)
        with self._db.transaction():
            user = self._users.get_user_by_id(claims["sub"])
            if not user or user.email != claims["email"]:
                raise ValidationError("Invalid or expired token")
            self._users.update_user_password(user.id, password_hash)
            revoked = self._tokens.revoke_all_for_account(user.id)
        logger.info("Password reset for user %s; revoked %s refresh tokens", user.id, revoked)

    def update_password(self, account: User, current_password: str, new_password: str) -> None:
        if not self._hasher.verify(current_password, account.password_hash):
            raise ValidationError("Current password is incorrect")
        password_hash = self._hasher.hash(new_password)
        with self._db.transaction():
            self._users.update_user_password(account.id, password_hash)
        logger.info("User %s changed their password", account.id)

    def update_details(
        self,
        account: User,
        username: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        if username is None and phone is None:
            raise ValidationError("No fields to update")
        with self._db.transaction():
            if username is not None and username != account.username:
                existing = self._users.get_user_by_username(username)
                if existing and existing.id != account.id:
                    raise ValidationError("Username already in use")
            return self._users.update_user_details(account.id, username=username, phone=phone)

    # ------------------------------------------------------------------
    def _send_otp(self, user: User, code: str) -> None:
        if not self._email_service.send_otp_email(user.email, user.username, code, self._otp_expiry_minutes):
            logger.warning("Could not deliver verification code to user %s", user.id)
