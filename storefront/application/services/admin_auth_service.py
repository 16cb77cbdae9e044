from __future__ import annotations

import logging
from typing import Optional

from ...domain.errors import InvalidCredentialsError, ValidationError
from ...domain.models import Role, User
from .base_auth_service import AuthSession, BaseAuthService, normalize_email

logger = logging.getLogger(__name__)


class AdminAuthService(BaseAuthService):
    """Manages administrator accounts and token-based authentication."""

    role = Role.ADMIN
    _refresh_denied_message = "User not found or not an admin"

    # ------------------------------------------------------------------
    def ensure_default_admin(
        self,
        email: Optional[str],
        password: Optional[str],
        username: str = "admin",
    ) -> Optional[User]:
        if not email or not password:
            return None
        email_clean = normalize_email(email)
        existing = self._users.get_user_by_email(email_clean)
        if existing:
            if not existing.is_admin:
                raise ValidationError(f"{email_clean} belongs to a non-admin account")
            return existing
        if len(password) < 6:
            raise ValidationError("Admin password must be at least 6 characters")
        hashed = self._hasher.hash(password)
        with self._db.transaction():
            if self._users.get_user_by_username(username):
                raise ValidationError(f"Username {username} is already taken")
            logger.info("Creating default administrator account for %s", email_clean)
            return self._users.create_user(
                username=username,
                email=email_clean,
                password_hash=hashed,
                role=Role.ADMIN,
                is_active=True,
            )

    def login(self, email: str, password: str) -> AuthSession:
        user = self._users.get_user_by_email(normalize_email(email))
        if not user or not user.is_admin:
            raise InvalidCredentialsError()
        if not self._hasher.verify(password, user.password_hash):
            logger.warning("Failed admin login for %s", user.id)
            raise InvalidCredentialsError()
        if not user.is_active:
            raise ValidationError("Your account is inactive")
        with self._db.transaction():
            tokens = self._tokens.issue_token_pair(user.id, Role.ADMIN)
        logger.info("Admin %s logged in", user.id)
        return AuthSession(user=user, tokens=tokens)
