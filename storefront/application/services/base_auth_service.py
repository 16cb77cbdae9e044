from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.errors import UnauthenticatedError
from ...domain.models import Role, User
from ...domain.ports.persistence import TransactionManager, UserRepository
from ...services.password_hasher import PasswordHasher
from ...services.token_service import TokenPair, TokenService

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(slots=True)
class AuthSession:
    """Account plus the credential pair handed back by a successful auth step."""

    user: User
    tokens: TokenPair
    require_verification: bool = False


class BaseAuthService:
    """Session steps shared by the customer and administrator flows."""

    role: Role
    _refresh_denied_message = "User not found or inactive"

    def __init__(
        self,
        database: TransactionManager,
        users: UserRepository,
        tokens: TokenService,
        hasher: PasswordHasher,
    ) -> None:
        self._db = database
        self._users = users
        self._tokens = tokens
        self._hasher = hasher

    def refresh(self, refresh_token: str) -> TokenPair:
        """Rotate a refresh token: the presented one is revoked, a new pair is issued."""
        with self._db.transaction():
            record = self._tokens.verify_refresh_token(refresh_token)
            if record is None:
                logger.info("Rejected %s refresh with an unusable token", self.role.value)
                raise UnauthenticatedError("Invalid or expired refresh token")
            user = self._users.get_user_by_id(record.user_id)
            if not self._may_refresh(user):
                logger.info("Rejected %s refresh for account %s", self.role.value, record.user_id)
                raise UnauthenticatedError(self._refresh_denied_message)
            if not self._tokens.revoke_refresh_token(refresh_token):
                raise UnauthenticatedError("Invalid or expired refresh token")
            return self._tokens.issue_token_pair(user.id, self.role)

    def logout(self, account: User, refresh_token: Optional[str] = None) -> None:
        """Revoke one of the caller's refresh tokens, or all of them when none is given."""
        with self._db.transaction():
            if refresh_token:
                self._tokens.revoke_refresh_token(refresh_token, account.id)
            else:
                self._tokens.revoke_all_for_account(account.id)
        logger.info("Logged out %s %s", self.role.value, account.id)

    def _may_refresh(self, user: Optional[User]) -> bool:
        return user is not None and user.role is self.role and user.is_active
