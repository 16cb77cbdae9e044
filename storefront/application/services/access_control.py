from __future__ import annotations

import logging

from ...domain.errors import ForbiddenError, UnauthenticatedError
from ...domain.models import Role, User
from ...domain.ports.persistence import UserRepository
from ...services.token_service import InvalidTokenError, TokenService

logger = logging.getLogger(__name__)

_DENIED = {
    Role.ADMIN: "Access denied. Admin only",
    Role.USER: "Access denied. User only",
}

_INACTIVE = {
    Role.ADMIN: "Account is locked or inactive",
    Role.USER: "Your account is inactive. Please verify your email.",
}


class AccessControlService:
    """Turns a bearer token into a live account allowed through a role gate."""

    def __init__(self, users: UserRepository, tokens: TokenService) -> None:
        self._users = users
        self._tokens = tokens

    def authenticate(self, token: str, required_role: Role, allow_inactive: bool = False) -> User:
        if not token:
            raise UnauthenticatedError("No token, authorization denied")
        try:
            claims = self._tokens.verify_access_token(token)
        except InvalidTokenError as exc:
            raise UnauthenticatedError("Invalid token") from exc

        if claims["role"] != required_role.value:
            raise ForbiddenError(_DENIED[required_role])

        # stored role and status win over the token claims
        user = self._users.get_user_by_id(claims["sub"])
        if user is None:
            raise ForbiddenError("User not found")
        if user.role is not required_role:
            logger.warning("Token role %s no longer matches account %s", claims["role"], user.id)
            raise ForbiddenError(_DENIED[required_role])
        if not user.is_active and not allow_inactive:
            raise ForbiddenError(_INACTIVE[required_role])
        return user
