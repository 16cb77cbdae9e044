"""Access, password-reset and refresh token issuing."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt

from ..domain.models import RefreshToken, Role
from ..domain.ports.persistence import RefreshTokenRepository

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
PASSWORD_RESET_TOKEN_TYPE = "password_reset"
DEFAULT_SECRET = "change-me"


class InvalidTokenError(Exception):
    """Signed token is malformed, forged, expired or of the wrong kind."""


@dataclass(slots=True)
class TokenPair:
    access_token: str
    refresh_token: str


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenService:
    """Signs short-lived JWTs and manages opaque, single-use refresh tokens."""

    def __init__(
        self,
        refresh_tokens: RefreshTokenRepository,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_exp_minutes: int = 60,
        password_reset_exp_minutes: int = 15,
        refresh_token_exp_days: int = 7,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not secret_key:
            raise RuntimeError("JWT_SECRET is not configured.")
        if secret_key == DEFAULT_SECRET:
            logger.warning("JWT_SECRET is using the default value. Configure a strong secret in production.")
        self._refresh_tokens = refresh_tokens
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._access_ttl = timedelta(minutes=access_token_exp_minutes)
        self._reset_ttl = timedelta(minutes=password_reset_exp_minutes)
        self._refresh_ttl = timedelta(days=refresh_token_exp_days)
        self._now = now or _utcnow

    # Signed tokens ------------------------------------------------------------
    def issue_access_token(self, account_id: str, role: Role, ttl: Optional[timedelta] = None) -> str:
        claims = {"sub": account_id, "role": role.value}
        return self._sign(claims, ACCESS_TOKEN_TYPE, ttl or self._access_ttl)

    def issue_password_reset_token(self, account_id: str, email: str, ttl: Optional[timedelta] = None) -> str:
        claims = {"sub": account_id, "email": email}
        return self._sign(claims, PASSWORD_RESET_TOKEN_TYPE, ttl or self._reset_ttl)

    def verify_access_token(self, token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
        """Decode ``token`` and check its ``type`` claim.

        Expiry is checked against the service clock rather than PyJWT's wall
        clock. Every failure mode raises the same :class:`InvalidTokenError` so
        callers cannot tell a forged token from an expired one.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "require": ["exp", "iat", "sub", "type"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError("Invalid token") from exc
        expires_at = claims.get("exp")
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise InvalidTokenError("Invalid token")
        if expires_at <= self._now().timestamp():
            raise InvalidTokenError("Invalid token")
        if claims.get("type") != expected_type:
            raise InvalidTokenError("Invalid token")
        if expected_type == ACCESS_TOKEN_TYPE and claims.get("role") not in {role.value for role in Role}:
            raise InvalidTokenError("Invalid token")
        if expected_type == PASSWORD_RESET_TOKEN_TYPE and not claims.get("email"):
            raise InvalidTokenError("Invalid token")
        return claims

    def _sign(self, claims: Dict[str, Any], token_type: str, ttl: timedelta) -> str:
        issued_at = self._now()
        payload = {
            **claims,
            "type": token_type,
            "iat": issued_at,
            "exp": issued_at + ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    # Refresh tokens -----------------------------------------------------------
    def issue_refresh_token(self, account_id: str) -> RefreshToken:
        token = secrets.token_hex(40)
        return self._refresh_tokens.create_refresh_token(account_id, token, self._now() + self._refresh_ttl)

    def issue_token_pair(self, account_id: str, role: Role) -> TokenPair:
        access = self.issue_access_token(account_id, role)
        refresh = self.issue_refresh_token(account_id)
        return TokenPair(access_token=access, refresh_token=refresh.token)

    def verify_refresh_token(self, token: str) -> Optional[RefreshToken]:
        """Return the stored token when it is neither revoked nor expired."""
        if not token:
            return None
        record = self._refresh_tokens.get_refresh_token(token)
        if not record or not record.is_usable(self._now()):
            return None
        return record

    def revoke_refresh_token(self, token: str, account_id: Optional[str] = None) -> bool:
        return self._refresh_tokens.revoke_refresh_token(token, account_id)

    def revoke_all_for_account(self, account_id: str) -> int:
        return self._refresh_tokens.revoke_all_for_user(account_id)

    def purge_expired_refresh_tokens(self) -> int:
        removed = self._refresh_tokens.delete_stale_refresh_tokens(self._now())
        if removed:
            logger.info("Purged %s stale refresh tokens", removed)
        return removed
