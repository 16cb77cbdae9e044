from typing import Callable, Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.access_control import AccessControlService
from ...core.dependencies import get_access_control
from ...domain.errors import UnauthenticatedError
from ...domain.models import PageRequest, Role, User

_bearer_scheme = HTTPBearer(auto_error=False)


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise UnauthenticatedError("No token, authorization denied")
    return credentials.credentials


def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    access_control: AccessControlService = Depends(get_access_control),
) -> User:
    return access_control.authenticate(_bearer_token(credentials), Role.USER)


def require_pending_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    access_control: AccessControlService = Depends(get_access_control),
) -> User:
    """User gate that lets unverified accounts through, for the OTP routes only."""
    return access_control.authenticate(_bearer_token(credentials), Role.USER, allow_inactive=True)


def require_admin_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    access_control: AccessControlService = Depends(get_access_control),
) -> User:
    return access_control.authenticate(_bearer_token(credentials), Role.ADMIN)


def page_params(
    default_limit: int = 10,
    default_sort_by: str = "createdAt",
    default_sort_order: str = "DESC",
) -> Callable[..., PageRequest]:
    """Build a dependency reading ``page``, ``limit``, ``sortBy`` and ``sortOrder``."""

    def dependency(
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=1, le=100),
        sort_by: str = Query(default_sort_by, alias="sortBy"),
        sort_order: str = Query(default_sort_order, alias="sortOrder"),
    ) -> PageRequest:
        order = "ASC" if sort_order.upper() == "ASC" else "DESC"
        return PageRequest(page=page, limit=limit, sort_by=sort_by, sort_order=order)

    return dependency
