from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from ....application.services.admin_auth_service import AdminAuthService
from ....core.dependencies import get_admin_auth_service
from ....domain.models import User
from ..dependencies import require_admin_user
from ..schemas.auth import LoginPayload, LogoutPayload, RefreshTokenPayload
from ..serializers import envelope, serialize_session, serialize_tokens, serialize_user

router = APIRouter(prefix="/admin/auth", tags=["admin-auth"])


@router.post("/login")
def login(
    payload: LoginPayload,
    admin_service: AdminAuthService = Depends(get_admin_auth_service),
) -> Dict[str, Any]:
    session = admin_service.login(payload.email, payload.password)
    return envelope("Admin login successful", **serialize_session(session))


# No bearer: the refresh token alone must still work once the access token has expired.
@router.post("/refresh-token")
def refresh_token(
    payload: RefreshTokenPayload,
    admin_service: AdminAuthService = Depends(get_admin_auth_service),
) -> Dict[str, Any]:
    tokens = admin_service.refresh(payload.refresh_token)
    return envelope("Token refreshed successfully", **serialize_tokens(tokens))


@router.post("/logout")
def logout(
    payload: Optional[LogoutPayload] = None,
    admin: User = Depends(require_admin_user),
    admin_service: AdminAuthService = Depends(get_admin_auth_service),
) -> Dict[str, Any]:
    admin_service.logout(admin, payload.refresh_token if payload else None)
    return envelope("Logged out successfully")


@router.get("/me")
def me(admin: User = Depends(require_admin_user)) -> Dict[str, Any]:
    return envelope("Profile retrieved successfully", user=serialize_user(admin))
