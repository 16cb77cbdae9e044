"""API router for customer authentication and account management."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status

from ....application.services.user_auth_service import UserAuthService
from ....core.dependencies import get_user_auth_service
from ....domain.models import User
from ..dependencies import require_pending_user, require_user
from ..schemas.auth import (
    ForgotPasswordPayload,
    LoginPayload,
    LogoutPayload,
    RefreshTokenPayload,
    ResetPasswordPayload,
    SignupPayload,
    UpdateDetailsPayload,
    UpdatePasswordPayload,
    VerifyOtpPayload,
)
from ..serializers import envelope, serialize_session, serialize_tokens, serialize_user

router = APIRouter(prefix="/user/auth", tags=["user-auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupPayload,
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    """Register an inactive account and email a verification code."""
    session = auth_service.signup(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        phone=payload.phone,
    )
    return envelope("Registration successful. Verification OTP sent to your email", **serialize_session(session))


@router.post("/verify-otp")
def verify_otp(
    payload: VerifyOtpPayload,
    user: User = Depends(require_pending_user),
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    session = auth_service.verify_otp(user, payload.otp)
    return envelope("OTP verification successful. Your account is now active.", **serialize_session(session))


@router.post("/resend-otp")
def resend_otp(
    user: User = Depends(require_pending_user),
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    auth_service.resend_otp(user)
    return envelope("New OTP sent to your email")


@router.post("/login")
def login(
    payload: LoginPayload,
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    session = auth_service.login(payload.email, payload.password)
    if session.require_verification:
        message = "Account not activated. A verification OTP has been sent to your email."
    else:
        message = "Login successful"
    return envelope(message, **serialize_session(session))


@router.post("/forgot-password")
def forgot_password(
    payload: ForgotPasswordPayload,
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    return envelope(auth_service.forgot_password(payload.email))


@router.post("/reset-password")
def reset_password(
    payload: ResetPasswordPayload,
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    auth_service.reset_password(payload.token, payload.new_password)
    return envelope("Password reset successful")


@router.post("/refresh-token")
def refresh_token(
    payload: RefreshTokenPayload,
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    tokens = auth_service.refresh(payload.refresh_token)
    return envelope("Token refreshed", **serialize_tokens(tokens))


@router.post("/logout")
def logout(
    payload: Optional[LogoutPayload] = None,
    user: User = Depends(require_user),
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    auth_service.logout(user, payload.refresh_token if payload else None)
    return envelope("Logout successful")


@router.put("/update-password")
def update_password(
    payload: UpdatePasswordPayload,
    user: User = Depends(require_user),
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    auth_service.update_password(user, payload.current_password, payload.new_password)
    return envelope("Password updated successfully")


@router.put("/update-details")
def update_details(
    payload: UpdateDetailsPayload,
    user: User = Depends(require_user),
    auth_service: UserAuthService = Depends(get_user_auth_service),
) -> Dict[str, Any]:
    updated = auth_service.update_details(user, username=payload.username, phone=payload.phone)
    return envelope("Profile updated successfully", user=serialize_user(updated))


@router.get("/me")
def me(user: User = Depends(require_user)) -> Dict[str, Any]:
    return envelope("Profile retrieved successfully", user=serialize_user(user))
