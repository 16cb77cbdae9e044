"""Pydantic schemas for the customer and admin auth endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from .base import CamelModel

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"
PHONE_PATTERN = r"^[+]?[(]?[0-9]{3}[)]?[-\s.]?[0-9]{3}[-\s.]?[0-9]{4,6}$"


class SignupPayload(CamelModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)


class VerifyOtpPayload(CamelModel):
    otp: str = Field(..., min_length=1, max_length=12)


class LoginPayload(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordPayload(CamelModel):
    email: EmailStr


class ResetPasswordPayload(CamelModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=72)


class RefreshTokenPayload(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class LogoutPayload(CamelModel):
    """Omit ``refreshToken`` to end every session of the caller."""

    refresh_token: Optional[str] = None


class UpdatePasswordPayload(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=72)


class UpdateDetailsPayload(CamelModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
