from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for service-layer exceptions mapped to HTTP responses.

    ``message`` is safe to show to clients. ``payload`` holds extra keys merged
    into the response envelope next to ``error`` and ``message``.
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}


class ValidationError(ServiceError):
    """Request is malformed or violates a business rule (400)."""
    status_code = 400


class DuplicateEmailError(ValidationError):
    def __init__(self, message: str = "Email already in use") -> None:
        super().__init__(message)


class InvalidCredentialsError(ValidationError):
    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class InvalidOtpError(ValidationError):
    def __init__(self, message: str = "Invalid or expired OTP") -> None:
        super().__init__(message)


class OtpCooldownError(ValidationError):
    """A still-fresh OTP exists; the client must wait before asking again."""

    def __init__(self, seconds_remaining: int) -> None:
        minutes = -(-seconds_remaining // 60)
        super().__init__(
            f"Please wait {minutes} minute(s) before requesting a new OTP",
            payload={"secondsRemaining": seconds_remaining},
        )
        self.seconds_remaining = seconds_remaining


class UnauthenticatedError(ServiceError):
    """Credential missing, invalid or expired (401)."""
    status_code = 401


class ForbiddenError(ServiceError):
    """Authenticated but not allowed (403)."""
    status_code = 403


class NotFoundError(ServiceError):
    """Requested resource not found (404)."""
    status_code = 404


class InternalError(ServiceError):
    """Unexpected failure; the message never carries internal detail (500)."""
    status_code = 500

    def __init__(self, message: str = "Internal server error", payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, payload=payload)


__all__ = [
    "ServiceError",
    "ValidationError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "InvalidOtpError",
    "OtpCooldownError",
    "UnauthenticatedError",
    "ForbiddenError",
    "NotFoundError",
    "InternalError",
]
