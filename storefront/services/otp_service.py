"""One-time password generation and validation."""

from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ..domain.models import Otp
from ..domain.ports.persistence import OtpRepository

OTP_LENGTH = 6


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class OtpService:
    """Creates six-digit codes and consumes them exactly once."""

    def __init__(
        self,
        otps: OtpRepository,
        expiry_minutes: int = 5,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._otps = otps
        self._expiry_minutes = expiry_minutes
        self._now = now or _utcnow

    @staticmethod
    def generate_code() -> str:
        draw = int.from_bytes(secrets.token_bytes(3), "big")
        return str(draw % 10**OTP_LENGTH).zfill(OTP_LENGTH)

    def create_otp(self, account_id: str, expiry_minutes: Optional[int] = None) -> Otp:
        minutes = self._expiry_minutes if expiry_minutes is None else expiry_minutes
        expires_at = self._now() + timedelta(minutes=minutes)
        return self._otps.create_otp(account_id, self.generate_code(), expires_at)

    def verify_otp(self, account_id: str, code: str) -> bool:
        """Check ``code`` against the most recent unused OTP.

        An expired code is burned. A wrong code leaves the current OTP usable.
        """
        otp = self._otps.get_latest_unused_otp(account_id)
        if otp is None:
            return False
        if otp.is_expired(self._now()):
            self._otps.mark_otp_used(otp.id)
            return False
        if not hmac.compare_digest(otp.code.encode("utf-8"), str(code).encode("utf-8")):
            return False
        self._otps.mark_otp_used(otp.id)
        return True

    def get_time_remaining(self, account_id: str) -> int:
        """Whole seconds before the current OTP expires, 0 when none is live."""
        otp = self._otps.get_latest_unused_otp(account_id)
        if otp is None:
            return 0
        remaining = (otp.expires_at - self._now()).total_seconds()
        return max(0, round(remaining))

    def invalidate_all(self, account_id: str) -> int:
        return self._otps.mark_all_otps_used(account_id)
