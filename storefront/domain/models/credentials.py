from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class RefreshToken:
    id: int
    token: str
    user_id: str
    expires_at: datetime
    is_revoked: bool
    created_at: datetime

    def is_usable(self, now: datetime) -> bool:
        return not self.is_revoked and now < self.expires_at


@dataclass(slots=True)
class Otp:
    id: int
    user_id: str
    code: str
    expires_at: datetime
    is_used: bool
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
