"""Account domain model shared by customers and administrators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Closed set of account roles used by every role gate."""

    ADMIN = "admin"
    USER = "user"

    @property
    def description(self) -> str:
        return ROLE_DESCRIPTIONS[self]


ROLE_DESCRIPTIONS = {
    Role.ADMIN: "Administrator with full system access",
    Role.USER: "Regular customer account",
}


@dataclass(slots=True)
class User:
    """
    User entity representing both admin and customer accounts.

    Attributes:
        id: Opaque unique identifier
        username: Unique display handle
        email: Unique, normalised (trimmed, lower-cased) email address
        password_hash: bcrypt hash of the password
        role: Role gate the account belongs to
        is_active: False until a customer confirms the emailed OTP
        phone: Optional contact number
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    id: str
    username: str
    email: str
    password_hash: str
    role: Role
    is_active: bool
    phone: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role.value} active={self.is_active}>"
