"""Repository for User persistence."""

import sqlite3
import uuid
from typing import Optional

from ...domain.models import Role, User
from ..persistence.sqlite import SQLiteDatabase


class UserRepository:
    """Repository for managing User entities in SQLite."""

    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role,
        is_active: bool,
        phone: Optional[str] = None,
    ) -> User:
        """Create a new account. The email must already be normalised."""
        user_id = uuid.uuid4().hex
        now = self._db.format_datetime(self._db.now())
        with self._db.transaction():
            self._db.execute(
                """
                INSERT INTO users (
                    id, username, email, password_hash, phone, role,
                    is_active, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (user_id, username, email, password_hash, phone, role.value, int(is_active), now, now),
            )
            user = self.get_user_by_id(user_id)
        if not user:
            raise RuntimeError("Failed to persist user.")
        return user

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        row = self._db.fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
        return self._row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by normalised email."""
        row = self._db.fetchone("SELECT * FROM users WHERE email = ?", (email,))
        return self._row_to_user(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        row = self._db.fetchone("SELECT * FROM users WHERE username = ?", (username,))
        return self._row_to_user(row) if row else None

    def set_user_active(self, user_id: str, is_active: bool) -> User:
        """Flip the activation flag, used once the emailed OTP is confirmed."""
        return self._update(user_id, {"is_active": int(is_active)})

    def update_user_password(self, user_id: str, password_hash: str) -> User:
        return self._update(user_id, {"password_hash": password_hash})

    def update_user_details(
        self,
        user_id: str,
        *,
        username: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        changes = {}
        if username is not None:
            changes["username"] = username
        if phone is not None:
            changes["phone"] = phone
        return self._update(user_id, changes)

    def _update(self, user_id: str, changes: dict) -> User:
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            params = [*changes.values(), self._db.format_datetime(self._db.now()), user_id]
            with self._db.transaction():
                self._db.execute(
                    f"UPDATE users SET {assignments}, updated_at = ? WHERE id = ?",
                    params,
                )
        user = self.get_user_by_id(user_id)
        if not user:
            raise KeyError(f"User {user_id} not found")
        return user

    def _row_to_user(self, row: sqlite3.Row) -> User:
        """Convert database row to User entity."""
        return User(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            role=Role(row["role"]),
            is_active=bool(row["is_active"]),
            phone=row["phone"],
            created_at=self._db.parse_datetime(row["created_at"]),
            updated_at=self._db.parse_datetime(row["updated_at"]),
        )
