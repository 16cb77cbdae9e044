"""Repository for refresh token persistence."""

import sqlite3
from datetime import datetime
from typing import Optional

from ...domain.models import RefreshToken
from ..persistence.sqlite import SQLiteDatabase


class RefreshTokenRepository:
    """Stores opaque refresh tokens; rows are revoked, never edited otherwise."""

    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create_refresh_token(self, user_id: str, token: str, expires_at: datetime) -> RefreshToken:
        now = self._db.format_datetime(self._db.now())
        with self._db.transaction():
            cur = self._db.execute(
                """
                INSERT INTO refresh_tokens (token, user_id, expires_at, is_revoked, created_at)
                VALUES (?, ?, ?, 0, ?)
                """,
                (token, user_id, self._db.format_datetime(expires_at), now),
            )
            row = self._db.fetchone("SELECT * FROM refresh_tokens WHERE id = ?", (cur.lastrowid,))
        if not row:
            raise RuntimeError("Failed to persist refresh token.")
        return self._row_to_token(row)

    def get_refresh_token(self, token: str) -> Optional[RefreshToken]:
        row = self._db.fetchone("SELECT * FROM refresh_tokens WHERE token = ?", (token,))
        return self._row_to_token(row) if row else None

    def revoke_refresh_token(self, token: str, user_id: Optional[str] = None) -> bool:
        """Revoke a live token. Returns False when nothing changed."""
        query = "UPDATE refresh_tokens SET is_revoked = 1 WHERE token = ? AND is_revoked = 0"
        params = [token]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        with self._db.transaction():
            cur = self._db.execute(query, params)
        return cur.rowcount > 0

    def revoke_all_for_user(self, user_id: str) -> int:
        with self._db.transaction():
            cur = self._db.execute(
                "UPDATE refresh_tokens SET is_revoked = 1 WHERE user_id = ? AND is_revoked = 0",
                (user_id,),
            )
        return cur.rowcount

    def delete_stale_refresh_tokens(self, now: datetime) -> int:
        """Drop rows that can never be used again."""
        with self._db.transaction():
            cur = self._db.execute(
                "DELETE FROM refresh_tokens WHERE is_revoked = 1 OR expires_at <= ?",
                (self._db.format_datetime(now),),
            )
        return cur.rowcount

    def _row_to_token(self, row: sqlite3.Row) -> RefreshToken:
        return RefreshToken(
            id=row["id"],
            token=row["token"],
            user_id=row["user_id"],
            expires_at=self._db.parse_datetime(row["expires_at"]),
            is_revoked=bool(row["is_revoked"]),
            created_at=self._db.parse_datetime(row["created_at"]),
        )
