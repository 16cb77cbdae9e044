"""Repository for one-time password persistence."""

import sqlite3
from datetime import datetime
from typing import Optional

from ...domain.models import Otp
from ..persistence.sqlite import SQLiteDatabase


class OtpRepository:
    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create_otp(self, user_id: str, code: str, expires_at: datetime) -> Otp:
        now = self._db.format_datetime(self._db.now())
        with self._db.transaction():
            cur = self._db.execute(
                """
                INSERT INTO otps (user_id, code, expires_at, is_used, created_at)
                VALUES (?, ?, ?, 0, ?)
                """,
                (user_id, code, self._db.format_datetime(expires_at), now),
            )
            row = self._db.fetchone("SELECT * FROM otps WHERE id = ?", (cur.lastrowid,))
        if not row:
            raise RuntimeError("Failed to persist OTP.")
        return self._row_to_otp(row)

    def get_latest_unused_otp(self, user_id: str) -> Optional[Otp]:
        """Most recent unused code; ties on created_at go to the newest row."""
        row = self._db.fetchone(
            """
            SELECT * FROM otps
            WHERE user_id = ? AND is_used = 0
            ORDER BY created_at DESC, id DESC
            LIMIT 1
            """,
            (user_id,),
        )
        return self._row_to_otp(row) if row else None

    def mark_otp_used(self, otp_id: int) -> None:
        with self._db.transaction():
            self._db.execute("UPDATE otps SET is_used = 1 WHERE id = ?", (otp_id,))

    def mark_all_otps_used(self, user_id: str) -> int:
        with self._db.transaction():
            cur = self._db.execute(
                "UPDATE otps SET is_used = 1 WHERE user_id = ? AND is_used = 0",
                (user_id,),
            )
        return cur.rowcount

    def _row_to_otp(self, row: sqlite3.Row) -> Otp:
        return Otp(
            id=row["id"],
            user_id=row["user_id"],
            code=row["code"],
            expires_at=self._db.parse_datetime(row["expires_at"]),
            is_used=bool(row["is_used"]),
            created_at=self._db.parse_datetime(row["created_at"]),
        )
