"""Repository for product reviews."""

import sqlite3
import uuid
from typing import Optional, Tuple

from ...domain.models import Page, PageRequest, Review
from ..persistence.sqlite import SQLiteDatabase

_SELECT = """
    SELECT r.*,
        u.username AS author_username,
        p.name AS product_name,
        p.slug AS product_slug
    FROM reviews r
    LEFT JOIN users u ON u.id = r.user_id
    LEFT JOIN products p ON p.id = r.product_id
"""

_SORT_COLUMNS = {
    "createdAt": "r.created_at",
    "updatedAt": "r.updated_at",
    "rating": "r.rating",
}


class ReviewRepository:
    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create_review(
        self,
        product_id: str,
        user_id: str,
        rating: int,
        title: Optional[str],
        comment: str,
    ) -> Review:
        review_id = uuid.uuid4().hex
        now = self._db.format_datetime(self._db.now())
        with self._db.transaction():
            self._db.execute(
                """
                INSERT INTO reviews (
                    id, product_id, user_id, rating, title, comment, is_approved, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (review_id, product_id, user_id, rating, title, comment, now, now),
            )
            review = self.get_review(review_id)
        if not review:
            raise RuntimeError("Failed to persist review.")
        return review

    def get_review(self, review_id: str) -> Optional[Review]:
        row = self._db.fetchone(f"{_SELECT} WHERE r.id = ?", (review_id,))
        return self._row_to_review(row) if row else None

    def get_user_review_for_product(self, user_id: str, product_id: str) -> Optional[Review]:
        row = self._db.fetchone(
            f"{_SELECT} WHERE r.user_id = ? AND r.product_id = ?", (user_id, product_id)
        )
        return self._row_to_review(row) if row else None

    def list_product_reviews(self, product_id: str, page: PageRequest) -> Page[Review]:
        return self._db.paginate(
            _SELECT,
            "WHERE r.product_id = ? AND r.is_approved = 1",
            [product_id],
            page,
            _SORT_COLUMNS,
            self._row_to_review,
        )

    def list_user_reviews(self, user_id: str, page: PageRequest) -> Page[Review]:
        return self._db.paginate(
            _SELECT, "WHERE r.user_id = ?", [user_id], page, _SORT_COLUMNS, self._row_to_review
        )

    def list_pending_reviews(self, page: PageRequest) -> Page[Review]:
        return self._db.paginate(
            _SELECT, "WHERE r.is_approved = 0", [], page, _SORT_COLUMNS, self._row_to_review
        )

    def approve_review(self, review_id: str) -> Review:
        with self._db.transaction():
            self._db.execute(
                "UPDATE reviews SET is_approved = 1, updated_at = ? WHERE id = ?",
                (self._db.format_datetime(self._db.now()), review_id),
            )
        review = self.get_review(review_id)
        if not review:
            raise KeyError(f"Review {review_id} not found")
        return review

    def delete_review(self, review_id: str) -> None:
        with self._db.transaction():
            self._db.execute("DELETE FROM reviews WHERE id = ?", (review_id,))

    def approved_rating_summary(self, product_id: str) -> Tuple[float, int]:
        """Average rating (two decimals) and count of approved reviews."""
        row = self._db.fetchone(
            "SELECT AVG(rating) AS average, COUNT(*) AS total FROM reviews "
            "WHERE product_id = ? AND is_approved = 1",
            (product_id,),
        )
        if not row or not row["total"]:
            return 0.0, 0
        return round(float(row["average"]), 2), int(row["total"])

    def _row_to_review(self, row: sqlite3.Row) -> Review:
        return Review(
            id=row["id"],
            product_id=row["product_id"],
            user_id=row["user_id"],
            rating=row["rating"],
            title=row["title"],
            comment=row["comment"],
            is_approved=bool(row["is_approved"]),
            created_at=self._db.parse_datetime(row["created_at"]),
            updated_at=self._db.parse_datetime(row["updated_at"]),
            author_username=row["author_username"],
            product_name=row["product_name"],
            product_slug=row["product_slug"],
        )
