"""Repository for product comments and their replies."""

import sqlite3
import uuid
from typing import Dict, List, Optional

from ...domain.models import Comment, Page, PageRequest
from ..persistence.sqlite import SQLiteDatabase

_SELECT = """
    SELECT cm.*,
        u.username AS author_username,
        p.name AS product_name,
        p.slug AS product_slug,
        parent.content AS parent_content
    FROM comments cm
    LEFT JOIN users u ON u.id = cm.user_id
    LEFT JOIN products p ON p.id = cm.product_id
    LEFT JOIN comments parent ON parent.id = cm.parent_id
"""

_SORT_COLUMNS = {
    "createdAt": "cm.created_at",
    "updatedAt": "cm.updated_at",
}


class CommentRepository:
    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create_comment(
        self,
        product_id: str,
        user_id: str,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Comment:
        comment_id = uuid.uuid4().hex
        now = self._db.format_datetime(self._db.now())
        with self._db.transaction():
            self._db.execute(
                """
                INSERT INTO comments (
                    id, product_id, user_id, parent_id, content, is_approved, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (comment_id, product_id, user_id, parent_id, content, now, now),
            )
            comment = self.get_comment(comment_id)
        if not comment:
            raise RuntimeError("Failed to persist comment.")
        return comment

    def get_comment(self, comment_id: str) -> Optional[Comment]:
        row = self._db.fetchone(f"{_SELECT} WHERE cm.id = ?", (comment_id,))
        return self._row_to_comment(row) if row else None

    def list_product_comments(self, product_id: str, page: PageRequest) -> Page[Comment]:
        """Approved root comments for a product, each carrying its approved replies."""
        result = self._db.paginate(
            _SELECT,
            "WHERE cm.product_id = ? AND cm.parent_id IS NULL AND cm.is_approved = 1",
            [product_id],
            page,
            _SORT_COLUMNS,
            self._row_to_comment,
        )
        if result.items:
            replies = self._approved_replies([comment.id for comment in result.items])
            for comment in result.items:
                comment.replies = replies.get(comment.id, [])
        return result

    def list_user_comments(self, user_id: str, page: PageRequest) -> Page[Comment]:
        return self._db.paginate(
            _SELECT, "WHERE cm.user_id = ?", [user_id], page, _SORT_COLUMNS, self._row_to_comment
        )

    def list_pending_comments(self, page: PageRequest) -> Page[Comment]:
        return self._db.paginate(
            _SELECT, "WHERE cm.is_approved = 0", [], page, _SORT_COLUMNS, self._row_to_comment
        )

    def approve_comment(self, comment_id: str) -> Comment:
        with self._db.transaction():
            self._db.execute(
                "UPDATE comments SET is_approved = 1, updated_at = ? WHERE id = ?",
                (self._db.format_datetime(self._db.now()), comment_id),
            )
        comment = self.get_comment(comment_id)
        if not comment:
            raise KeyError(f"Comment {comment_id} not found")
        return comment

    def delete_comment(self, comment_id: str) -> None:
        """Delete a comment; replies go with it through the cascade."""
        with self._db.transaction():
            self._db.execute("DELETE FROM comments WHERE id = ?", (comment_id,))

    def _approved_replies(self, parent_ids: List[str]) -> Dict[str, List[Comment]]:
        placeholders = ", ".join("?" for _ in parent_ids)
        rows = self._db.fetchall(
            f"""{_SELECT}
            WHERE cm.parent_id IN ({placeholders}) AND cm.is_approved = 1
            ORDER BY cm.created_at ASC
            """,
            parent_ids,
        )
        grouped: Dict[str, List[Comment]] = {}
        for row in rows:
            reply = self._row_to_comment(row)
            grouped.setdefault(reply.parent_id, []).append(reply)
        return grouped

    def _row_to_comment(self, row: sqlite3.Row) -> Comment:
        return Comment(
            id=row["id"],
            product_id=row["product_id"],
            user_id=row["user_id"],
            parent_id=row["parent_id"],
            content=row["content"],
            is_approved=bool(row["is_approved"]),
            created_at=self._db.parse_datetime(row["created_at"]),
            updated_at=self._db.parse_datetime(row["updated_at"]),
            author_username=row["author_username"],
            product_name=row["product_name"],
            product_slug=row["product_slug"],
            parent_content=row["parent_content"],
        )
