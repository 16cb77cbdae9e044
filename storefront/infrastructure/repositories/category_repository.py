"""Repository for catalog categories."""

import sqlite3
import uuid
from typing import Any, Dict, List, Optional

from ...domain.models import Category, Page, PageRequest
from ...domain.ports.persistence import CategoryFilter
from ..persistence.sqlite import SQLiteDatabase

_SORT_COLUMNS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "name": "name",
}

_UPDATABLE = {"name", "slug", "title", "description", "image", "is_active"}


class CategoryRepository:
    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create_category(
        self,
        user_id: str,
        name: str,
        slug: str,
        title: Optional[str],
        description: Optional[str],
        image: Optional[str],
        is_active: bool,
    ) -> Category:
        category_id = uuid.uuid4().hex
        now = self._db.format_datetime(self._db.now())
        with self._db.transaction():
            self._db.execute(
                """
                INSERT INTO categories (
                    id, user_id, name, slug, title, description, image,
                    is_active, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (category_id, user_id, name, slug, title, description, image, int(is_active), now, now),
            )
            category = self.get_category_by_id(category_id)
        if not category:
            raise RuntimeError("Failed to persist category.")
        return category

    def update_category(self, category_id: str, changes: Dict[str, Any]) -> Category:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported category fields: {', '.join(sorted(unknown))}")
        if changes:
            values = [int(v) if k == "is_active" else v for k, v in changes.items()]
            assignments = ", ".join(f"{column} = ?" for column in changes)
            with self._db.transaction():
                self._db.execute(
                    f"UPDATE categories SET {assignments}, updated_at = ? WHERE id = ?",
                    [*values, self._db.format_datetime(self._db.now()), category_id],
                )
        category = self.get_category_by_id(category_id)
        if not category:
            raise KeyError(f"Category {category_id} not found")
        return category

    def delete_category(self, category_id: str) -> None:
        with self._db.transaction():
            self._db.execute("DELETE FROM categories WHERE id = ?", (category_id,))

    def get_category_by_id(self, category_id: str) -> Optional[Category]:
        row = self._db.fetchone("SELECT * FROM categories WHERE id = ?", (category_id,))
        return self._row_to_category(row) if row else None

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        row = self._db.fetchone("SELECT * FROM categories WHERE slug = ?", (slug,))
        return self._row_to_category(row) if row else None

    def list_categories(self, filters: CategoryFilter, page: PageRequest) -> Page[Category]:
        clauses: List[str] = []
        params: List[Any] = []
        if filters.name:
            clauses.append("name LIKE ?")
            params.append(f"%{filters.name}%")
        if filters.is_active is not None:
            clauses.append("is_active = ?")
            params.append(int(filters.is_active))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return self._db.paginate(
            "SELECT * FROM categories",
            where,
            params,
            page,
            _SORT_COLUMNS,
            self._row_to_category,
        )

    def count_products_in_category(self, category_id: str) -> int:
        return self._db.count("SELECT COUNT(*) FROM products WHERE category_id = ?", (category_id,))

    def _row_to_category(self, row: sqlite3.Row) -> Category:
        return Category(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            slug=row["slug"],
            title=row["title"],
            description=row["description"],
            image=row["image"],
            is_active=bool(row["is_active"]),
            created_at=self._db.parse_datetime(row["created_at"]),
            updated_at=self._db.parse_datetime(row["updated_at"]),
        )
