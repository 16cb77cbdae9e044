"""Repository for catalog products."""

import json
import sqlite3
import uuid
from typing import Any, Dict, List, Optional

from ...domain.models import CategorySummary, Page, PageRequest, Product
from ...domain.ports.persistence import ProductFilter
from ..persistence.sqlite import SQLiteDatabase

_SELECT = """
    SELECT p.*, c.name AS category_name, c.slug AS category_slug
    FROM products p
    LEFT JOIN categories c ON c.id = p.category_id
"""

_SORT_COLUMNS = {
    "createdAt": "p.created_at",
    "updatedAt": "p.updated_at",
    "name": "p.name",
    "price": "p.price",
}

_COLUMNS = (
    "category_id",
    "name",
    "slug",
    "title",
    "description",
    "short_description",
    "price",
    "discount_price",
    "quantity",
    "images",
    "featured",
    "is_active",
)


class ProductRepository:
    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create_product(self, user_id: str, values: Dict[str, Any]) -> Product:
        product_id = uuid.uuid4().hex
        now = self._db.format_datetime(self._db.now())
        row_values = self._encode({column: values.get(column) for column in _COLUMNS})
        row_values["images"] = row_values["images"] or "[]"
        row_values["quantity"] = row_values["quantity"] or 0
        row_values["featured"] = row_values["featured"] or 0
        if row_values["is_active"] is None:
            row_values["is_active"] = 1
        columns = ", ".join(["id", "user_id", *row_values, "created_at", "updated_at"])
        placeholders = ", ".join("?" for _ in range(len(row_values) + 4))
        with self._db.transaction():
            self._db.execute(
                f"INSERT INTO products ({columns}) VALUES ({placeholders})",
                [product_id, user_id, *row_values.values(), now, now],
            )
            product = self.get_product_by_id(product_id)
        if not product:
            raise RuntimeError("Failed to persist product.")
        return product

    def update_product(self, product_id: str, changes: Dict[str, Any]) -> Product:
        unknown = set(changes) - set(_COLUMNS)
        if unknown:
            raise ValueError(f"Unsupported product fields: {', '.join(sorted(unknown))}")
        if changes:
            encoded = self._encode(changes)
            assignments = ", ".join(f"{column} = ?" for column in encoded)
            with self._db.transaction():
                self._db.execute(
                    f"UPDATE products SET {assignments}, updated_at = ? WHERE id = ?",
                    [*encoded.values(), self._db.format_datetime(self._db.now()), product_id],
                )
        product = self.get_product_by_id(product_id)
        if not product:
            raise KeyError(f"Product {product_id} not found")
        return product

    def delete_product(self, product_id: str) -> None:
        with self._db.transaction():
            self._db.execute("DELETE FROM products WHERE id = ?", (product_id,))

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        row = self._db.fetchone(f"{_SELECT} WHERE p.id = ?", (product_id,))
        return self._row_to_product(row) if row else None

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        row = self._db.fetchone(f"{_SELECT} WHERE p.slug = ?", (slug,))
        return self._row_to_product(row) if row else None

    def list_products(self, filters: ProductFilter, page: PageRequest) -> Page[Product]:
        clauses: List[str] = []
        params: List[Any] = []
        if filters.name:
            clauses.append("p.name LIKE ?")
            params.append(f"%{filters.name}%")
        if filters.category_id:
            clauses.append("p.category_id = ?")
            params.append(filters.category_id)
        if filters.min_price is not None:
            clauses.append("p.price >= ?")
            params.append(filters.min_price)
        if filters.max_price is not None:
            clauses.append("p.price <= ?")
            params.append(filters.max_price)
        if filters.featured is not None:
            clauses.append("p.featured = ?")
            params.append(int(filters.featured))
        if filters.is_active is not None:
            clauses.append("p.is_active = ?")
            params.append(int(filters.is_active))
        if filters.category_active is not None:
            clauses.append("c.is_active = ?")
            params.append(int(filters.category_active))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return self._db.paginate(_SELECT, where, params, page, _SORT_COLUMNS, self._row_to_product)

    def set_product_rating(self, product_id: str, avg_rating: float, review_count: int) -> None:
        with self._db.transaction():
            self._db.execute(
                "UPDATE products SET avg_rating = ?, review_count = ? WHERE id = ?",
                (avg_rating, review_count, product_id),
            )

    @staticmethod
    def _encode(values: Dict[str, Any]) -> Dict[str, Any]:
        encoded = dict(values)
        if encoded.get("images") is not None:
            encoded["images"] = json.dumps(list(encoded["images"]))
        for flag in ("featured", "is_active"):
            if encoded.get(flag) is not None:
                encoded[flag] = int(encoded[flag])
        return encoded

    def _row_to_product(self, row: sqlite3.Row) -> Product:
        category = None
        if row["category_name"] is not None:
            category = CategorySummary(
                id=row["category_id"],
                name=row["category_name"],
                slug=row["category_slug"],
            )
        return Product(
            id=row["id"],
            user_id=row["user_id"],
            category_id=row["category_id"],
            name=row["name"],
            slug=row["slug"],
            title=row["title"],
            description=row["description"],
            short_description=row["short_description"],
            price=row["price"],
            discount_price=row["discount_price"],
            quantity=row["quantity"],
            images=json.loads(row["images"] or "[]"),
            featured=bool(row["featured"]),
            is_active=bool(row["is_active"]),
            avg_rating=row["avg_rating"],
            review_count=row["review_count"],
            created_at=self._db.parse_datetime(row["created_at"]),
            updated_at=self._db.parse_datetime(row["updated_at"]),
            category=category,
        )
