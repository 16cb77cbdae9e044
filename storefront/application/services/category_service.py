from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from ...domain.errors import NotFoundError, ValidationError
from ...domain.models import Category, Page, PageRequest, User, slugify
from ...domain.ports.persistence import CategoryFilter, CategoryRepository, TransactionManager

logger = logging.getLogger(__name__)


class CategoryService:
    """Catalog categories; slugs are derived from names and kept unique."""

    def __init__(self, database: TransactionManager, categories: CategoryRepository) -> None:
        self._db = database
        self._categories = categories

    def create_category(
        self,
        admin: User,
        name: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
        is_active: bool = True,
    ) -> Category:
        name_clean = (name or "").strip()
        if not name_clean:
            raise ValidationError("Category name is required")
        slug = self._slug_for(name_clean)
        with self._db.transaction():
            if self._categories.get_category_by_slug(slug):
                raise ValidationError("A category with this name already exists")
            category = self._categories.create_category(
                user_id=admin.id,
                name=name_clean,
                slug=slug,
                title=title or name_clean,
                description=description,
                image=image,
                is_active=is_active,
            )
        logger.info("Admin %s created category %s", admin.id, category.slug)
        return category

    def update_category(self, category_id: str, changes: Dict[str, Any]) -> Tuple[Category, bool]:
        """Apply a partial update. Returns the category and whether anything changed."""
        with self._db.transaction():
            category = self._require(category_id)
            updates: Dict[str, Any] = {}
            if changes.get("name") is not None:
                name_clean = changes["name"].strip()
                if not name_clean:
                    raise ValidationError("Category name is required")
                if name_clean != category.name:
                    slug = self._slug_for(name_clean)
                    existing = self._categories.get_category_by_slug(slug)
                    if existing and existing.id != category.id:
                        raise ValidationError("A category with this name already exists")
                    updates["name"] = name_clean
                    updates["slug"] = slug
            for field in ("title", "description", "image", "is_active"):
                if field in changes and changes[field] is not None and changes[field] != getattr(category, field):
                    updates[field] = changes[field]
            if not updates:
                return category, False
            return self._categories.update_category(category_id, updates), True

    def set_category_status(self, category_id: str, is_active: bool) -> Category:
        with self._db.transaction():
            self._require(category_id)
            return self._categories.update_category(category_id, {"is_active": is_active})

    def delete_category(self, category_id: str) -> None:
        with self._db.transaction():
            self._require(category_id)
            if self._categories.count_products_in_category(category_id):
                raise ValidationError("Cannot delete a category that still has products")
            self._categories.delete_category(category_id)
        logger.info("Deleted category %s", category_id)

    def get_category_by_slug(self, slug: str, active_only: bool = False) -> Category:
        category = self._categories.get_category_by_slug(slug)
        if not category or (active_only and not category.is_active):
            raise NotFoundError("Category not found")
        return category

    def list_categories(
        self,
        page: PageRequest,
        name: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Page[Category]:
        return self._categories.list_categories(CategoryFilter(name=name, is_active=is_active), page)

    def _require(self, category_id: str) -> Category:
        category = self._categories.get_category_by_id(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    @staticmethod
    def _slug_for(name: str) -> str:
        slug = slugify(name)
        if not slug.strip("-"):
            raise ValidationError("Category name must contain letters or digits")
        return slug
