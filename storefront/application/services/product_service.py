from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...domain.errors import NotFoundError, ValidationError
from ...domain.models import MAX_PRODUCT_IMAGES, Page, PageRequest, Product, User, slugify
from ...domain.ports.persistence import (
    CategoryRepository,
    ProductFilter,
    ProductRepository,
    TransactionManager,
)

logger = logging.getLogger(__name__)

_EDITABLE = (
    "category_id",
    "name",
    "title",
    "description",
    "short_description",
    "price",
    "discount_price",
    "quantity",
    "featured",
    "is_active",
)


class ProductService:
    """Catalog products with price, stock and image rules."""

    def __init__(
        self,
        database: TransactionManager,
        products: ProductRepository,
        categories: CategoryRepository,
    ) -> None:
        self._db = database
        self._products = products
        self._categories = categories

    # Admin --------------------------------------------------------------
    def create_product(self, admin: User, values: Dict[str, Any]) -> Product:
        name = (values.get("name") or "").strip()
        if not name or values.get("price") is None or not values.get("category_id"):
            raise ValidationError("Product name, price, and category are required")
        images = list(values.get("images") or [])
        record = {key: values.get(key) for key in _EDITABLE}
        record.update(name=name, slug=self._slug_for(name), images=images)
        record["title"] = record["title"] or name
        self._validate(record)
        with self._db.transaction():
            if not self._categories.get_category_by_id(record["category_id"]):
                raise NotFoundError("Category not found")
            if self._products.get_product_by_slug(record["slug"]):
                raise ValidationError("A product with this name already exists")
            product = self._products.create_product(admin.id, record)
        logger.info("Admin %s created product %s", admin.id, product.slug)
        return product

    def update_product(
        self,
        product_id: str,
        changes: Dict[str, Any],
        new_images: Optional[Sequence[str]] = None,
        remove_images: Optional[Sequence[int]] = None,
    ) -> Tuple[Product, bool]:
        """Apply a partial update. Returns the product and whether anything changed.

        ``remove_images`` holds indices into the current image list; removal is
        applied before ``new_images`` are appended. Sending ``discount_price`` as
        null or zero removes the discount.
        """
        with self._db.transaction():
            product = self._require(product_id)
            updates: Dict[str, Any] = {}
            for field in _EDITABLE:
                if field not in changes:
                    continue
                value = changes[field]
                if field == "discount_price":
                    value = value or None
                elif value is None:
                    continue
                if value != getattr(product, field):
                    updates[field] = value

            if "name" in updates:
                name = updates["name"].strip()
                if not name:
                    raise ValidationError("Product name is required")
                slug = self._slug_for(name)
                existing = self._products.get_product_by_slug(slug)
                if existing and existing.id != product.id:
                    raise ValidationError("A product with this name already exists")
                updates.update(name=name, slug=slug)

            if "category_id" in updates and not self._categories.get_category_by_id(updates["category_id"]):
                raise NotFoundError("Category not found")

            images = self._merge_images(product.images, new_images, remove_images)
            if images != product.images:
                updates["images"] = images

            if not updates:
                return product, False
            merged = {
                "price": updates.get("price", product.price),
                "discount_price": updates.get("discount_price", product.discount_price),
                "quantity": updates.get("quantity", product.quantity),
                "images": updates.get("images", product.images),
            }
            self._validate(merged)
            return self._products.update_product(product_id, updates), True

    def set_product_status(self, product_id: str, is_active: bool) -> Product:
        with self._db.transaction():
            self._require(product_id)
            return self._products.update_product(product_id, {"is_active": is_active})

    def delete_product(self, product_id: str) -> None:
        with self._db.transaction():
            self._require(product_id)
            self._products.delete_product(product_id)
        logger.info("Deleted product %s", product_id)

    # Reads --------------------------------------------------------------
    def get_product(self, product_id: str, public: bool = False) -> Product:
        product = self._products.get_product_by_id(product_id)
        if not product or (public and not product.is_active):
            raise NotFoundError("Product not found")
        return product

    def get_product_by_slug(self, slug: str, public: bool = False) -> Product:
        product = self._products.get_product_by_slug(slug)
        if not product or (public and not product.is_active):
            raise NotFoundError("Product not found")
        return product

    def list_products(self, filters: ProductFilter, page: PageRequest) -> Page[Product]:
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise ValidationError("minPrice cannot be greater than maxPrice")
        return self._products.list_products(filters, page)

    def featured_products(self, limit: int = 8) -> Page[Product]:
        return self._products.list_products(
            ProductFilter(featured=True, is_active=True, category_active=True),
            PageRequest(page=1, limit=limit, sort_by="createdAt", sort_order="DESC"),
        )

    def products_by_category_id(self, category_id: str, page: PageRequest) -> Page[Product]:
        category = self._categories.get_category_by_id(category_id)
        if not category or not category.is_active:
            raise NotFoundError("Category not found")
        return self._products.list_products(ProductFilter(category_id=category_id, is_active=True), page)

    def products_by_category_slug(self, slug: str, page: PageRequest) -> Page[Product]:
        category = self._categories.get_category_by_slug(slug)
        if not category or not category.is_active:
            raise NotFoundError("Category not found or inactive")
        return self._products.list_products(ProductFilter(category_id=category.id, is_active=True), page)

    # Helpers ------------------------------------------------------------
    def _require(self, product_id: str) -> Product:
        product = self._products.get_product_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _merge_images(
        current: List[str],
        new_images: Optional[Sequence[str]],
        remove_images: Optional[Sequence[int]],
    ) -> List[str]:
        images = list(current)
        if remove_images:
            for index in remove_images:
                if index < 0 or index >= len(current):
                    raise ValidationError(f"Image index {index} is out of range")
            drop = set(remove_images)
            images = [image for position, image in enumerate(current) if position not in drop]
        if new_images:
            images.extend(new_images)
        return images

    @staticmethod
    def _validate(values: Dict[str, Any]) -> None:
        price = values.get("price")
        discount = values.get("discount_price")
        quantity = values.get("quantity")
        if price is not None and price < 0:
            raise ValidationError("Price cannot be negative")
        if discount is not None:
            if discount < 0:
                raise ValidationError("Discount price cannot be negative")
            if price is not None and discount >= price:
                raise ValidationError("Discount price must be less than the regular price")
        if quantity is not None and quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        if len(values.get("images") or []) > MAX_PRODUCT_IMAGES:
            raise ValidationError(f"A product can have at most {MAX_PRODUCT_IMAGES} images")

    @staticmethod
    def _slug_for(name: str) -> str:
        slug = slugify(name)
        if not slug.strip("-"):
            raise ValidationError("Product name must contain letters or digits")
        return slug
