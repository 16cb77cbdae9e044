from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

MAX_PRODUCT_IMAGES = 10

_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACES = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Derive the URL slug used for categories and products from a display name."""
    slug = _SLUG_STRIP.sub("", name.strip().lower())
    return _SLUG_SPACES.sub("-", slug)


@dataclass(slots=True)
class Category:
    id: str
    user_id: str
    name: str
    slug: str
    title: Optional[str]
    description: Optional[str]
    image: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class CategorySummary:
    id: str
    name: str
    slug: str


@dataclass(slots=True)
class Product:
    id: str
    user_id: str
    category_id: str
    name: str
    slug: str
    title: Optional[str]
    description: Optional[str]
    short_description: Optional[str]
    price: float
    discount_price: Optional[float]
    quantity: int
    images: List[str]
    featured: bool
    is_active: bool
    avg_rating: float
    review_count: int
    created_at: datetime
    updated_at: datetime
    category: Optional[CategorySummary] = field(default=None)

    @property
    def featured_image(self) -> Optional[str]:
        return self.images[0] if self.images else None
