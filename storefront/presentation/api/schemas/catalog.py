from __future__ import annotations

from typing import List, Optional

from pydantic import Field, model_validator

from .base import CamelModel


class CategoryCreatePayload(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    title: Optional[str] = Field(default=None, max_length=150)
    description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True


class CategoryUpdatePayload(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    title: Optional[str] = Field(default=None, max_length=150)
    description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None


class StatusPayload(CamelModel):
    status: bool


class ProductCreatePayload(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    category_id: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    short_description: Optional[str] = Field(default=None, max_length=500)
    quantity: int = Field(default=0, ge=0)
    featured: bool = False
    is_active: bool = True
    images: List[str] = Field(default_factory=list, max_length=10)

    @model_validator(mode="after")
    def check_discount(self) -> "ProductCreatePayload":
        if self.discount_price is not None and self.discount_price >= self.price:
            raise ValueError("Discount price must be less than the regular price")
        return self


class ProductUpdatePayload(CamelModel):
    """Partial update. ``images`` are appended after ``removeImages`` indices are dropped."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category_id: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    short_description: Optional[str] = Field(default=None, max_length=500)
    quantity: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    is_active: Optional[bool] = None
    images: Optional[List[str]] = Field(default=None, max_length=10)
    remove_images: Optional[List[int]] = None
