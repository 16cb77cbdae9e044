from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import CamelModel


class CommentCreatePayload(CamelModel):
    product_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=2000)


class CommentReplyPayload(CamelModel):
    parent_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=2000)


class ReviewCreatePayload(CamelModel):
    product_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = Field(default=None, max_length=200)
    comment: str = Field(..., min_length=1, max_length=2000)
