from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class PageRequest:
    page: int = 1
    limit: int = 10
    sort_by: str = "createdAt"
    sort_order: str = "DESC"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class Page(Generic[T]):
    items: List[T]
    total_items: int
    current_page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total_items / self.limit)
