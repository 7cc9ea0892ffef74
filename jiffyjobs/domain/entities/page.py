"""Pagination container returned by listing use cases."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results together with its position in the full listing."""

    items: list[T]
    page: int
    limit: int
    total: int
    unread_count: int | None = field(default=None)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


__all__ = ["Page"]
