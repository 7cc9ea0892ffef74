"""Pydantic models shared by several endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from jiffyjobs.domain.entities import Page


class PaginationRead(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_page(cls, page: Page) -> "PaginationRead":
        return cls(
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
            has_next=page.has_next,
            has_prev=page.has_prev,
        )


__all__ = ["PaginationRead"]
