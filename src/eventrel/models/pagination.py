"""Pagination metadata returned by list endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from .base import Entity


class Pagination(Entity):
    """Laravel-style page metadata.

    Missing keys fall back to a single, empty first page.
    """

    current_page: int = 1
    last_page: int = 1
    per_page: int = 15
    total: int = 0
    from_: int = Field(default=0, alias="from")
    to: int = 0
    first_page_url: str | None = None
    last_page_url: str | None = None
    next_page_url: str | None = None
    prev_page_url: str | None = None
    path: str = ""
    links: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("from_", "to", mode="before")
    @classmethod
    def _null_index(cls, value: Any) -> Any:
        # Empty pages report from/to as null.
        return 0 if value is None else value

    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    def has_previous_page(self) -> bool:
        return self.current_page > 1

    def is_first_page(self) -> bool:
        return self.current_page == 1

    def is_last_page(self) -> bool:
        return self.current_page == self.last_page

    def to_meta(self) -> dict[str, Any]:
        """Compact summary used by ``get_pagination_meta``."""
        return {
            "current_page": self.current_page,
            "last_page": self.last_page,
            "per_page": self.per_page,
            "total": self.total,
            "from": self.from_,
            "to": self.to,
            "has_more_pages": self.has_more_pages(),
        }


__all__ = ["Pagination"]
