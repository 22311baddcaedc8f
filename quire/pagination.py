"""Listing pagination for Quire.

Splits an ordered run of items into fixed-size listing pages. The first
page lives at the listing's base URL and page ``n`` at ``<base>page/n/``,
matching the URLs a Hugo theme links to.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .content import ContentItem


@dataclass(frozen=True)
class Pager:
    """One page of a listing.

    Attributes:
        number: 1-based page number.
        items: Items shown on this page.
        total_pages: Number of pages in the listing.
        base_url: URL of the listing's first page.
    """

    number: int
    items: tuple[ContentItem, ...]
    total_pages: int
    base_url: str

    @property
    def url(self) -> str:
        return page_url(self.base_url, self.number)

    @property
    def has_prev(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages

    @property
    def prev_url(self) -> str | None:
        return page_url(self.base_url, self.number - 1) if self.has_prev else None

    @property
    def next_url(self) -> str | None:
        return page_url(self.base_url, self.number + 1) if self.has_next else None


def page_url(base_url: str, number: int) -> str:
    """URL of page ``number`` of the listing rooted at ``base_url``."""
    base = base_url if base_url.endswith("/") else f"{base_url}/"
    if number <= 1:
        return base
    return f"{base}page/{number}/"


def paginate(items: Sequence[ContentItem], size: int, base_url: str = "/") -> list[Pager]:
    """Split items into listing pages of ``size`` items each.

    Items keep the order they are given in; callers sort first.

    Args:
        items: Items to paginate.
        size: Items per page.
        base_url: URL of the first page.

    Returns:
        ``ceil(len(items) / size)`` pagers; none for an empty listing.

    Raises:
        ValueError: If size is not positive.
    """
    if size <= 0:
        raise ValueError(f"page size must be positive, got {size}")
    total = math.ceil(len(items) / size)
    return [
        Pager(
            number=number,
            items=tuple(items[(number - 1) * size : number * size]),
            total_pages=total,
            base_url=base_url,
        )
        for number in range(1, total + 1)
    ]
