"""Filtering and pagination over an already-fetched product list.

Pure functions; the UI fetches the full list once per page render and
derives the visible slice from it.
"""
import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ListingFilter:
    status: Optional[str] = None
    start: Optional[str] = None  # inclusive, YYYY-MM-DD
    end: Optional[str] = None  # inclusive, YYYY-MM-DD

    @classmethod
    def from_args(cls, args):
        return cls(
            status=args.get("status") or None,
            start=args.get("start") or None,
            end=args.get("end") or None,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.status or self.start or self.end)

    def as_query(self) -> dict:
        query = {"status": self.status, "start": self.start, "end": self.end}
        return {k: v for k, v in query.items() if v}


@dataclass(frozen=True)
class Page:
    items: list
    page: int
    per_page: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def display_total_pages(self) -> int:
        return max(self.total_pages, 1)


def matches(product: dict, flt: ListingFilter) -> bool:
    if flt.status and product.get("status") != flt.status:
        return False
    # Dates are YYYY-MM-DD strings, so string order is date order.
    product_date = (product.get("date") or "")[:10]
    if flt.start and product_date < flt.start:
        return False
    if flt.end and product_date > flt.end:
        return False
    return True


def filter_products(products: list, flt: ListingFilter) -> list:
    return [p for p in products if matches(p, flt)]


def paginate(items: list, page: int = 1, per_page: int = 3) -> Page:
    """Slice ``items`` to one page. Out-of-range pages clamp into range."""
    total_pages = max(math.ceil(len(items) / per_page), 1)
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return Page(
        items=items[start:start + per_page],
        page=page,
        per_page=per_page,
        total=len(items),
    )
