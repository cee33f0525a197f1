from dataclasses import dataclass
from math import ceil
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class Page(Generic[T]):
    """Generic pagination envelope."""
    items: list[T]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool

    @classmethod
    def build(cls, items: list[T], total_count: int, page_number: int, page_size: int) -> "Page[T]":
        total_pages = ceil(total_count / page_size) if page_size else 0
        return cls(
            items=items,
            total_count=total_count,
            page_number=page_number,
            page_size=page_size,
            total_pages=total_pages,
            has_previous_page=page_number > 1,
            has_next_page=page_number < total_pages,
        )


def clamp_paging(page_number: int, page_size: int, default_size: int, max_size: int) -> tuple[int, int]:
    """Silently pull paging input back into range: page >= 1, 1 <= size <= max."""
    if page_number < 1:
        page_number = 1
    if page_size < 1:
        page_size = default_size
    if page_size > max_size:
        page_size = max_size
    return page_number, page_size
