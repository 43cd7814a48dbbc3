"""Pagination over filtered record sequences."""

import math
from collections.abc import Sequence

from climate_finance.filtering.models import Page, Record

ITEMS_PER_PAGE_OPTIONS = (6, 9, 12, 24, 48)
DEFAULT_ITEMS_PER_PAGE = 9

# Maximum page links shown before collapsing with "..."
MAX_VISIBLE_PAGES = 5

ELLIPSIS = "..."


def paginate(records: Sequence[Record], page: int = 1, per_page: int = DEFAULT_ITEMS_PER_PAGE) -> Page:
    """
    Slice one page out of a record sequence.

    The page number is clamped into the valid range.

    Raises:
        ValueError: If per_page is not positive
    """
    if per_page <= 0:
        raise ValueError(f"per_page must be positive, got {per_page}")

    total_items = len(records)
    total_pages = math.ceil(total_items / per_page)
    page = max(1, min(page, total_pages or 1))

    start = (page - 1) * per_page
    items = list(records[start : start + per_page])

    return Page(
        items=items,
        page=page,
        per_page=per_page,
        total_items=total_items,
        total_pages=total_pages,
        start_item=start + 1 if total_items else 0,
        end_item=min(page * per_page, total_items),
    )


def page_numbers(current: int, total: int, max_visible: int = MAX_VISIBLE_PAGES) -> list[int | str]:
    """
    Page links to render, e.g. [1, "...", 4, 5, 6, "...", 10].

    The first and last pages are always present; pages next to the current
    one are shown and gaps collapse to "...".
    """
    if total <= max_visible:
        return list(range(1, total + 1))

    pages: list[int | str] = [1]
    if current > 3:
        pages.append(ELLIPSIS)

    start = max(2, current - 1)
    end = min(total - 1, current + 1)
    for number in range(start, end + 1):
        if number not in pages:
            pages.append(number)

    if current < total - 2:
        pages.append(ELLIPSIS)

    if total not in pages:
        pages.append(total)
    return pages
