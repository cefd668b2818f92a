"""Split an invoice's line items over fixed-capacity printed pages.

Rules:
- The first page holds up to ``first_page_capacity`` items (header, parties
  and item table share it).
- Remaining items go on continuation pages of up to ``page_capacity`` items,
  in invoice order, never split or reordered.
- The last page carries the grand-total row and footer clauses. When the
  last continuation page is exactly full there is no room for them, so an
  empty page is appended to carry them (``reserve_totals_page``).
- Zero items still gives one empty first page.
"""

import logging
from typing import List, Sequence

from ..models.line_item import LineItem
from ..models.page_plan import PagePlan, PlannedPage

logger = logging.getLogger(__name__)

FIRST_PAGE_CAPACITY = 7
PAGE_CAPACITY = 14


def chunk_items(items: Sequence[LineItem], size: int) -> List[List[LineItem]]:
    """Split items into consecutive chunks of at most ``size``."""
    if size < 1:
        raise ValueError(f"Chunk size must be >= 1, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def plan_pages(
    items: Sequence[LineItem],
    first_page_capacity: int = FIRST_PAGE_CAPACITY,
    page_capacity: int = PAGE_CAPACITY,
    reserve_totals_page: bool = True,
) -> PagePlan:
    """Partition items into a first page and continuation pages.

    Args:
        items: Line items in invoice order
        first_page_capacity: Maximum items on the first page
        page_capacity: Maximum items on each continuation page
        reserve_totals_page: Append an empty page when the last continuation
            page is full, so totals and footer have room

    Returns:
        PagePlan; exactly one page has carries_totals=True (the last)
    """
    if first_page_capacity < 1 or page_capacity < 1:
        raise ValueError(
            f"Page capacities must be >= 1, got {first_page_capacity} and {page_capacity}"
        )

    items = list(items)
    first_page = items[:first_page_capacity]
    other_pages = chunk_items(items[first_page_capacity:], page_capacity)

    if reserve_totals_page and other_pages and len(other_pages[-1]) == page_capacity:
        other_pages.append([])

    all_items = [first_page] + other_pages
    total_pages = len(all_items)

    pages = []
    start_index = 0
    for page_number, page_items in enumerate(all_items, start=1):
        pages.append(PlannedPage(
            page_number=page_number,
            total_pages=total_pages,
            items=page_items,
            start_index=start_index,
            carries_totals=page_number == total_pages,
        ))
        start_index += len(page_items)

    logger.debug(f"Planned {len(items)} item(s) over {total_pages} page(s)")

    return PagePlan(first_page=first_page, other_pages=other_pages, pages=pages)
