"""Unit tests for the pagination planner."""

from decimal import Decimal

import pytest

from taxinvoice.models.line_item import LineItem
from taxinvoice.models.page_plan import PageHeader, PlannedPage
from taxinvoice.pipeline.pagination import chunk_items, plan_pages


def make_items(count):
    return [
        LineItem(item_id=str(i), name=f"Item {i}", price=Decimal("10"), quantity=1)
        for i in range(count)
    ]


class TestPlanPages:
    """Test item partitioning over pages."""

    def test_no_items_gives_one_empty_page(self):
        plan = plan_pages([])

        assert plan.first_page == []
        assert plan.other_pages == []
        assert plan.total_pages == 1
        assert plan.pages[0].carries_totals

    def test_full_first_page_only(self):
        plan = plan_pages(make_items(7))

        assert len(plan.first_page) == 7
        assert plan.other_pages == []
        assert plan.totals_page.page_number == 1

    def test_one_item_spills_over(self):
        plan = plan_pages(make_items(8))

        assert len(plan.first_page) == 7
        assert [len(page) for page in plan.other_pages] == [1]

    def test_full_continuation_page_reserves_totals_page(self):
        plan = plan_pages(make_items(21))

        assert len(plan.first_page) == 7
        assert [len(page) for page in plan.other_pages] == [14, 0]
        assert plan.total_pages == 3
        assert [page.carries_totals for page in plan.pages] == [False, False, True]

    def test_without_reserved_totals_page(self):
        plan = plan_pages(make_items(21), reserve_totals_page=False)

        assert [len(page) for page in plan.other_pages] == [14]
        assert plan.pages[-1].carries_totals

    @pytest.mark.parametrize("count,expected", [
        (1, []),
        (22, [14, 1]),
        (35, [14, 14, 0]),
        (36, [14, 14, 1]),
    ])
    def test_continuation_sizes(self, count, expected):
        plan = plan_pages(make_items(count))
        assert [len(page) for page in plan.other_pages] == expected

    def test_order_preserved_and_nothing_lost(self):
        items = make_items(30)
        plan = plan_pages(items)

        flattened = list(plan.first_page)
        for page in plan.other_pages:
            flattened.extend(page)
        assert flattened == items

    def test_exactly_one_totals_page(self):
        plan = plan_pages(make_items(50))
        assert sum(1 for page in plan.pages if page.carries_totals) == 1

    def test_start_indexes(self):
        plan = plan_pages(make_items(21))
        assert [page.start_index for page in plan.pages] == [0, 7, 21]

    def test_custom_capacities(self):
        plan = plan_pages(make_items(5), first_page_capacity=2, page_capacity=2)
        assert [len(page.items) for page in plan.pages] == [2, 2, 1]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            plan_pages(make_items(3), first_page_capacity=0)


class TestPageModels:
    """Test page header and page numbering."""

    def test_footer_text(self):
        header = PageHeader(invoice_number="INV-1", invoice_date="2024-01-01", page_number=2, total_pages=3)
        assert header.footer_text == "Invoice No: INV-1 | Invoice Date: 2024-01-01 | Page 2 of 3"

    def test_header_from_page(self):
        page = plan_pages(make_items(8)).pages[1]
        header = page.header("INV-9", None)

        assert header.page_number == 2
        assert header.total_pages == 2
        assert header.invoice_date == ""

    def test_invalid_page_number(self):
        with pytest.raises(ValueError):
            PlannedPage(page_number=0, total_pages=1)
        with pytest.raises(ValueError):
            PlannedPage(page_number=3, total_pages=2)


def test_chunk_items():
    """Chunks keep order and the last chunk may be short."""
    items = make_items(5)
    assert [len(chunk) for chunk in chunk_items(items, 2)] == [2, 2, 1]
    with pytest.raises(ValueError):
        chunk_items(items, 0)
