"""Page plan data models: how line items are laid out over printed pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .line_item import LineItem


@dataclass(frozen=True)
class PageHeader:
    """Running header/footer context stamped on every page."""

    invoice_number: str
    invoice_date: str
    page_number: int
    total_pages: int

    @property
    def footer_text(self) -> str:
        return (
            f"Invoice No: {self.invoice_number} | Invoice Date: {self.invoice_date} | "
            f"Page {self.page_number} of {self.total_pages}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invoice_number": self.invoice_number,
            "invoice_date": self.invoice_date,
            "page_number": self.page_number,
            "total_pages": self.total_pages,
            "footer_text": self.footer_text,
        }


@dataclass(frozen=True)
class PlannedPage:
    """A single printed page of the invoice.

    Attributes:
        page_number: Page number (starts at 1)
        total_pages: Number of pages in the plan
        items: Line items on this page, in invoice order
        start_index: Zero-based position of the first item in the invoice
            (serial numbers on this page start at start_index + 1)
        carries_totals: True for the one page that renders the grand-total
            row and the footer clauses (words, bank, terms, signature)
    """

    page_number: int
    total_pages: int
    items: List[LineItem] = field(default_factory=list)
    start_index: int = 0
    carries_totals: bool = False

    def __post_init__(self):
        """Validate page numbering."""
        if self.page_number < 1:
            raise ValueError(f"Page number must be >= 1, got {self.page_number}")
        if self.page_number > self.total_pages:
            raise ValueError(
                f"Page number {self.page_number} exceeds total pages {self.total_pages}"
            )

    @property
    def is_first(self) -> bool:
        return self.page_number == 1

    def header(self, invoice_number: Optional[str], invoice_date: Optional[str]) -> PageHeader:
        """Build the running header for this page."""
        return PageHeader(
            invoice_number=invoice_number or "",
            invoice_date=invoice_date or "",
            page_number=self.page_number,
            total_pages=self.total_pages,
        )


@dataclass(frozen=True)
class PagePlan:
    """Partition of an invoice's items over pages.

    ``first_page`` and ``other_pages`` are the item lists; ``pages`` holds the
    same partition with numbering and the totals flag.
    """

    first_page: List[LineItem]
    other_pages: List[List[LineItem]]
    pages: List[PlannedPage]

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def totals_page(self) -> PlannedPage:
        """The page that carries the grand-total row (always the last one)."""
        return self.pages[-1]
