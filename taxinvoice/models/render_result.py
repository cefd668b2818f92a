"""Render result data models: the structure handed to a rendering skin."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .page_plan import PageHeader
from .totals import InvoiceTotals
from .validation_result import ValidationResult


@dataclass(frozen=True)
class LineRow:
    """One display row of the item table, all values pre-formatted.

    ``area`` is None when the area column is switched off.
    """

    serial: int
    item_id: str
    name: str
    hsn_code: str
    quantity: str
    area: Optional[str]
    rate: str
    taxable_value: str
    tax_rate: str
    tax_amount: str
    total_amount: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "serial": self.serial,
            "item_id": self.item_id,
            "name": self.name,
            "hsn_code": self.hsn_code,
            "quantity": self.quantity,
            "area": self.area,
            "rate": self.rate,
            "taxable_value": self.taxable_value,
            "tax_rate": self.tax_rate,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
        }


@dataclass(frozen=True)
class TotalsRow:
    """The grand-total row rendered once, on the totals page."""

    quantity: str
    taxable_value: str
    tax_amount: str
    total_amount: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quantity": self.quantity,
            "taxable_value": self.taxable_value,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
        }


@dataclass(frozen=True)
class RenderedPage:
    """A page ready for a skin: header context, rows and the optional totals row."""

    header: PageHeader
    rows: List[LineRow] = field(default_factory=list)
    carries_totals: bool = False
    totals_row: Optional[TotalsRow] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": self.header.to_dict(),
            "rows": [row.to_dict() for row in self.rows],
            "carries_totals": self.carries_totals,
            "totals_row": self.totals_row.to_dict() if self.totals_row else None,
        }


@dataclass(frozen=True)
class InvoiceRenderResult:
    """Everything a rendering skin needs for one invoice.

    Attributes:
        invoice_number: Invoice number
        invoice_date: Invoice date as stored
        pages: Rendered pages, first page first
        totals: Recomputed (authoritative) totals
        total_in_words: Grand total in words
        validation: Validation findings (warnings only, when rendered)
        ship_to_populated: True if the Ship-To party carries any data
        bill_to_name: Bill-To party name
        amounts: Formatted amount summary (grouped, two decimals)
    """

    invoice_number: str
    invoice_date: str
    pages: List[RenderedPage]
    totals: InvoiceTotals
    total_in_words: str
    validation: ValidationResult
    ship_to_populated: bool = False
    bill_to_name: str = ""
    amounts: Dict[str, str] = field(default_factory=dict)

    @property
    def first_page(self) -> List[LineRow]:
        return self.pages[0].rows

    @property
    def other_pages(self) -> List[List[LineRow]]:
        return [page.rows for page in self.pages[1:]]

    @property
    def status(self) -> str:
        return self.validation.status

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain JSON-compatible types (Decimals as strings)."""
        totals = self.totals
        return {
            "invoice_number": self.invoice_number,
            "invoice_date": self.invoice_date,
            "bill_to_name": self.bill_to_name,
            "ship_to_populated": self.ship_to_populated,
            "first_page": [row.to_dict() for row in self.first_page],
            "other_pages": [[row.to_dict() for row in rows] for rows in self.other_pages],
            "pages": [page.to_dict() for page in self.pages],
            "totals": {
                "quantity": str(totals.quantity),
                "taxable_value": str(totals.taxable_value),
                "tax_amount": str(totals.tax_amount),
                "line_total": str(totals.line_total),
                "packaging": str(totals.packaging),
                "transportation_and_others": str(totals.transportation_and_others),
                "grand_total": str(totals.grand_total),
            },
            "amounts": dict(self.amounts),
            "total_in_words": self.total_in_words,
            "validation": self.validation.to_dict(),
        }
