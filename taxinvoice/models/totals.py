"""Computed totals for line items and the invoice as a whole."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LineTotals:
    """Derived figures for a single line item.

    Values are exact (unrounded) Decimals; rounding happens when formatting.
    """

    taxable_value: Decimal
    rate: Decimal
    tax_amount: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    """Aggregate figures for an invoice.

    Attributes:
        quantity: Sum of item quantities
        taxable_value: Sum of price × quantity (the subtotal)
        tax_amount: Sum of per-item tax
        line_total: Sum of per-item totals (taxable value + tax), items only
        packaging: Packaging charge
        transportation_and_others: Transportation/other charges
        grand_total: line_total + packaging + transportation_and_others
    """

    quantity: Decimal
    taxable_value: Decimal
    tax_amount: Decimal
    line_total: Decimal
    packaging: Decimal = Decimal("0")
    transportation_and_others: Decimal = Decimal("0")
    grand_total: Decimal = Decimal("0")

    @property
    def subtotal(self) -> Decimal:
        """Alias for taxable_value, the name used on stored invoices."""
        return self.taxable_value
