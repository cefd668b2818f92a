"""Line-item and invoice totals with cent-level correctness."""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from ..models.invoice import InvoiceAggregate
from ..models.line_item import LineItem
from ..models.totals import InvoiceTotals, LineTotals
from ..models.validation_result import TOTALS_MISMATCH, Violation
from .money import Number, multiply, percentage_of, sum_money, to_decimal, within_tolerance

logger = logging.getLogger(__name__)


def compute_line_totals(item: LineItem, default_rate: Number) -> LineTotals:
    """Compute taxable value, tax and line total for one item.

    taxable = price × quantity; tax = taxable × rate / 100, where the item's
    own rate overrides the invoice rate.
    """
    taxable_value = multiply(item.price, item.quantity)
    rate = item.effective_rate(to_decimal(default_rate))
    tax_amount = percentage_of(taxable_value, rate)
    return LineTotals(
        taxable_value=taxable_value,
        rate=rate,
        tax_amount=tax_amount,
        line_total=sum_money([taxable_value, tax_amount]),
    )


def compute_totals(
    items: Iterable[LineItem],
    default_rate: Number,
    packaging: Number = 0,
    transportation_and_others: Number = 0,
) -> InvoiceTotals:
    """Aggregate quantity, taxable value, tax and totals over items.

    Args:
        items: Line items in invoice order
        default_rate: Invoice-level tax rate in percent
        packaging: Packaging charge (untaxed)
        transportation_and_others: Transportation/other charges (untaxed)

    Returns:
        InvoiceTotals with exact Decimal sums. grand_total equals
        taxable_value + packaging + transportation_and_others + tax_amount.
    """
    items = list(items)
    line_totals = [compute_line_totals(item, default_rate) for item in items]

    line_total = sum_money(lt.line_total for lt in line_totals)
    packaging_value = to_decimal(packaging)
    transport_value = to_decimal(transportation_and_others)

    return InvoiceTotals(
        quantity=sum_money(item.quantity for item in items),
        taxable_value=sum_money(lt.taxable_value for lt in line_totals),
        tax_amount=sum_money(lt.tax_amount for lt in line_totals),
        line_total=line_total,
        packaging=packaging_value,
        transportation_and_others=transport_value,
        grand_total=sum_money([line_total, packaging_value, transport_value]),
    )


def compute_invoice_totals(invoice: InvoiceAggregate, items: Optional[Iterable[LineItem]] = None) -> InvoiceTotals:
    """``compute_totals`` for an invoice (optionally over a subset of its items)."""
    return compute_totals(
        invoice.items if items is None else items,
        invoice.tax_rate,
        invoice.packaging,
        invoice.transportation_and_others,
    )


def compare_stored_totals(
    invoice: InvoiceAggregate,
    totals: InvoiceTotals,
    tolerance: Number = Decimal("0.01"),
) -> List[Violation]:
    """Compare stored subtotal/tax/total against recomputed values.

    Stored values that are absent are skipped. Differences beyond tolerance
    become TOTALS_MISMATCH warnings; the recomputed values stay authoritative.

    Returns:
        List of violations (empty when everything agrees)
    """
    violations = []
    checks = (
        ("subtotal", invoice.stored_subtotal, totals.taxable_value),
        ("tax_amount", invoice.stored_tax_amount, totals.tax_amount),
        ("total", invoice.stored_total, totals.grand_total),
    )
    for field_path, stored, computed in checks:
        if stored is None:
            continue
        if within_tolerance(stored, computed, tolerance):
            continue
        logger.warning(
            f"Invoice {invoice.invoice_number}: stored {field_path} {stored} "
            f"differs from recomputed {computed}"
        )
        violations.append(Violation(
            field_path=field_path,
            code=TOTALS_MISMATCH,
            message=f"Stored {field_path} {stored} differs from recomputed {computed}",
            severity="warning",
            expected=str(computed),
            actual=str(stored),
        ))

    return violations
