"""Invoice engine: validate, compute, paginate and build the render structure.

One call per invoice. The engine is a pure function of the invoice record
and the active profile; rendering the same invoice twice gives identical
output.
"""

import json
import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..config.profile_loader import ProfileConfig
from ..config.profile_manager import get_profile
from ..models.invoice import DisplayFlags, InvoiceAggregate
from ..models.line_item import LineItem
from ..models.page_plan import PlannedPage
from ..models.render_result import InvoiceRenderResult, LineRow, RenderedPage, TotalsRow
from ..models.totals import InvoiceTotals
from ..models.validation_result import ITEM_EXCLUDED, MISSING_FIELD, ValidationResult, Violation
from .errors import InputShapeError, RangeViolationError
from .money import Number, format_money, format_rate, quantize_money
from .number_words import amount_in_words
from .pagination import plan_pages
from .record_loader import invoice_from_record
from .totals import compute_invoice_totals, compute_line_totals
from .validation import out_of_range_item_indexes, validate_invoice

logger = logging.getLogger(__name__)


class _Formatter:
    """Money/quantity/area formatting bound to one profile."""

    def __init__(self, profile: ProfileConfig, flags: DisplayFlags):
        self.grouping = profile.grouping
        self.group_separator = profile.currency.get("group_separator", ",")
        self.decimal_separator = profile.currency.get("decimal_separator", ".")
        self.quantity_suffix = profile.display.get("quantity_suffix", " Pcs")
        self.empty_area = profile.display.get("empty_area", "-")
        self.flags = flags

    def money(self, value: Number) -> str:
        return format_money(value, self.grouping, self.group_separator, self.decimal_separator)

    def quantity(self, value: Number) -> str:
        value = Decimal(value)
        text = str(int(value)) if value == value.to_integral_value() else f"{value.normalize():f}"
        if self.flags.show_quantity_unit:
            text += self.quantity_suffix
        return text

    def area(self, value: Optional[Decimal]) -> Optional[str]:
        if not self.flags.show_area:
            return None
        if value is None or value == 0:
            return self.empty_area
        return f"{quantize_money(value):f}"


def _line_row(item: LineItem, serial: int, default_rate: Decimal, fmt: _Formatter) -> LineRow:
    line = compute_line_totals(item, default_rate)
    return LineRow(
        serial=serial,
        item_id=item.item_id,
        name=item.name,
        hsn_code=item.hsn_code,
        quantity=fmt.quantity(item.quantity),
        area=fmt.area(item.area),
        rate=fmt.money(item.price),
        taxable_value=fmt.money(line.taxable_value),
        tax_rate=format_rate(line.rate),
        tax_amount=fmt.money(line.tax_amount),
        total_amount=fmt.money(line.line_total),
    )


def _render_page(
    page: PlannedPage,
    invoice: InvoiceAggregate,
    totals: InvoiceTotals,
    fmt: _Formatter,
) -> RenderedPage:
    rows = [
        _line_row(item, page.start_index + offset + 1, invoice.tax_rate, fmt)
        for offset, item in enumerate(page.items)
    ]
    totals_row = None
    if page.carries_totals:
        totals_row = TotalsRow(
            quantity=fmt.quantity(totals.quantity),
            taxable_value=fmt.money(totals.taxable_value),
            tax_amount=fmt.money(totals.tax_amount),
            total_amount=fmt.money(totals.grand_total),
        )
    return RenderedPage(
        header=page.header(invoice.invoice_number, invoice.invoice_date),
        rows=rows,
        carries_totals=page.carries_totals,
        totals_row=totals_row,
    )


def _amount_summary(totals: InvoiceTotals, fmt: _Formatter) -> Dict[str, str]:
    return {
        "taxable_value": fmt.money(totals.taxable_value),
        "packaging": fmt.money(totals.packaging),
        "transportation_and_others": fmt.money(totals.transportation_and_others),
        "tax_amount": fmt.money(totals.tax_amount),
        "line_total": fmt.money(totals.line_total),
        "grand_total": fmt.money(totals.grand_total),
    }


def check_renderable(validation: ValidationResult) -> None:
    """Raise if validation found anything that blocks computation.

    Raises:
        InputShapeError: A required field is missing
        RangeViolationError: A price, quantity or charge is out of range
    """
    blocking = validation.blocking
    if not blocking:
        return
    missing = [v for v in blocking if v.code == MISSING_FIELD]
    if missing:
        fields = ", ".join(v.field_path for v in missing)
        raise InputShapeError(f"Missing required field(s): {fields}", missing)
    fields = ", ".join(v.field_path for v in blocking)
    raise RangeViolationError(f"Out-of-range value(s): {fields}", blocking)


def exclude_out_of_range_items(
    invoice: InvoiceAggregate,
    validation: ValidationResult,
) -> List[LineItem]:
    """Drop items with range violations, recording each exclusion as a warning."""
    excluded = out_of_range_item_indexes(validation)
    kept = []
    for index, item in enumerate(invoice.items):
        if index not in excluded:
            kept.append(item)
            continue
        logger.warning(
            f"Invoice {invoice.invoice_number}: excluding line {index + 1} "
            f"(item {item.item_id!r}) with out-of-range values"
        )
        validation.add(Violation(
            field_path=f"items[{index}]",
            code=ITEM_EXCLUDED,
            message=f"Line {index + 1} excluded from totals and pages",
            severity="warning",
        ))
    return kept


def render_invoice(
    invoice: InvoiceAggregate,
    profile: Optional[ProfileConfig] = None,
    flags: Optional[DisplayFlags] = None,
) -> InvoiceRenderResult:
    """Compute everything a skin needs to print one invoice.

    Args:
        invoice: Invoice to render (never mutated)
        profile: Jurisdiction profile (defaults to the active profile)
        flags: Display flags overriding the invoice's own

    Returns:
        InvoiceRenderResult with recomputed totals, page plan, line rows,
        amount in words and the non-blocking validation findings

    Raises:
        InputShapeError: If a required field is missing
        RangeViolationError: If a value is out of range and partial data is
            not tolerated by the profile
    """
    if profile is None:
        profile = get_profile()
    if flags is not None:
        invoice = replace(invoice, flags=flags)

    tolerate = profile.tolerate_partial_data
    validation = validate_invoice(
        invoice,
        tolerance=profile.totals_tolerance,
        tolerate_partial_data=tolerate,
    )
    check_renderable(validation)

    items = exclude_out_of_range_items(invoice, validation) if tolerate else list(invoice.items)

    # Recomputed totals are authoritative; stored ones only feed the validator
    totals = compute_invoice_totals(invoice, items)
    logger.debug(
        f"Invoice {invoice.invoice_number}: {len(items)} item(s), "
        f"taxable {totals.taxable_value}, tax {totals.tax_amount}, total {totals.grand_total}"
    )

    pagination = profile.pagination
    plan = plan_pages(
        items,
        first_page_capacity=pagination.get("first_page_capacity", 7),
        page_capacity=pagination.get("page_capacity", 14),
        reserve_totals_page=pagination.get("reserve_totals_page", True),
    )

    fmt = _Formatter(profile, invoice.flags)
    pages = [_render_page(page, invoice, totals, fmt) for page in plan.pages]

    return InvoiceRenderResult(
        invoice_number=invoice.invoice_number or "",
        invoice_date=invoice.invoice_date or "",
        pages=pages,
        totals=totals,
        total_in_words=amount_in_words(quantize_money(totals.grand_total), profile),
        validation=validation,
        ship_to_populated=invoice.has_ship_to,
        bill_to_name=invoice.bill_to.name or "",
        amounts=_amount_summary(totals, fmt),
    )


def render_record(record: Dict[str, Any], profile: Optional[ProfileConfig] = None) -> InvoiceRenderResult:
    """Load a stored invoice record and render it."""
    if profile is None:
        profile = get_profile()
    invoice = invoice_from_record(record, default_rate=profile.tax.get("default_rate", 0))
    return render_invoice(invoice, profile)


def render_to_json(result: InvoiceRenderResult) -> str:
    """Serialize a render result; identical results give identical text."""
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
