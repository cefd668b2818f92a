"""Validation logic for invoice aggregates with status assignment."""

from collections import Counter
from decimal import Decimal
from typing import List, Optional, Set

from ..models.invoice import InvoiceAggregate
from ..models.line_item import LineItem
from ..models.validation_result import (
    DUPLICATE_ITEM_ID,
    INVALID_QUANTITY,
    MISSING_AREA,
    MISSING_FIELD,
    NEGATIVE_VALUE,
    ValidationResult,
    Violation,
)
from .totals import compare_stored_totals, compute_invoice_totals


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate_required_fields(invoice: InvoiceAggregate) -> List[Violation]:
    """Check the fields an invoice cannot be printed without.

    Invoice number and Bill-To name/address block computation; a missing
    Bill-To tax registration number is an error but does not block.
    """
    violations = []
    required = (
        ("invoice_number", invoice.invoice_number, True),
        ("bill_to.name", invoice.bill_to.name, True),
        ("bill_to.address", invoice.bill_to.address, True),
        ("bill_to.tax_registration_number", invoice.bill_to.tax_registration_number, False),
    )
    for field_path, value, blocking in required:
        if _is_blank(value):
            violations.append(Violation(
                field_path=field_path,
                code=MISSING_FIELD,
                message=f"Required field {field_path} is missing",
                severity="error",
                blocking=blocking,
            ))
    return violations


def validate_charges(invoice: InvoiceAggregate) -> List[Violation]:
    """Invoice-level amounts must be non-negative; these always block."""
    violations = []
    charges = (
        ("packaging", invoice.packaging),
        ("transportation_and_others", invoice.transportation_and_others),
        ("tax_rate", invoice.tax_rate),
    )
    for field_path, value in charges:
        if value < 0:
            violations.append(Violation(
                field_path=field_path,
                code=NEGATIVE_VALUE,
                message=f"{field_path} must be >= 0, got {value}",
                severity="error",
                blocking=True,
                expected=">= 0",
                actual=str(value),
            ))
    return violations


def validate_line_item(
    item: LineItem,
    index: int,
    show_area: bool = False,
    tolerate_partial_data: bool = False,
) -> List[Violation]:
    """Validate one line item; never raises.

    Range problems block the invoice unless partial data is tolerated, in
    which case the caller excludes the item instead.
    """
    violations = []
    prefix = f"items[{index}]"
    blocking = not tolerate_partial_data

    if item.price < 0:
        violations.append(Violation(
            field_path=f"{prefix}.price",
            code=NEGATIVE_VALUE,
            message=f"Line {index + 1}: price must be >= 0, got {item.price}",
            blocking=blocking,
            expected=">= 0",
            actual=str(item.price),
        ))

    if item.quantity <= 0 or not item.has_integral_quantity:
        violations.append(Violation(
            field_path=f"{prefix}.quantity",
            code=INVALID_QUANTITY,
            message=f"Line {index + 1}: quantity must be a positive integer, got {item.quantity}",
            blocking=blocking,
            expected="positive integer",
            actual=str(item.quantity),
        ))

    if item.rate_override is not None and item.rate_override < 0:
        violations.append(Violation(
            field_path=f"{prefix}.rate_override",
            code=NEGATIVE_VALUE,
            message=f"Line {index + 1}: tax rate must be >= 0, got {item.rate_override}",
            blocking=blocking,
            expected=">= 0",
            actual=str(item.rate_override),
        ))

    # Area only matters when the area column is shown
    if show_area:
        if item.area is None:
            violations.append(Violation(
                field_path=f"{prefix}.area",
                code=MISSING_AREA,
                message=f"Line {index + 1}: area is required when the area column is shown",
                severity="warning",
            ))
        elif item.area < 0:
            violations.append(Violation(
                field_path=f"{prefix}.area",
                code=NEGATIVE_VALUE,
                message=f"Line {index + 1}: area must be >= 0, got {item.area}",
                blocking=blocking,
                expected=">= 0",
                actual=str(item.area),
            ))

    return violations


def find_duplicate_item_ids(items: List[LineItem]) -> List[Violation]:
    """Warn about item identifiers used more than once."""
    counts = Counter(item.item_id for item in items if item.item_id)
    violations = []
    for index, item in enumerate(items):
        if item.item_id and counts[item.item_id] > 1:
            violations.append(Violation(
                field_path=f"items[{index}].item_id",
                code=DUPLICATE_ITEM_ID,
                message=f"Line {index + 1}: item id {item.item_id!r} is not unique",
                severity="warning",
            ))
    return violations


def out_of_range_item_indexes(result: ValidationResult) -> Set[int]:
    """Indexes of items that carry a range violation."""
    indexes = set()
    for violation in result.range_violations:
        if violation.field_path.startswith("items["):
            indexes.add(int(violation.field_path[len("items["):].split("]", 1)[0]))
    return indexes


def validate_invoice(
    invoice: InvoiceAggregate,
    tolerance: float = 0.01,
    tolerate_partial_data: bool = False,
) -> ValidationResult:
    """Validate an invoice and collect field-level violations.

    Args:
        invoice: Invoice to validate
        tolerance: Allowed difference between stored and recomputed totals
        tolerate_partial_data: Treat out-of-range items as excludable
            instead of blocking the whole invoice

    Returns:
        ValidationResult; never raises for invoice content

    Status assignment:
    - Any blocking violation → REJECTED
    - Other violations (missing GSTIN, totals mismatch, missing area) → REVIEW
    - Nothing found → OK
    """
    result = ValidationResult(tolerance=tolerance)

    for violation in validate_required_fields(invoice):
        result.add(violation)
    for violation in validate_charges(invoice):
        result.add(violation)

    items = list(invoice.items)
    for index, item in enumerate(items):
        for violation in validate_line_item(
            item, index,
            show_area=invoice.flags.show_area,
            tolerate_partial_data=tolerate_partial_data,
        ):
            result.add(violation)
    for violation in find_duplicate_item_ids(items):
        result.add(violation)

    # Compare stored totals over the items that would actually be rendered
    excluded = out_of_range_item_indexes(result) if tolerate_partial_data else set()
    kept = [item for index, item in enumerate(items) if index not in excluded]
    totals = compute_invoice_totals(invoice, kept)
    for violation in compare_stored_totals(invoice, totals, Decimal(str(tolerance))):
        result.add(violation)

    return result


def is_renderable(result: Optional[ValidationResult]) -> bool:
    """Return True when no violation blocks computation."""
    if result is None:
        return False
    return not result.blocking
