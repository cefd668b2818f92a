"""Unit tests for invoice validation and status assignment."""

from dataclasses import replace
from decimal import Decimal

import pytest

from taxinvoice.models.invoice import DisplayFlags, InvoiceAggregate
from taxinvoice.models.line_item import LineItem
from taxinvoice.models.party import PartyDetails
from taxinvoice.models.validation_result import (
    DUPLICATE_ITEM_ID,
    INVALID_QUANTITY,
    MISSING_AREA,
    MISSING_FIELD,
    NEGATIVE_VALUE,
    TOTALS_MISMATCH,
)
from taxinvoice.pipeline.validation import (
    is_renderable,
    out_of_range_item_indexes,
    validate_invoice,
)


@pytest.fixture
def invoice():
    """A clean invoice: 2 × 100 at 18% (total 236)."""
    return InvoiceAggregate(
        invoice_number="INV-001",
        invoice_date="2024-04-01",
        bill_to=PartyDetails(
            name="Acme Traders",
            address="12 MG Road, Pune",
            tax_registration_number="27AAACA1234A1Z5",
        ),
        items=[LineItem(item_id="1", name="Widget", price=Decimal("100"), quantity=2)],
        tax_rate=Decimal("18"),
    )


def with_item(invoice, **changes):
    return invoice.with_items([replace(invoice.items[0], **changes)])


class TestRequiredFields:
    """Test required-field checks."""

    def test_clean_invoice_is_ok(self, invoice):
        result = validate_invoice(invoice)

        assert result.status == "OK"
        assert result.violations == []
        assert is_renderable(result)

    @pytest.mark.parametrize("field_path,changes", [
        ("invoice_number", {"invoice_number": ""}),
        ("invoice_number", {"invoice_number": None}),
        ("bill_to.name", {"bill_to": PartyDetails(address="x", tax_registration_number="y")}),
        ("bill_to.address", {"bill_to": PartyDetails(name="x", tax_registration_number="y")}),
    ])
    def test_missing_required_field_blocks(self, invoice, field_path, changes):
        result = validate_invoice(replace(invoice, **changes))

        assert result.status == "REJECTED"
        assert not is_renderable(result)
        violation = result.for_field(field_path)[0]
        assert violation.code == MISSING_FIELD
        assert violation.blocking

    def test_missing_tax_registration_needs_review(self, invoice):
        result = validate_invoice(replace(invoice, bill_to=PartyDetails(name="x", address="y")))

        assert result.status == "REVIEW"
        assert is_renderable(result)
        assert result.errors[0].field_path == "bill_to.tax_registration_number"


class TestLineItems:
    """Test per-item range checks."""

    def test_negative_price_blocks(self, invoice):
        result = validate_invoice(with_item(invoice, price=Decimal("-1")))

        assert result.status == "REJECTED"
        assert result.violations[0].field_path == "items[0].price"
        assert result.violations[0].code == NEGATIVE_VALUE

    @pytest.mark.parametrize("quantity", [0, -3, Decimal("1.5")])
    def test_invalid_quantity(self, invoice, quantity):
        result = validate_invoice(with_item(invoice, quantity=quantity))

        assert result.for_field("items[0].quantity")[0].code == INVALID_QUANTITY
        assert result.status == "REJECTED"

    def test_partial_data_tolerated(self, invoice):
        result = validate_invoice(with_item(invoice, price=Decimal("-1")), tolerate_partial_data=True)

        assert result.status == "REVIEW"
        assert is_renderable(result)
        assert out_of_range_item_indexes(result) == {0}

    def test_several_bad_items_never_raise(self, invoice):
        bad = invoice.with_items([
            LineItem(item_id="1", name="A", price=Decimal("-5"), quantity=1),
            LineItem(item_id="2", name="B", price=Decimal("5"), quantity=0),
        ])
        result = validate_invoice(bad)

        assert {v.field_path for v in result.range_violations} == {"items[0].price", "items[1].quantity"}

    def test_duplicate_item_ids_warn(self, invoice):
        item = invoice.items[0]
        result = validate_invoice(invoice.with_items([item, item]))

        duplicates = [v for v in result.violations if v.code == DUPLICATE_ITEM_ID]
        assert len(duplicates) == 2
        assert all(v.severity == "warning" for v in duplicates)


class TestAreaFlag:
    """Area is required only when the area column is shown."""

    def test_area_ignored_when_flag_off(self, invoice):
        assert validate_invoice(invoice).violations == []

    def test_missing_area_warns_when_flag_on(self, invoice):
        result = validate_invoice(replace(invoice, flags=DisplayFlags(show_area=True)))

        assert result.status == "REVIEW"
        assert result.warnings[0].code == MISSING_AREA

    def test_negative_area_blocks_when_flag_on(self, invoice):
        flagged = replace(with_item(invoice, area=Decimal("-2")), flags=DisplayFlags(show_area=True))
        result = validate_invoice(flagged)

        assert result.for_field("items[0].area")[0].code == NEGATIVE_VALUE
        assert result.status == "REJECTED"


class TestCharges:
    """Invoice-level charges."""

    def test_negative_charge_blocks_even_when_tolerated(self, invoice):
        result = validate_invoice(replace(invoice, packaging=Decimal("-10")), tolerate_partial_data=True)

        assert result.status == "REJECTED"
        assert result.blocking[0].field_path == "packaging"


class TestStoredTotals:
    """Stored totals are compared against recomputed values."""

    def test_matching_stored_totals(self, invoice):
        stored = replace(
            invoice,
            stored_subtotal=Decimal("200"),
            stored_tax_amount=Decimal("36"),
            stored_total=Decimal("236.00"),
        )
        assert validate_invoice(stored).status == "OK"

    def test_mismatch_is_review_not_rejection(self, invoice):
        result = validate_invoice(replace(invoice, stored_total=Decimal("240")))

        assert result.status == "REVIEW"
        assert result.warnings[0].code == TOTALS_MISMATCH
        assert result.warnings[0].actual == "240"

    def test_custom_tolerance(self, invoice):
        stored = replace(invoice, stored_total=Decimal("237"))
        assert validate_invoice(stored, tolerance=1.0).status == "OK"
        assert validate_invoice(stored).status == "REVIEW"


def test_is_renderable_without_result():
    """No result means nothing to render."""
    assert not is_renderable(None)
