"""Unit tests for loading stored invoice records."""

import json
from decimal import Decimal

import pytest

from taxinvoice.models.validation_result import MISSING_FIELD
from taxinvoice.pipeline.errors import InputShapeError
from taxinvoice.pipeline.record_loader import invoice_from_record, load_invoice_file


class TestInvoiceFromRecord:
    """Test mapping of the stored layout."""

    def test_header_fields(self, sample_record):
        invoice = invoice_from_record(sample_record)

        assert invoice.invoice_number == "INV-2024-001"
        assert invoice.invoice_date == "2024-04-01"
        assert invoice.challan_number == "12"
        assert invoice.purchase_order_number == "4501"
        assert invoice.eway_number == "EW-77"

    def test_parties(self, sample_record):
        invoice = invoice_from_record(sample_record)

        assert invoice.bill_to.name == "Acme Traders"
        assert invoice.bill_to.tax_registration_number == "27AAACA1234A1Z5"
        assert invoice.bill_to.secondary_registration_number == "AAACA1234A"
        assert not invoice.has_ship_to
        assert invoice.company.city_state == "Pune, Maharashtra"
        assert invoice.company.tax_registration_number == "27BBBBB0000B1Z5"

    def test_items(self, sample_record):
        first, second = invoice_from_record(sample_record).items

        assert first.item_id == "p1"
        assert first.price == Decimal("100.5")
        assert first.quantity == 2
        assert isinstance(first.quantity, int)
        assert first.area == Decimal("12.5")
        assert first.rate_override is None
        assert second.quantity == 3
        assert second.hsn_code == "3824"
        assert second.rate_override == Decimal("12")

    def test_amounts(self, sample_record):
        invoice = invoice_from_record(sample_record)

        assert invoice.tax_rate == Decimal("18")
        assert invoice.packaging == Decimal("20")
        assert invoice.transportation_and_others == Decimal("30")
        assert invoice.stored_subtotal == Decimal("351")
        assert invoice.stored_tax_amount == Decimal("54.18")
        assert invoice.stored_total == Decimal("455.18")

    def test_defaults(self, sample_record):
        for key in ("gstRate", "packaging", "transportationAndOthers", "total"):
            sample_record.pop(key)
        invoice = invoice_from_record(sample_record, default_rate=18)

        assert invoice.tax_rate == Decimal("18")
        assert invoice.packaging == 0
        assert invoice.stored_total is None

    def test_flags(self, sample_record):
        sample_record["showPcsInQty"] = True
        invoice = invoice_from_record(sample_record)

        assert invoice.flags.show_quantity_unit
        assert not invoice.flags.show_area

    @pytest.mark.parametrize("stored,expected", [
        ("false", False),
        ("False", False),
        ("true", True),
        (0, False),
        (1, True),
        (None, False),
    ])
    def test_flag_text_and_numbers(self, sample_record, stored, expected):
        sample_record["showSqFeet"] = stored
        assert invoice_from_record(sample_record).flags.show_area is expected

    def test_unrecognised_flag_is_shape_error(self, sample_record):
        sample_record["showPcsInQty"] = "sometimes"
        with pytest.raises(InputShapeError) as exc_info:
            invoice_from_record(sample_record)

        assert exc_info.value.field_paths == ["flags.show_quantity_unit"]

    def test_fractional_quantity_kept_for_validation(self, sample_record):
        sample_record["items"][0]["quantity"] = 1.5
        assert invoice_from_record(sample_record).items[0].quantity == Decimal("1.5")

    def test_missing_item_id_uses_position(self, sample_record):
        del sample_record["items"][1]["id"]
        assert invoice_from_record(sample_record).items[1].item_id == "2"


class TestShapeErrors:
    """Values that cannot be represented raise with the field path."""

    def test_unparseable_price(self, sample_record):
        sample_record["items"][1]["price"] = "abc"

        with pytest.raises(InputShapeError) as exc_info:
            invoice_from_record(sample_record)
        assert exc_info.value.field_paths == ["items[1].price"]

    def test_missing_quantity(self, sample_record):
        del sample_record["items"][0]["quantity"]

        with pytest.raises(InputShapeError) as exc_info:
            invoice_from_record(sample_record)
        assert exc_info.value.violations[0].code == MISSING_FIELD

    def test_items_not_a_list(self, sample_record):
        sample_record["items"] = {"id": "p1"}
        with pytest.raises(InputShapeError):
            invoice_from_record(sample_record)

    def test_record_not_an_object(self):
        with pytest.raises(InputShapeError):
            invoice_from_record(["not", "a", "record"])


class TestLoadInvoiceFile:
    """Reading records from JSON files."""

    def test_load(self, tmp_path, sample_record):
        path = tmp_path / "invoice.json"
        path.write_text(json.dumps(sample_record), encoding="utf-8")

        invoice = load_invoice_file(path)
        assert invoice.items[0].price == Decimal("100.5")
        assert invoice.stored_tax_amount == Decimal("54.18")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(InputShapeError):
            load_invoice_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_invoice_file(tmp_path / "missing.json")
