"""Build InvoiceAggregate objects from persisted invoice records.

Records use the store's camelCase layout (``invoiceNumber``,
``customerBillTo``, ``items[].hsnCode``, ...). Numbers are parsed into
Decimal through their string form. Missing optional amounts default to
zero; values that are present but unparseable raise InputShapeError with
the offending field path.
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..models.invoice import DisplayFlags, InvoiceAggregate
from ..models.line_item import LineItem
from ..models.party import CompanyDetails, PartyDetails
from ..models.validation_result import MISSING_FIELD, Violation
from .errors import InputShapeError
from .money import to_decimal

logger = logging.getLogger(__name__)

INVALID_VALUE = "INVALID_VALUE"


def _shape_error(field_path: str, message: str, code: str = INVALID_VALUE) -> InputShapeError:
    violation = Violation(field_path=field_path, code=code, message=message, blocking=True)
    return InputShapeError(message, [violation])


def _text(value: Any) -> Optional[str]:
    """Stored text field; numbers are accepted and stringified."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


_TRUE_TEXT = {"true", "yes", "1"}
_FALSE_TEXT = {"false", "no", "0", ""}


def _flag(record: Dict[str, Any], key: str, field_path: str) -> bool:
    """Stored display flag; accepts booleans, 0/1 and "true"/"false" text."""
    value = record.get(key)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
    raise _shape_error(field_path, f"{field_path} must be a boolean, got {value!r}")


def _amount(record: Dict[str, Any], key: str, field_path: str, default: Optional[Decimal] = None) -> Optional[Decimal]:
    value = record.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        return to_decimal(value)
    except ValueError as e:
        raise _shape_error(field_path, f"{field_path}: {e}") from e


def _required_amount(record: Dict[str, Any], key: str, field_path: str) -> Decimal:
    value = _amount(record, key, field_path)
    if value is None:
        raise _shape_error(field_path, f"{field_path} is missing", code=MISSING_FIELD)
    return value


def _quantity(record: Dict[str, Any], field_path: str) -> Union[int, Decimal]:
    value = _required_amount(record, "quantity", field_path)
    if value == value.to_integral_value():
        return int(value)
    return value


def _party(data: Any, field_path: str) -> PartyDetails:
    if data is None:
        return PartyDetails()
    if not isinstance(data, dict):
        raise _shape_error(field_path, f"{field_path} must be an object")
    return PartyDetails(
        name=_text(data.get("name")),
        address=_text(data.get("address")),
        tax_registration_number=_text(data.get("gstNumber")),
        secondary_registration_number=_text(data.get("panNumber")),
        phone=_text(data.get("phoneNumber")),
    )


def _company(data: Any) -> CompanyDetails:
    if data is None:
        return CompanyDetails()
    if not isinstance(data, dict):
        raise _shape_error("companyDetails", "companyDetails must be an object")
    return CompanyDetails(
        name=_text(data.get("name")) or "",
        address=_text(data.get("address")) or "",
        city_state=_text(data.get("cityState")) or "",
        phone=_text(data.get("phone")) or "",
        email=_text(data.get("email")) or "",
        tax_registration_number=_text(data.get("gstin")) or "",
    )


def line_item_from_record(data: Dict[str, Any], index: int) -> LineItem:
    """Build one LineItem from ``items[index]`` of a stored record."""
    prefix = f"items[{index}]"
    if not isinstance(data, dict):
        raise _shape_error(prefix, f"{prefix} must be an object")

    item_id = _text(data.get("id") or data.get("_id") or data.get("productId")) or str(index + 1)
    return LineItem(
        item_id=item_id,
        name=_text(data.get("name")) or "",
        price=_required_amount(data, "price", f"{prefix}.price"),
        quantity=_quantity(data, f"{prefix}.quantity"),
        hsn_code=_text(data.get("hsnCode")) or "",
        area=_amount(data, "sqFeet", f"{prefix}.area"),
        rate_override=_amount(data, "igstPercent", f"{prefix}.rate_override"),
    )


def invoice_from_record(record: Dict[str, Any], default_rate: Any = 0) -> InvoiceAggregate:
    """Build an InvoiceAggregate from a stored invoice record.

    Args:
        record: Invoice record as persisted (camelCase keys)
        default_rate: Tax rate used when the record carries no ``gstRate``

    Returns:
        InvoiceAggregate

    Raises:
        InputShapeError: If the record is not an object, ``items`` is not a
            list, or a present value cannot be parsed
    """
    if not isinstance(record, dict):
        raise _shape_error("", f"Invoice record must be an object, got {type(record).__name__}")

    raw_items = record.get("items") or []
    if not isinstance(raw_items, list):
        raise _shape_error("items", "items must be a list")
    items: List[LineItem] = [line_item_from_record(data, i) for i, data in enumerate(raw_items)]

    tax_rate = _amount(record, "gstRate", "tax_rate")
    if tax_rate is None:
        tax_rate = to_decimal(default_rate)

    invoice = InvoiceAggregate(
        invoice_number=_text(record.get("invoiceNumber")),
        invoice_date=_text(record.get("invoiceDate")),
        bill_to=_party(record.get("customerBillTo"), "bill_to"),
        ship_to=_party(record.get("customerShipTo"), "ship_to"),
        company=_company(record.get("companyDetails")),
        items=tuple(items),
        tax_rate=tax_rate,
        packaging=_amount(record, "packaging", "packaging", Decimal("0")),
        transportation_and_others=_amount(
            record, "transportationAndOthers", "transportation_and_others", Decimal("0")
        ),
        flags=DisplayFlags(
            show_quantity_unit=_flag(record, "showPcsInQty", "flags.show_quantity_unit"),
            show_area=_flag(record, "showSqFeet", "flags.show_area"),
        ),
        challan_number=_text(record.get("challanNo")),
        challan_date=_text(record.get("challanDate")),
        purchase_order_number=_text(record.get("poNo")),
        eway_number=_text(record.get("eWayNo")),
        stored_subtotal=_amount(record, "subtotal", "subtotal"),
        stored_tax_amount=_amount(record, "gstAmount", "tax_amount"),
        stored_total=_amount(record, "total", "total"),
    )

    logger.debug(f"Loaded invoice {invoice.invoice_number} with {len(items)} item(s)")
    return invoice


def load_invoice_file(path: Union[str, Path], default_rate: Any = 0) -> InvoiceAggregate:
    """Read a stored invoice record from a JSON file.

    Raises:
        InputShapeError: If the file is not valid JSON or not an invoice record
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            # parse_float keeps 0.1 as Decimal("0.1")
            record = json.load(f, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise _shape_error("", f"Invalid JSON in {path.name}: {e}") from e
    return invoice_from_record(record, default_rate=default_rate)
