"""InvoiceAggregate data model: the composed invoice record as stored."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional, Tuple

from .line_item import LineItem
from .party import CompanyDetails, PartyDetails


@dataclass(frozen=True)
class DisplayFlags:
    """Display switches that change what the line table shows.

    Attributes:
        show_quantity_unit: Append the quantity unit suffix ("Pcs")
        show_area: Show the area (Sq.Feet) column
    """

    show_quantity_unit: bool = False
    show_area: bool = False


@dataclass(frozen=True)
class InvoiceAggregate:
    """A tax invoice as loaded from the system of record.

    The engine never mutates this object. Stored totals (``stored_subtotal``,
    ``stored_tax_amount``, ``stored_total``) are kept only so the validator
    can compare them to recomputed values; they are never displayed.

    Attributes:
        invoice_number: Unique invoice number (required)
        invoice_date: Invoice date as stored (printed verbatim)
        bill_to: Bill-To party (required)
        ship_to: Ship-To party (optional, may be empty)
        company: Issuer details
        items: Ordered line items
        tax_rate: Invoice-level tax rate in percent
        packaging: Packaging charge
        transportation_and_others: Transportation/other charges
        flags: Display flags
        challan_number: Optional delivery challan number
        challan_date: Optional delivery challan date
        purchase_order_number: Optional purchase-order number
        eway_number: Optional e-way bill number
        stored_subtotal: Subtotal as persisted, if any
        stored_tax_amount: Tax amount as persisted, if any
        stored_total: Grand total as persisted, if any
    """

    invoice_number: Optional[str]
    invoice_date: Optional[str]
    bill_to: PartyDetails
    items: Tuple[LineItem, ...] = ()
    ship_to: PartyDetails = field(default_factory=PartyDetails)
    company: CompanyDetails = field(default_factory=CompanyDetails)
    tax_rate: Decimal = Decimal("0")
    packaging: Decimal = Decimal("0")
    transportation_and_others: Decimal = Decimal("0")
    flags: DisplayFlags = field(default_factory=DisplayFlags)
    challan_number: Optional[str] = None
    challan_date: Optional[str] = None
    purchase_order_number: Optional[str] = None
    eway_number: Optional[str] = None
    stored_subtotal: Optional[Decimal] = None
    stored_tax_amount: Optional[Decimal] = None
    stored_total: Optional[Decimal] = None

    def __post_init__(self):
        """Freeze the item sequence so callers cannot append to it."""
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @property
    def has_ship_to(self) -> bool:
        """True if the Ship-To party has any populated field."""
        return self.ship_to.is_populated

    def with_items(self, items) -> "InvoiceAggregate":
        """Return a copy of this invoice carrying ``items`` instead."""
        return replace(self, items=tuple(items))
