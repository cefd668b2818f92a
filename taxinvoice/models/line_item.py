"""LineItem data model representing a priced product row on a tax invoice."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union


@dataclass(frozen=True)
class LineItem:
    """Represents one priced product/service row on an invoice.

    Line items are immutable once added to an invoice. Range checks
    (negative price, non-positive quantity) are the validator's job, so a
    bad row can still be represented and reported by field path.

    Attributes:
        item_id: Identifier of the row (unique within the invoice)
        name: Product/service name
        price: Unit price (non-negative)
        quantity: Quantity (positive integer; Decimal only when the stored
            value was non-integral, so the validator can flag it)
        hsn_code: HSN/SAC classification code
        area: Optional area measurement (square feet), shown only when the
            area display flag is set
        rate_override: Optional per-item tax rate in percent
    """

    item_id: str
    name: str
    price: Decimal
    quantity: Union[int, Decimal]
    hsn_code: str = ""
    area: Optional[Decimal] = None
    rate_override: Optional[Decimal] = None

    def effective_rate(self, default_rate: Decimal) -> Decimal:
        """Return the tax rate for this item (override wins over the invoice rate)."""
        if self.rate_override is not None:
            return self.rate_override
        return default_rate

    @property
    def has_integral_quantity(self) -> bool:
        """True when quantity is a whole number."""
        if isinstance(self.quantity, int):
            return True
        return self.quantity == self.quantity.to_integral_value()
