"""Party and issuer data models printed on the invoice header."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PartyDetails:
    """Bill-To or Ship-To party.

    Attributes:
        name: Party name
        address: Postal address
        tax_registration_number: GSTIN, if known
        secondary_registration_number: PAN, if known
        phone: Contact phone, if known
    """

    name: Optional[str] = None
    address: Optional[str] = None
    tax_registration_number: Optional[str] = None
    secondary_registration_number: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_populated(self) -> bool:
        """True if any field carries a non-blank value."""
        return any(
            value and value.strip()
            for value in (
                self.name,
                self.address,
                self.tax_registration_number,
                self.secondary_registration_number,
                self.phone,
            )
        )


@dataclass(frozen=True)
class CompanyDetails:
    """Issuer (our company) details."""

    name: str = ""
    address: str = ""
    city_state: str = ""
    phone: str = ""
    email: str = ""
    tax_registration_number: str = ""
