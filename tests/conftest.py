"""Shared fixtures: stored invoice records in their persisted layout."""

import copy

import pytest

from taxinvoice.config.profile_manager import reset_profile

# 2 × 100.50 at 18% + 3 × 50 at 12%, plus 50 in charges:
# taxable 351.00, tax 54.18, grand total 455.18
SAMPLE_RECORD = {
    "invoiceNumber": "INV-2024-001",
    "invoiceDate": "2024-04-01",
    "challanNo": 12,
    "challanDate": "2024-03-30",
    "poNo": 4501,
    "eWayNo": "EW-77",
    "customerBillTo": {
        "name": "Acme Traders",
        "address": "12 MG Road, Pune",
        "gstNumber": "27AAACA1234A1Z5",
        "panNumber": "AAACA1234A",
        "phoneNumber": "9800000000",
    },
    "customerShipTo": {},
    "companyDetails": {
        "name": "Seller Co",
        "address": "Plot 4, MIDC",
        "cityState": "Pune, Maharashtra",
        "gstin": "27BBBBB0000B1Z5",
    },
    "items": [
        {"id": "p1", "name": "Floor Tile", "price": 100.5, "quantity": 2, "hsnCode": "6907", "sqFeet": 12.5},
        {"id": "p2", "name": "Grout", "price": "50", "quantity": "3", "hsnCode": 3824, "igstPercent": 12},
    ],
    "packaging": 20,
    "transportationAndOthers": 30,
    "gstRate": 18,
    "subtotal": 351,
    "gstAmount": 54.18,
    "total": 455.18,
    "showPcsInQty": False,
    "showSqFeet": False,
}


@pytest.fixture
def sample_record():
    """A fresh copy of a consistent stored invoice record."""
    return copy.deepcopy(SAMPLE_RECORD)


@pytest.fixture
def many_items_record(sample_record):
    """Record with 21 identical-priced items (7 on the first page, 14 after)."""
    sample_record["items"] = [
        {"id": f"p{i}", "name": f"Item {i}", "price": 10, "quantity": 1, "hsnCode": "9999"}
        for i in range(1, 22)
    ]
    for key in ("subtotal", "gstAmount", "total"):
        sample_record.pop(key)
    return sample_record


@pytest.fixture(autouse=True)
def _reset_active_profile(monkeypatch):
    """Each test starts from the default profile."""
    monkeypatch.delenv("TAXINVOICE_PROFILE", raising=False)
    monkeypatch.delenv("TAXINVOICE_PROFILES_DIR", raising=False)
    reset_profile()
    yield
    reset_profile()
