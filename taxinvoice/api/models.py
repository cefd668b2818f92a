"""API request and response models."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Amounts are passed through unchanged; the record loader parses them exactly
Amount = Optional[Union[int, float, str]]


class PartyRequest(BaseModel):
    """Bill-To / Ship-To party as stored."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    address: Optional[str] = None
    gst_number: Optional[str] = Field(None, alias="gstNumber")
    pan_number: Optional[str] = Field(None, alias="panNumber")
    phone_number: Optional[str] = Field(None, alias="phoneNumber")


class CompanyRequest(BaseModel):
    """Issuer details as stored."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    address: Optional[str] = None
    city_state: Optional[str] = Field(None, alias="cityState")
    phone: Optional[str] = None
    email: Optional[str] = None
    gstin: Optional[str] = None


class LineItemRequest(BaseModel):
    """A single stored line item."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    price: Amount = None
    quantity: Amount = None
    hsn_code: Optional[Union[int, str]] = Field(None, alias="hsnCode")
    sq_feet: Amount = Field(None, alias="sqFeet")
    igst_percent: Amount = Field(None, alias="igstPercent")


class InvoiceRecordRequest(BaseModel):
    """Request model: an invoice record in its stored (camelCase) layout."""

    model_config = ConfigDict(populate_by_name=True)

    invoice_number: Optional[Union[int, str]] = Field(None, alias="invoiceNumber")
    invoice_date: Optional[str] = Field(None, alias="invoiceDate")
    challan_no: Optional[Union[int, str]] = Field(None, alias="challanNo")
    challan_date: Optional[str] = Field(None, alias="challanDate")
    po_no: Optional[Union[int, str]] = Field(None, alias="poNo")
    eway_no: Optional[Union[int, str]] = Field(None, alias="eWayNo")
    customer_bill_to: Optional[PartyRequest] = Field(None, alias="customerBillTo")
    customer_ship_to: Optional[PartyRequest] = Field(None, alias="customerShipTo")
    company_details: Optional[CompanyRequest] = Field(None, alias="companyDetails")
    items: List[LineItemRequest] = Field(default_factory=list)
    packaging: Amount = None
    transportation_and_others: Amount = Field(None, alias="transportationAndOthers")
    subtotal: Amount = None
    gst_amount: Amount = Field(None, alias="gstAmount")
    gst_rate: Amount = Field(None, alias="gstRate")
    total: Amount = None
    show_pcs_in_qty: bool = Field(False, alias="showPcsInQty")
    show_sq_feet: bool = Field(False, alias="showSqFeet")

    def to_record(self) -> Dict[str, Any]:
        """The stored record layout expected by the record loader."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ViolationResponse(BaseModel):
    """A single field-level finding."""

    field_path: str
    code: str
    message: str
    severity: str
    blocking: bool = False
    expected: Optional[str] = None
    actual: Optional[str] = None


class ValidationResponse(BaseModel):
    """Response model for the validation endpoint."""

    status: str = Field(..., description="OK, REVIEW or REJECTED")
    tolerance: float = 0.01
    violations: List[ViolationResponse] = Field(default_factory=list)


class InvoiceRenderResponse(BaseModel):
    """Response model for the render endpoint."""

    invoice_number: str
    invoice_date: str
    bill_to_name: str = ""
    status: str = Field(..., description="OK or REVIEW (rejected invoices get HTTP 422)")
    ship_to_populated: bool = False
    total_in_words: str
    amounts: Dict[str, str] = Field(default_factory=dict)
    totals: Dict[str, str] = Field(default_factory=dict)
    pages: List[Dict[str, Any]] = Field(default_factory=list)
    validation: ValidationResponse


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error message")
    violations: List[ViolationResponse] = Field(default_factory=list)
