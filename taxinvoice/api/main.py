"""FastAPI application exposing the invoice engine."""

import logging

from fastapi import FastAPI, HTTPException

from ..config import get_app_name, get_app_version
from ..config.profile_manager import get_profile
from ..models.validation_result import ValidationResult
from ..pipeline.engine import render_invoice
from ..pipeline.errors import InputShapeError, InvoiceEngineError
from ..pipeline.record_loader import invoice_from_record
from ..pipeline.validation import validate_invoice
from .models import (
    ErrorResponse,
    InvoiceRecordRequest,
    InvoiceRenderResponse,
    ValidationResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=get_app_name(),
    description="Totals, pagination and amount in words for stored tax invoices",
    version=get_app_version(),
)


def _error_detail(error: InvoiceEngineError) -> dict:
    return ErrorResponse(
        error=str(error),
        violations=[v.to_dict() for v in error.violations],
    ).model_dump()


@app.get("/")
async def root():
    """Root endpoint."""
    profile = get_profile()
    return {
        "message": get_app_name(),
        "version": get_app_version(),
        "profile": profile.name,
        "docs": "/docs",
    }


@app.post("/api/invoices/render", response_model=InvoiceRenderResponse)
async def render_invoice_endpoint(request: InvoiceRecordRequest):
    """Render a stored invoice record.

    Returns:
        InvoiceRenderResponse with pages, totals and amount in words

    Raises:
        HTTPException 422: Missing required fields or out-of-range values
    """
    profile = get_profile()
    try:
        invoice = invoice_from_record(
            request.to_record(),
            default_rate=profile.tax.get("default_rate", 0),
        )
        result = render_invoice(invoice, profile)
    except InvoiceEngineError as e:
        logger.info(f"Render rejected: {e}")
        raise HTTPException(status_code=422, detail=_error_detail(e))
    except ValueError as e:
        logger.info(f"Render failed: {e}")
        raise HTTPException(status_code=422, detail=ErrorResponse(error=str(e)).model_dump())

    data = result.to_dict()
    return InvoiceRenderResponse(
        invoice_number=data["invoice_number"],
        invoice_date=data["invoice_date"],
        bill_to_name=data["bill_to_name"],
        status=result.status,
        ship_to_populated=data["ship_to_populated"],
        total_in_words=data["total_in_words"],
        amounts=data["amounts"],
        totals=data["totals"],
        pages=data["pages"],
        validation=ValidationResponse(**data["validation"]),
    )


@app.post("/api/invoices/validate", response_model=ValidationResponse)
async def validate_invoice_endpoint(request: InvoiceRecordRequest):
    """Validate a stored invoice record.

    Content problems never produce an error status; they are reported as
    violations with status REJECTED/REVIEW.
    """
    profile = get_profile()
    try:
        invoice = invoice_from_record(
            request.to_record(),
            default_rate=profile.tax.get("default_rate", 0),
        )
    except InputShapeError as e:
        # Unparseable values: report them like any other blocking violation
        result = ValidationResult(violations=list(e.violations), tolerance=profile.totals_tolerance)
        return ValidationResponse(**result.to_dict())

    result = validate_invoice(
        invoice,
        tolerance=profile.totals_tolerance,
        tolerate_partial_data=profile.tolerate_partial_data,
    )
    return ValidationResponse(**result.to_dict())
