"""Pipeline stages for invoice computation."""

from .engine import render_invoice, render_record, render_to_json
from .validation import validate_invoice

__all__ = ["render_invoice", "render_record", "render_to_json", "validate_invoice"]
