"""Exceptions raised by the invoice engine."""

from typing import List, Optional

from ..models.validation_result import Violation


class InvoiceEngineError(Exception):
    """Base exception for invoice engine errors."""

    def __init__(self, message: str, violations: Optional[List[Violation]] = None):
        super().__init__(message)
        self.violations: List[Violation] = list(violations or [])

    @property
    def field_paths(self) -> List[str]:
        return [v.field_path for v in self.violations]


class InputShapeError(InvoiceEngineError):
    """Raised when a required field is missing or a value cannot be parsed."""
    pass


class RangeViolationError(InvoiceEngineError):
    """Raised when a price, quantity or charge is out of range."""
    pass
