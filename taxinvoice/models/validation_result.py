"""ValidationResult data model representing invoice validation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

VALID_SEVERITIES = ("error", "warning")
VALID_STATUSES = ("OK", "REVIEW", "REJECTED")

# Violation codes
MISSING_FIELD = "MISSING_FIELD"
NEGATIVE_VALUE = "NEGATIVE_VALUE"
INVALID_QUANTITY = "INVALID_QUANTITY"
MISSING_AREA = "MISSING_AREA"
DUPLICATE_ITEM_ID = "DUPLICATE_ITEM_ID"
TOTALS_MISMATCH = "TOTALS_MISMATCH"
ITEM_EXCLUDED = "ITEM_EXCLUDED"

# Codes that make the invoice unrenderable unless explicitly tolerated
RANGE_CODES = (NEGATIVE_VALUE, INVALID_QUANTITY)


@dataclass(frozen=True)
class Violation:
    """A single field-level validation finding.

    Attributes:
        field_path: Path of the offending field, e.g. "items[3].price"
        code: Machine-readable violation code
        message: Human-readable description
        severity: "error" or "warning"
        blocking: True if computation must not proceed (missing required
            field, or a range violation when partial data is not tolerated)
        expected: Expected value, if applicable
        actual: Actual value, if applicable
    """

    field_path: str
    code: str
    message: str
    severity: str = "error"
    blocking: bool = False
    expected: Optional[str] = None
    actual: Optional[str] = None

    def __post_init__(self):
        if self.severity not in VALID_SEVERITIES:
            raise ValueError(
                f"severity must be 'error' or 'warning', got '{self.severity}'"
            )

    @property
    def is_range_violation(self) -> bool:
        return self.code in RANGE_CODES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field_path": self.field_path,
            "code": self.code,
            "message": self.message,
            "severity": self.severity,
            "blocking": self.blocking,
            "expected": self.expected,
            "actual": self.actual,
        }


@dataclass
class ValidationResult:
    """Validation result for an invoice.

    Mutable because violations are collected incrementally.

    Attributes:
        violations: All findings, in check order
        tolerance: Tolerance used for stored-vs-recomputed comparisons
    """

    violations: List[Violation] = field(default_factory=list)
    tolerance: float = 0.01

    def add(self, violation: Violation) -> None:
        self.violations.append(violation)

    @property
    def errors(self) -> List[Violation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> List[Violation]:
        return [v for v in self.violations if v.severity == "warning"]

    @property
    def blocking(self) -> List[Violation]:
        return [v for v in self.violations if v.blocking]

    @property
    def range_violations(self) -> List[Violation]:
        return [v for v in self.violations if v.is_range_violation]

    @property
    def status(self) -> str:
        """OK (clean), REVIEW (non-blocking findings) or REJECTED."""
        if self.blocking:
            return "REJECTED"
        if self.violations:
            return "REVIEW"
        return "OK"

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def for_field(self, prefix: str) -> List[Violation]:
        """Violations whose field path starts with ``prefix``."""
        return [v for v in self.violations if v.field_path.startswith(prefix)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "tolerance": self.tolerance,
            "violations": [v.to_dict() for v in self.violations],
        }
