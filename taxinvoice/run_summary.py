"""Run summary model and serialization."""

import json
import math
import os
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Any


def _sanitize_for_json(obj: Any) -> Any:
    """Recursively make values JSON-safe (Decimals as exact strings, no NaN/Inf)."""
    if isinstance(obj, dict):
        return {k: _sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize_for_json(v) for v in obj]
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if isinstance(obj, Path):
        return str(obj)
    return obj


@dataclass
class RunSummary:
    """Summary of a CLI rendering run."""
    run_id: str
    input_path: str
    output_dir: str
    started_at: str
    finished_at: Optional[str] = None
    status: str = "RUNNING"  # RUNNING, COMPLETED, FAILED

    # Statistics
    total_files: int = 0
    processed_files: int = 0
    ok_count: int = 0
    review_count: int = 0
    rejected_count: int = 0
    failed_count: int = 0

    # Paths
    excel_path: Optional[str] = None
    errors_path: Optional[str] = None
    render_paths: List[str] = field(default_factory=list)

    # Details
    errors: List[Dict[str, Any]] = field(default_factory=list)
    invoices: List[Dict[str, Any]] = field(default_factory=list)  # Status + grand total per invoice
    profile_name: Optional[str] = None

    @classmethod
    def create(cls, input_path: str, output_dir: str) -> 'RunSummary':
        """Create a new run summary."""
        return cls(
            run_id=str(uuid.uuid4()),
            input_path=str(input_path),
            output_dir=str(output_dir),
            started_at=datetime.now().isoformat()
        )

    def record_error(self, filename: str, error: Exception):
        """Record a file that could not be rendered."""
        entry = {"filename": filename, "error": str(error), "type": type(error).__name__}
        violations = getattr(error, "violations", None)
        if violations:
            entry["violations"] = [v.to_dict() for v in violations]
        self.errors.append(entry)

    @property
    def has_warnings(self) -> bool:
        return self.review_count > 0

    def complete(self, status: str = "COMPLETED"):
        """Mark run as completed."""
        self.status = status
        self.finished_at = datetime.now().isoformat()

    def save(self, path: Path):
        """Save summary to JSON file (atomic write to avoid truncated file on interrupt)."""
        path = Path(path)
        data = _sanitize_for_json(asdict(self))
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp, path)
