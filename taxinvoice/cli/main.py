"""CLI interface for rendering stored invoices in batch."""

import argparse
import json
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from ..config import get_app_version, get_default_output_dir, get_output_subdirs, get_profile_name
from ..config.profile_loader import ProfileConfig
from ..config.profile_manager import get_profile, set_profile
from ..export.excel_export import export_to_excel
from ..models.render_result import InvoiceRenderResult
from ..pipeline.engine import render_invoice, render_to_json
from ..pipeline.errors import InvoiceEngineError
from ..pipeline.record_loader import load_invoice_file
from ..run_summary import RunSummary

logger = logging.getLogger(__name__)


def render_filename(invoice_number: str, fallback: str) -> str:
    """File name for a render result, safe for any invoice number."""
    stem = re.sub(r"[^\w.-]+", "_", invoice_number or "").strip("._") or fallback
    return f"{stem}.render.json"


def process_invoice_file(
    json_path: Path,
    render_dir: Path,
    profile: Optional[ProfileConfig] = None,
) -> Dict:
    """Render a single stored invoice record.

    Args:
        json_path: Path to the invoice record (JSON)
        render_dir: Directory for the ``<invoiceNumber>.render.json`` file
        profile: Profile to render with (defaults to the active profile)

    Returns:
        Dict with:
        - status: "OK", "REVIEW", "REJECTED" or "FAILED"
        - invoice_number: Invoice number (if loaded)
        - render_path: Written render file (if rendered)
        - result: InvoiceRenderResult (if rendered)
        - error: Exception (if not rendered)
    """
    if profile is None:
        profile = get_profile()

    try:
        invoice = load_invoice_file(json_path, default_rate=profile.tax.get("default_rate", 0))
        result = render_invoice(invoice, profile)
    except InvoiceEngineError as e:
        logger.warning(f"{json_path.name}: {e}")
        return {"status": "REJECTED", "invoice_number": None, "error": e}
    except (OSError, ValueError) as e:
        logger.error(f"{json_path.name}: {e}")
        return {"status": "FAILED", "invoice_number": None, "error": e}

    render_path = render_dir / render_filename(result.invoice_number, json_path.stem)
    with open(render_path, "w", encoding="utf-8") as f:
        f.write(render_to_json(result))
        f.write("\n")

    return {
        "status": result.status,
        "invoice_number": result.invoice_number,
        "render_path": render_path,
        "result": result,
        "error": None,
    }


def _input_files(input_path: str) -> List[Path]:
    input_path_obj = Path(input_path)
    if input_path_obj.is_dir():
        files = sorted(input_path_obj.glob("*.json"))
    elif input_path_obj.is_file():
        files = [input_path_obj]
    else:
        raise ValueError(f"Input path does not exist: {input_path}")

    if not files:
        raise ValueError(f"No JSON invoice records found in: {input_path}")
    return files


def process_batch(
    input_path: str,
    output_dir: str,
    fail_fast: bool = False,
    excel: bool = False,
) -> Dict:
    """Render every stored invoice record under ``input_path``.

    Args:
        input_path: Input directory (``*.json``) or a single record file
        output_dir: Output directory for render files, Excel and run summary
        fail_fast: Stop on the first rejected or failed invoice
        excel: Also write ``excel/invoices.xlsx``

    Returns:
        Dict with batch processing results (counts, errors, paths)
    """
    summary = RunSummary.create(input_path, output_dir)
    profile = get_profile()
    summary.profile_name = profile.name

    files = _input_files(input_path)
    summary.total_files = len(files)

    output_dir_obj = Path(output_dir)
    output_dir_obj.mkdir(parents=True, exist_ok=True)
    subdirs = get_output_subdirs(output_dir_obj)

    results = {
        "processed": 0,
        "ok": 0,
        "review": 0,
        "rejected": 0,
        "failed": 0,
        "errors": [],
    }
    rendered: List[InvoiceRenderResult] = []

    total = len(files)
    for i, json_file in enumerate(files, start=1):
        print(f"Processing {i}/{total}: {json_file.name}")
        outcome = process_invoice_file(json_file, subdirs['render'], profile)
        status = outcome["status"]

        results["processed"] += 1
        summary.processed_files += 1

        if outcome["error"] is not None:
            key = "rejected" if status == "REJECTED" else "failed"
            results[key] += 1
            if key == "rejected":
                summary.rejected_count += 1
            else:
                summary.failed_count += 1
            error_info = {
                "filename": json_file.name,
                "status": status,
                "error": str(outcome["error"]),
                "timestamp": datetime.now().isoformat(),
            }
            results["errors"].append(error_info)
            summary.record_error(json_file.name, outcome["error"])
            if fail_fast:
                break
            continue

        result = outcome["result"]
        rendered.append(result)
        summary.render_paths.append(str(outcome["render_path"]))
        summary.invoices.append({
            "filename": json_file.name,
            "invoice_number": result.invoice_number,
            "status": status,
            "grand_total": result.amounts.get("grand_total"),
            "pages": len(result.pages),
            "warnings": len(result.validation.warnings),
        })
        if status == "OK":
            results["ok"] += 1
            summary.ok_count += 1
        else:
            results["review"] += 1
            summary.review_count += 1

    if results["errors"]:
        errors_path = subdirs['errors'] / "errors.json"
        with open(errors_path, "w", encoding="utf-8") as f:
            json.dump(results["errors"], f, indent=2, ensure_ascii=False)
        results["errors_path"] = str(errors_path)
        summary.errors_path = str(errors_path)

    if excel and rendered:
        excel_path = export_to_excel(rendered, subdirs['excel'] / "invoices.xlsx")
        results["excel_path"] = excel_path
        summary.excel_path = excel_path

    summary.complete("FAILED" if results["failed"] else "COMPLETED")
    summary_path = output_dir_obj / "run_summary.json"
    summary.save(summary_path)
    results["summary_path"] = str(summary_path)
    results["run_id"] = summary.run_id

    return results


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tax Invoice Engine - compute totals, pages and amount in words for stored invoices"
    )

    parser.add_argument(
        "--input",
        required=True,
        help="Invoice record (JSON) or a directory of records"
    )

    parser.add_argument(
        "--output",
        required=False,
        help="Output directory (default: TAXINVOICE_OUTPUT_DIR or ./out)"
    )

    parser.add_argument(
        "--profile",
        required=False,
        help="Configuration profile name (default: TAXINVOICE_PROFILE or 'default')"
    )

    parser.add_argument(
        "--excel",
        action="store_true",
        help="Also export all line items to excel/invoices.xlsx"
    )

    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop on first rejected or failed invoice"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with code 1 if any invoice needs review (warnings)"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_app_version()}"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    output_dir = args.output
    if not output_dir:
        output_dir = str(get_default_output_dir())
        print(f"Using default output directory: {output_dir}")

    try:
        set_profile(args.profile or get_profile_name())

        results = process_batch(
            args.input,
            output_dir,
            fail_fast=args.fail_fast,
            excel=args.excel,
        )

        print(
            f"\nDone: {results['processed']} processed. "
            f"OK={results['ok']}, REVIEW={results['review']}, "
            f"REJECTED={results['rejected']}, failed={results['failed']}."
        )
        if results.get("excel_path"):
            print(f"Excel: {results['excel_path']}")
        if results.get("errors_path"):
            print(f"Errors: {results['errors_path']}")
        print(f"Summary: {results['summary_path']}")

        exit_code = 0
        if results["failed"] > 0 or results["rejected"] > 0:
            exit_code = 1
        elif args.strict and results["review"] > 0:
            exit_code = 1

        sys.exit(exit_code)

    except (OSError, ValueError) as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
