"""Excel export of rendered invoices, one row per line item."""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Union

import pandas as pd

from ..models.render_result import InvoiceRenderResult, LineRow
from ..pipeline.money import to_decimal

logger = logging.getLogger(__name__)

COLUMNS = [
    "Invoice No",
    "Invoice Date",
    "Bill To",
    "Page",
    "S.No",
    "Product",
    "HSN/SAC",
    "Qty",
    "Area",
    "Rate",
    "Taxable Value",
    "Tax %",
    "Tax Amount",
    "Line Total",
    "Grand Total",
    "Status",
]

MONEY_COLUMNS = ("Rate", "Taxable Value", "Tax Amount", "Line Total", "Grand Total")


def _number(text: Any) -> Any:
    """Formatted amount back to a number for Excel; other text is kept."""
    if text is None:
        return ""
    try:
        return float(to_decimal(text))
    except ValueError:
        return text


def _quantity(text: str) -> Any:
    """Strip the unit suffix ("12 Pcs" -> 12)."""
    value = _number(text.split()[0]) if text.strip() else ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _line_row_dict(result: InvoiceRenderResult, page_number: int, row: LineRow) -> dict:
    return {
        "Invoice No": result.invoice_number,
        "Invoice Date": result.invoice_date,
        "Bill To": result.bill_to_name,
        "Page": page_number,
        "S.No": row.serial,
        "Product": row.name,
        "HSN/SAC": row.hsn_code,
        "Qty": _quantity(row.quantity),
        "Area": _number(row.area),
        "Rate": _number(row.rate),
        "Taxable Value": _number(row.taxable_value),
        "Tax %": _number(row.tax_rate),
        "Tax Amount": _number(row.tax_amount),
        "Line Total": _number(row.total_amount),
        "Grand Total": float(result.totals.grand_total.quantize(Decimal("0.01"))),
        "Status": result.status,
    }


def export_to_excel(
    results: List[InvoiceRenderResult],
    output_path: Union[str, Path],
) -> str:
    """Export rendered invoices to an Excel workbook.

    Args:
        results: Rendered invoices, in the order they should appear
        output_path: Path to output Excel file

    Returns:
        Path to created Excel file

    Excel structure:
    - One row per line item, sheet "Invoices"
    - Invoice number, date, Bill-To name, grand total and validation status
      repeated per row
    - Money columns as numbers with two-decimal formatting
    """
    if not results:
        raise ValueError("Cannot export an empty list of invoices")

    rows = []
    for result in results:
        for page in result.pages:
            for row in page.rows:
                rows.append(_line_row_dict(result, page.header.page_number, row))

    df = pd.DataFrame(rows, columns=COLUMNS)

    output_path_obj = Path(output_path)
    output_path_obj.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(output_path_obj, engine='openpyxl') as writer:
        df.to_excel(writer, index=False, sheet_name='Invoices')

        worksheet = writer.sheets['Invoices']

        from openpyxl.styles.numbers import FORMAT_NUMBER_00

        # Column indices by name (robust when columns are added)
        def _idx(name: str) -> int:
            return df.columns.get_loc(name) if name in df.columns else -1

        money_indexes = [_idx(name) for name in MONEY_COLUMNS]
        area_idx = _idx("Area")

        for row in worksheet.iter_rows(min_row=2, max_row=worksheet.max_row):
            for idx in money_indexes:
                if idx >= 0:
                    row[idx].number_format = FORMAT_NUMBER_00
            if area_idx >= 0 and isinstance(row[area_idx].value, (int, float)):
                row[area_idx].number_format = FORMAT_NUMBER_00

    logger.info(f"Exported {len(rows)} line(s) from {len(results)} invoice(s) to {output_path_obj}")
    return str(output_path_obj)
