"""
reporter.py — human, JSON and spreadsheet views of a ValidationResult

Public API:
    report = build_report(result, input_path=path, options=options)   # versioned JSON payload
    done   = build_commit_report(result, summary)
    text   = render_text_report(result)
    errors = errors_frame(result)                                     # pandas DataFrame
    costs  = costs_frame(result)
    write_workbook(result, Path("import-report.xlsx"))
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from cost_import.amounts import format_cents
from cost_import.contracts import build_run_summary, contract_header
from cost_import.importer import CommitSummary, ValidationResult
from cost_import.tokenizer import ParseOptions

TEXT_REPORT_ERROR_LIMIT = 20

COST_COLUMNS = ["line_number", "date", "description", "amount", "amount_cents", "category", "vendor", "notes"]
ERROR_COLUMNS = ["line_number", "field", "message", "raw_value"]


def build_report(
    result: ValidationResult,
    *,
    input_path: Optional[Path] = None,
    options: Optional[ParseOptions] = None,
    warnings: Optional[list[str]] = None,
) -> dict[str, Any]:
    payload = result.to_dict()
    payload.update(contract_header("cost_import.validation", input_path))
    payload.update(
        {
            "vendors": list(result.vendors),
            "categories": list(result.categories),
            "run_summary": build_run_summary(
                "validate",
                input_path=input_path,
                status="ok" if result.is_valid else "errors",
                options=options,
                delimiter=result.delimiter,
                mapping=result.mapping,
                metrics={
                    "total_rows": result.total_rows,
                    "valid_rows": result.valid_rows,
                    "error_rows": result.error_rows,
                    "error_count": len(result.errors),
                    "total_amount_cents": sum(cost.amount_cents for cost in result.costs),
                },
                warnings=warnings,
            ),
        }
    )
    return payload


def build_commit_report(
    result: ValidationResult,
    summary: CommitSummary,
    *,
    input_path: Optional[Path] = None,
) -> dict[str, Any]:
    return {
        **contract_header("cost_import.commit", input_path),
        "inserted": summary.inserted,
        "created_vendor_ids": list(summary.created_vendor_ids),
        "created_category_ids": list(summary.created_category_ids),
        "run_summary": build_run_summary(
            "commit",
            input_path=input_path,
            delimiter=result.delimiter,
            mapping=result.mapping,
            metrics={
                "inserted": summary.inserted,
                "created_vendors": len(summary.created_vendor_ids),
                "created_categories": len(summary.created_category_ids),
                "total_amount_cents": sum(cost.amount_cents for cost in result.costs),
            },
        ),
    }


def render_text_report(result: ValidationResult, limit: int = TEXT_REPORT_ERROR_LIMIT) -> str:
    total_cents = sum(cost.amount_cents for cost in result.costs)
    lines = [
        "cost-import validate",
        f"Delimiter: {result.delimiter!r}",
        "Mapping: " + ", ".join(f"{name} <- {header}" for name, header in result.mapping.items()),
        f"Rows: {result.total_rows}",
        f"Valid rows: {result.valid_rows}",
        f"Error rows: {result.error_rows}",
        f"Total of valid rows: {format_cents(total_cents)}",
    ]
    if result.unmatched_vendors:
        lines.append("New vendors: " + ", ".join(result.unmatched_vendors))
    if result.unmatched_categories:
        lines.append("New categories: " + ", ".join(result.unmatched_categories))
    if result.errors:
        lines.append("Errors:")
        for error in result.errors[:limit]:
            lines.append(f"- line {error.line_number} [{error.field}]: {error.message}")
        hidden = len(result.errors) - limit
        if hidden > 0:
            lines.append(f"- ... {hidden} more")
    return "\n".join(lines) + "\n"


def errors_frame(result: ValidationResult) -> pd.DataFrame:
    return pd.DataFrame([error.to_dict() for error in result.errors], columns=ERROR_COLUMNS)


def costs_frame(result: ValidationResult) -> pd.DataFrame:
    """Valid rows for preview. Amounts stay integer cents; `amount` is display text."""
    valid_lines = sorted(set(range(1, result.total_rows + 1)) - {e.line_number for e in result.errors})
    records = [
        {
            "line_number": line_number,
            "date": cost.date.isoformat(),
            "description": cost.description,
            "amount": format_cents(cost.amount_cents, symbol=""),
            "amount_cents": cost.amount_cents,
            "category": cost.category,
            "vendor": cost.vendor,
            "notes": cost.notes,
        }
        for line_number, cost in zip(valid_lines, result.costs)
    ]
    return pd.DataFrame(records, columns=COST_COLUMNS)


def summary_frame(result: ValidationResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"field": "delimiter", "value": result.delimiter},
            {"field": "total_rows", "value": result.total_rows},
            {"field": "valid_rows", "value": result.valid_rows},
            {"field": "error_rows", "value": result.error_rows},
            {"field": "mapping", "value": ", ".join(f"{k}={v}" for k, v in result.mapping.items())},
            {"field": "unmatched_vendors", "value": ", ".join(result.unmatched_vendors)},
            {"field": "unmatched_categories", "value": ", ".join(result.unmatched_categories)},
        ]
    )


# ══════════════════════════════════════════════════════════════════════════
# WORKBOOK
# ══════════════════════════════════════════════════════════════════════════

def _style_sheet(ws, header_color: str, max_width: int = 60) -> None:
    """Apply bold header, color, frozen row, and column widths."""
    fill = PatternFill("solid", fgColor=header_color)
    font = Font(bold=True, color="FFFFFF")
    for cell in ws[1]:
        cell.font = font
        cell.fill = fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.freeze_panes = "A2"
    for i, column in enumerate(ws.iter_cols(max_row=min(ws.max_row, 300)), start=1):
        width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column) + 2
        ws.column_dimensions[get_column_letter(i)].width = max(10, min(max_width, width))


def write_workbook(result: ValidationResult, output_path: Path) -> None:
    """Write Valid Costs / Errors / Summary sheets to an .xlsx file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        costs_frame(result).to_excel(writer, index=False, sheet_name="Valid Costs")
        errors_frame(result).to_excel(writer, index=False, sheet_name="Errors")
        summary_frame(result).to_excel(writer, index=False, sheet_name="Summary")

        _style_sheet(writer.sheets["Valid Costs"], "4CAF50")   # green
        _style_sheet(writer.sheets["Errors"], "E53935")        # red
        _style_sheet(writer.sheets["Summary"], "1565C0")       # blue
        for cell in writer.sheets["Errors"]["C"][1:]:
            cell.alignment = Alignment(wrap_text=True, vertical="top")
