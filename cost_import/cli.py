from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from cost_import import __version__ as TOOL_VERSION
from cost_import.columns import (
    CANONICAL_FIELDS,
    detect_column_mapping,
    missing_required_fields,
    resolve_column_mapping,
    unmapped_headers,
)
from cost_import.contracts import contract_header, describe_parse_options, timestamp_token
from cost_import.errors import (
    CostImportError,
    EmptyInputError,
    MappingError,
    StructuralError,
    UploadTooLargeError,
)
from cost_import.importer import validate_import
from cost_import.loader import load_upload
from cost_import.tokenizer import ParseOptions, parse

EXIT_SUCCESS = 0
EXIT_COMMAND_ERROR = 1
EXIT_PARSE_FAILED = 2
EXIT_VALIDATE_FAILED = 5

DELIMITER_ALIASES = {"tab": "\t", "\\t": "\t", "comma": ",", "semicolon": ";"}


class CliError(Exception):
    def __init__(self, message: str, code: int = EXIT_COMMAND_ERROR) -> None:
        super().__init__(message)
        self.code = code


class CostImportArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise CliError(message, EXIT_COMMAND_ERROR)


def eprint(message: str) -> None:
    print(message, file=sys.stderr)


def emit_human(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        eprint(message)


def json_dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True)


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json_dumps(payload), encoding="utf-8")


def default_output_dir(input_path: Path) -> Path:
    return Path.cwd() / "cost-import-output" / f"{input_path.stem}-{timestamp_token()}"


def determine_output_dir(args: argparse.Namespace, input_path: Path) -> Path:
    if getattr(args, "out_dir", None):
        return Path(args.out_dir)
    return default_output_dir(input_path)


def configure_logging(args: argparse.Namespace) -> None:
    level = logging.WARNING
    if getattr(args, "verbose", False):
        level = logging.DEBUG
    elif getattr(args, "quiet", False):
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s %(message)s", stream=sys.stderr)


def classify_exception(exc: Exception) -> int:
    if isinstance(exc, CliError):
        return exc.code
    if isinstance(exc, (EmptyInputError, StructuralError, UploadTooLargeError)):
        return EXIT_PARSE_FAILED
    if isinstance(exc, (MappingError, FileNotFoundError)):
        return EXIT_COMMAND_ERROR
    if isinstance(exc, CostImportError):
        return EXIT_PARSE_FAILED
    return EXIT_COMMAND_ERROR


def parse_options_from_args(args: argparse.Namespace) -> ParseOptions:
    delimiter = args.delimiter
    if delimiter is not None:
        delimiter = DELIMITER_ALIASES.get(delimiter.lower(), delimiter)
        if len(delimiter) != 1:
            raise CliError(f"Delimiter must be a single character, got {args.delimiter!r}")
    return ParseOptions(
        delimiter=delimiter,
        has_headers=not args.no_headers,
        trim_values=not args.no_trim,
    )


def parse_mapping_overrides(args: argparse.Namespace) -> dict[str, Optional[str]]:
    overrides: dict[str, Optional[str]] = {}
    for item in args.map or []:
        field_name, sep, header = item.partition("=")
        if not sep or not field_name.strip():
            raise CliError(f"--map expects FIELD=HEADER, got {item!r}")
        overrides[field_name.strip().lower()] = header
    for field_name in args.unmap or []:
        overrides[field_name.strip().lower()] = None
    return overrides


def render_mapping_text(payload: dict[str, Any]) -> str:
    lines = ["cost-import mapping", f"Input: {payload['input']}"]
    for item in payload["columns"]:
        lines.append(f"- {item['header']!r} -> {item['detected'] or '[manual mapping required]'}")
    if payload["missing_required"]:
        lines.append("Unmapped required fields: " + ", ".join(payload["missing_required"]))
    return "\n".join(lines) + "\n"


EXPLAIN_RULES = {
    "date_iso_first": {
        "description": "Dates that start with a four-digit year are read as year/month/day.",
        "evidence": "The value starts with YYYY-M-D or YYYY/M/D; anything after the day is ignored.",
        "override_hint": "Always unambiguous; no override needed.",
    },
    "date_day_first": {
        "description": "N1/N2/YYYY is read as day/month when the first number is above 12.",
        "evidence": "15/01/2024 can only be 15 January.",
        "override_hint": "Always applied; the value itself rules out month-first.",
    },
    "date_month_first_default": {
        "description": "N1/N2/YYYY with both numbers 12 or less is read as month/day.",
        "evidence": "03/05/2024 becomes 5 March 2024. The other reading is used only if this one is not a real date.",
        "override_hint": "Convert the column to YYYY-MM-DD before importing if the export is day-first.",
    },
    "amount_european_format": {
        "description": "A period followed by exactly three digits marks thousands and a trailing comma marks decimals.",
        "evidence": "1.500,00 becomes 1500.00; 1.500 becomes 1500.",
        "override_hint": "Export amounts without grouping separators to avoid the guess.",
    },
    "amount_parentheses_negative": {
        "description": "Amounts in parentheses or with a leading minus are negative.",
        "evidence": "($1,500.00) becomes -150000 cents. Negative and zero costs are then rejected per row.",
        "override_hint": "Record refunds separately; costs must be positive.",
    },
    "column_substring_match": {
        "description": "A header with no exact alias is mapped when it contains a known alias.",
        "evidence": "transaction_date maps to date; expense_amount maps to amount (the rightmost alias wins).",
        "override_hint": "Pass --map FIELD=HEADER or --unmap FIELD to change the mapping.",
    },
    "structural_column_count": {
        "description": "Every row must have as many fields as the header row.",
        "evidence": "A row with a different field count rejects the whole file.",
        "override_hint": "Quote fields that contain the delimiter, or pass --delimiter explicitly.",
    },
}


def add_parse_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="Input CSV/TSV file path")
    parser.add_argument("--delimiter", help="Force a delimiter (',', ';', 'tab'); detected when omitted")
    parser.add_argument("--no-headers", action="store_true", help="First row is data; headers become Column 1..N")
    parser.add_argument("--no-trim", action="store_true", help="Keep leading/trailing whitespace in values")
    parser.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    parser.add_argument("-v", "--verbose", action="store_true", help="More human logs")


def build_parser() -> argparse.ArgumentParser:
    parser = CostImportArgumentParser(prog="cost-import", description="Validate spreadsheet cost exports before import.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Validate a cost export and report every row problem.")
    add_parse_arguments(validate)
    validate.add_argument("--map", action="append", metavar="FIELD=HEADER", help="Map a field to a column (repeatable)")
    validate.add_argument("--unmap", action="append", metavar="FIELD", help="Leave a field unmapped (repeatable)")
    validate.add_argument("-o", "--out", dest="out_dir", help="Output directory for report.json")
    validate.add_argument("--output", help="Explicit JSON report output path")
    validate.add_argument("--save", action="store_true", help="Write report.json under ./cost-import-output/")
    validate.add_argument("--xlsx", help="Also write a spreadsheet report to this path")

    mapping = subparsers.add_parser("mapping", help="Show how each header maps onto cost fields.")
    add_parse_arguments(mapping)

    explain = subparsers.add_parser("explain", help="Explain a disambiguation rule.")
    explain.add_argument("rule_id", help="Rule identifier")
    explain.add_argument("--json", action="store_true", help="Write machine JSON to stdout")

    subparsers.add_parser("version", help="Print version")
    return parser


def maybe_emit_json_stdout(payload: Any, enabled: bool) -> None:
    if enabled:
        print(json_dumps(payload))


def run_validate(args: argparse.Namespace) -> int:
    from cost_import.reporter import build_report, render_text_report, write_workbook

    input_path = Path(args.input)
    if not input_path.exists():
        eprint(f"File not found: {input_path}")
        return EXIT_COMMAND_ERROR

    try:
        options = parse_options_from_args(args)
        overrides = parse_mapping_overrides(args)
        loaded = load_upload(input_path)
        result = validate_import(loaded["text"], overrides, options=options)
        report = build_report(result, input_path=input_path, options=options, warnings=loaded["warnings"])

        if args.output or args.out_dir or args.save:
            output_path = Path(args.output) if args.output else determine_output_dir(args, input_path) / "report.json"
            write_json(output_path, report)
            emit_human(f"Report written: {output_path}", quiet=args.quiet or args.json)
        if args.xlsx:
            write_workbook(result, Path(args.xlsx))
            emit_human(f"Workbook written: {args.xlsx}", quiet=args.quiet or args.json)

        if args.json:
            maybe_emit_json_stdout(report, True)
        else:
            for warning in loaded["warnings"]:
                emit_human(f"Warning: {warning}", quiet=args.quiet)
            emit_human(render_text_report(result).rstrip(), quiet=args.quiet)
        return EXIT_SUCCESS if result.is_valid else EXIT_VALIDATE_FAILED
    except Exception as exc:
        eprint(str(exc))
        return classify_exception(exc)


def run_mapping(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    if not input_path.exists():
        eprint(f"File not found: {input_path}")
        return EXIT_COMMAND_ERROR

    try:
        options = parse_options_from_args(args)
        table = parse(load_upload(input_path)["text"], options)
        mapping = resolve_column_mapping(table.headers)
        payload = {
            **contract_header("cost_import.mapping", input_path),
            "input": str(input_path),
            "delimiter": table.delimiter,
            "parse_options": describe_parse_options(options, table.delimiter),
            "columns": [
                {"header": header, "detected": detect_column_mapping(header)}
                for header in table.headers
            ],
            "mapping": mapping,
            "unmapped_headers": unmapped_headers(table.headers, mapping),
            "missing_required": missing_required_fields(mapping),
            "fields": list(CANONICAL_FIELDS),
        }
        if args.json:
            maybe_emit_json_stdout(payload, True)
        else:
            emit_human(render_mapping_text(payload).rstrip(), quiet=args.quiet)
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_exception(exc)


def run_explain(args: argparse.Namespace) -> int:
    rule = EXPLAIN_RULES.get(args.rule_id)
    if rule is None:
        eprint(f"Unknown rule id: {args.rule_id}")
        return EXIT_COMMAND_ERROR
    payload = {"rule_id": args.rule_id, **rule}
    if args.json:
        maybe_emit_json_stdout(payload, True)
    else:
        print(
            "\n".join(
                [
                    f"Rule: {args.rule_id}",
                    f"What it does: {payload['description']}",
                    f"Example: {payload['evidence']}",
                    f"How to avoid/override it: {payload['override_hint']}",
                ]
            )
        )
    return EXIT_SUCCESS


def run_version() -> int:
    print(TOOL_VERSION)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        configure_logging(args)
        if args.command == "validate":
            return run_validate(args)
        if args.command == "mapping":
            return run_mapping(args)
        if args.command == "explain":
            return run_explain(args)
        if args.command == "version":
            return run_version()
        raise CliError(f"Unknown command: {args.command}", EXIT_COMMAND_ERROR)
    except CliError as exc:
        eprint(str(exc))
        return exc.code


if __name__ == "__main__":
    raise SystemExit(main())
