"""
validation.py — row-level validation of candidate cost rows

validate_row() checks every field of one candidate row and returns either a
ValidatedCost or the full list of RowErrors for that row. Bad values never
raise out of here; the date and amount errors are caught and reported.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Mapping, Union

from cost_import.amounts import parse_amount
from cost_import.columns import CANONICAL_FIELDS
from cost_import.dates import parse_date
from cost_import.errors import InvalidAmountError, InvalidDateError

DESCRIPTION_MAX = 500
CATEGORY_MAX = 100
VENDOR_MAX = 200
NOTES_MAX = 1000

ERROR_MESSAGES = {
    "invalid_date": lambda value: (
        f'Invalid date format "{value}". Expected YYYY-MM-DD, MM/DD/YYYY, or DD/MM/YYYY'
    ),
    "invalid_amount": lambda value: (
        f'Invalid amount "{value}". Expected number or currency format (e.g., 1500.00 or $1,500.00)'
    ),
    "negative_amount": lambda: "Amount must be positive",
    "missing_required": lambda field_name: f'Missing required field "{field_name}"',
    "description_too_long": lambda length: (
        f"Description exceeds maximum length ({length}/{DESCRIPTION_MAX} characters)"
    ),
    "category_too_long": lambda length: (
        f"Category exceeds maximum length ({length}/{CATEGORY_MAX} characters)"
    ),
    "vendor_too_long": lambda length: (
        f"Vendor exceeds maximum length ({length}/{VENDOR_MAX} characters)"
    ),
    "notes_too_long": lambda length: (
        f"Notes exceed maximum length ({length}/{NOTES_MAX} characters)"
    ),
}


@dataclass(frozen=True)
class ValidatedCost:
    date: date
    description: str
    amount_cents: int
    category: str
    vendor: str = ""
    notes: str = ""

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["date"] = self.date.isoformat()
        return payload


@dataclass(frozen=True)
class RowError:
    line_number: int
    field: str
    message: str
    raw_value: str

    def to_dict(self) -> dict:
        return asdict(self)


def build_candidate_row(row: Mapping[str, str], mapping: Mapping[str, str]) -> dict[str, str]:
    """Reinterpret a raw row through the column mapping; unmapped fields are ""."""
    return {
        field_name: row.get(mapping[field_name], "") if field_name in mapping else ""
        for field_name in CANONICAL_FIELDS
    }


def _check_text(
    errors: list[RowError],
    line_number: int,
    field_name: str,
    raw: str,
    limit: int,
    too_long_key: str,
    required: bool,
) -> str:
    value = raw.strip()
    if required and not value:
        errors.append(RowError(line_number, field_name, ERROR_MESSAGES["missing_required"](field_name), raw))
    elif len(value) > limit:
        errors.append(RowError(line_number, field_name, ERROR_MESSAGES[too_long_key](len(value)), raw))
    return value


def validate_row(
    candidate: Mapping[str, str],
    line_number: int,
) -> Union[ValidatedCost, list[RowError]]:
    """Validate one candidate row; every failing field is reported, not just the first."""
    errors: list[RowError] = []

    raw_date = candidate.get("date", "")
    parsed_date = None
    if not raw_date.strip():
        errors.append(RowError(line_number, "date", ERROR_MESSAGES["missing_required"]("date"), raw_date))
    else:
        try:
            parsed_date = parse_date(raw_date)
        except InvalidDateError:
            errors.append(RowError(line_number, "date", ERROR_MESSAGES["invalid_date"](raw_date), raw_date))

    description = _check_text(
        errors, line_number, "description", candidate.get("description", ""),
        DESCRIPTION_MAX, "description_too_long", required=True,
    )

    raw_amount = candidate.get("amount", "")
    amount_cents = None
    if not raw_amount.strip():
        errors.append(RowError(line_number, "amount", ERROR_MESSAGES["missing_required"]("amount"), raw_amount))
    else:
        try:
            amount_cents = parse_amount(raw_amount)
        except InvalidAmountError:
            errors.append(RowError(line_number, "amount", ERROR_MESSAGES["invalid_amount"](raw_amount), raw_amount))
        else:
            if amount_cents <= 0:
                errors.append(RowError(line_number, "amount", ERROR_MESSAGES["negative_amount"](), raw_amount))

    category = _check_text(
        errors, line_number, "category", candidate.get("category", ""),
        CATEGORY_MAX, "category_too_long", required=True,
    )
    vendor = _check_text(
        errors, line_number, "vendor", candidate.get("vendor", ""),
        VENDOR_MAX, "vendor_too_long", required=False,
    )
    notes = _check_text(
        errors, line_number, "notes", candidate.get("notes", ""),
        NOTES_MAX, "notes_too_long", required=False,
    )

    if errors:
        return errors
    return ValidatedCost(
        date=parsed_date,
        description=description,
        amount_cents=amount_cents,
        category=category,
        vendor=vendor,
        notes=notes,
    )
