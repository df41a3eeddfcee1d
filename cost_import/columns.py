"""
columns.py — header-to-field mapping for cost imports

Maps raw spreadsheet headers onto the canonical cost fields through a fixed
alias table. Headers the table does not know stay unmapped and must be
mapped by hand.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from cost_import.errors import MappingError

CANONICAL_FIELDS = ("date", "description", "amount", "category", "vendor", "notes")
REQUIRED_FIELDS = ("date", "description", "amount", "category")

COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("date", "transaction date", "payment date", "invoice date", "trans date", "cost date"),
    "description": ("description", "desc", "details", "item", "memo", "note", "purpose", "expense"),
    "amount": ("amount", "cost", "price", "total", "value", "sum", "expense", "spent"),
    "category": ("category", "type", "classification", "class", "group", "expense type"),
    "vendor": ("vendor", "supplier", "company", "contractor", "payee", "merchant", "contact", "paid to"),
    "notes": ("notes", "comments", "remarks", "memo", "additional notes", "description 2"),
}


def detect_column_mapping(header: str) -> Optional[str]:
    """
    Return the canonical field for `header`, or None when it needs manual mapping.

    Exact alias matches are tried across every field first. Only when none
    matches may the header merely contain an alias; if several aliases are
    contained, the one ending furthest right wins, then the longest one.
    """
    normalized = header.strip().lower()
    if not normalized:
        return None

    for field_name, aliases in COLUMN_ALIASES.items():
        if normalized in aliases:
            return field_name

    best: Optional[tuple[int, int]] = None
    best_field: Optional[str] = None
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            position = normalized.rfind(alias)
            if position < 0:
                continue
            rank = (position + len(alias), len(alias))
            if best is None or rank > best:
                best = rank
                best_field = field_name
    return best_field


def resolve_column_mapping(
    headers: Sequence[str],
    overrides: Optional[Mapping[str, Optional[str]]] = None,
) -> dict[str, str]:
    """
    Build the {canonical field: raw header} mapping for one import.

    Auto-detection runs over the headers in order and the first header to
    claim a field keeps it. Overrides are applied on top: a header assigns
    the field (and is taken away from any other field), None unmaps it.
    """
    mapping: dict[str, str] = {}
    for header in headers:
        detected = detect_column_mapping(header)
        if detected is not None and detected not in mapping:
            mapping[detected] = header

    for field_name, header in (overrides or {}).items():
        if field_name not in CANONICAL_FIELDS:
            raise MappingError(
                f"Unknown field '{field_name}'. Expected one of: {', '.join(CANONICAL_FIELDS)}"
            )
        if header is None:
            mapping.pop(field_name, None)
            continue
        if header not in headers:
            raise MappingError(f"Column '{header}' is not in the file header")
        for other, mapped in list(mapping.items()):
            if mapped == header and other != field_name:
                del mapping[other]
        mapping[field_name] = header

    return {name: mapping[name] for name in CANONICAL_FIELDS if name in mapping}


def missing_required_fields(mapping: Mapping[str, str]) -> list[str]:
    return [name for name in REQUIRED_FIELDS if name not in mapping]


def unmapped_headers(headers: Sequence[str], mapping: Mapping[str, str]) -> list[str]:
    mapped = set(mapping.values())
    return [header for header in headers if header not in mapped]
