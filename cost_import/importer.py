"""
importer.py — cost import orchestration

Two explicit steps:

    result = validate_import(text, {"vendor": "Supplier"})   # preview, no persistence
    summary = commit_import(result, repository)              # hands rows to storage

validate_import() tokenizes, resolves the column mapping, validates every row
independently and gathers one ValidationResult. Structural problems raise;
row problems are reported. commit_import() never retries a failing
repository call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Sequence, runtime_checkable

from cost_import.columns import missing_required_fields, resolve_column_mapping
from cost_import.errors import CommitRejectedError, MappingError
from cost_import.tokenizer import ParseOptions, parse
from cost_import.validation import RowError, ValidatedCost, build_candidate_row, validate_row

logger = logging.getLogger(__name__)


@runtime_checkable
class NameResolver(Protocol):
    """Looks vendor and category names up against existing records."""

    def match_vendors(self, names: Sequence[str]) -> Mapping[str, str]:
        """Return {name: vendor id} for the names that already exist."""
        ...

    def match_categories(self, names: Sequence[str]) -> Mapping[str, str]:
        """Return {name: category id} for the names that already exist."""
        ...


@dataclass(frozen=True)
class CommitSummary:
    inserted: int
    created_vendor_ids: tuple[str, ...] = ()
    created_category_ids: tuple[str, ...] = ()


@runtime_checkable
class CostRepository(Protocol):
    def save_costs(
        self,
        costs: Sequence[ValidatedCost],
        *,
        vendors: Sequence[str],
        categories: Sequence[str],
        create_new_vendors: bool,
        create_new_categories: bool,
    ) -> CommitSummary:
        ...


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one import attempt. Built fresh per attempt, never stored."""

    headers: tuple[str, ...]
    delimiter: str
    mapping: dict[str, str]
    total_rows: int
    valid_rows: int
    error_rows: int
    errors: tuple[RowError, ...] = ()
    costs: tuple[ValidatedCost, ...] = ()
    vendors: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    matched_vendors: dict[str, str] = field(default_factory=dict)
    unmatched_vendors: tuple[str, ...] = ()
    matched_categories: dict[str, str] = field(default_factory=dict)
    unmatched_categories: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.error_rows == 0 and self.valid_rows > 0

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "headers": list(self.headers),
            "delimiter": self.delimiter,
            "mapping": dict(self.mapping),
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "error_rows": self.error_rows,
            "errors": [error.to_dict() for error in self.errors],
            "costs": [cost.to_dict() for cost in self.costs],
            "matched_vendors": dict(self.matched_vendors),
            "unmatched_vendors": list(self.unmatched_vendors),
            "matched_categories": dict(self.matched_categories),
            "unmatched_categories": list(self.unmatched_categories),
        }


def _distinct(values: Sequence[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(value for value in values if value))


def _partition(names: tuple[str, ...], matched: Mapping[str, str]) -> tuple[dict[str, str], tuple[str, ...]]:
    found = {name: matched[name] for name in names if name in matched}
    return found, tuple(name for name in names if name not in found)


def validate_import(
    raw_text: str,
    mapping_overrides: Optional[Mapping[str, Optional[str]]] = None,
    *,
    options: Optional[ParseOptions] = None,
    resolver: Optional[NameResolver] = None,
) -> ValidationResult:
    """
    Validate a whole import file without touching persistence.

    Raises:
        EmptyInputError / StructuralError  from the tokenizer.
        MappingError                       for bad overrides or unmapped required fields.
    """
    table = parse(raw_text, options)
    mapping = resolve_column_mapping(table.headers, mapping_overrides)

    missing = missing_required_fields(mapping)
    if missing:
        raise MappingError(
            "Required fields are not mapped to any column: " + ", ".join(missing)
        )

    errors: list[RowError] = []
    costs: list[ValidatedCost] = []
    error_rows = 0
    for index, row in enumerate(table.rows):
        outcome = validate_row(build_candidate_row(row, mapping), table.line_number(index))
        if isinstance(outcome, ValidatedCost):
            costs.append(outcome)
        else:
            error_rows += 1
            errors.extend(outcome)

    vendors = _distinct([cost.vendor for cost in costs])
    categories = _distinct([cost.category for cost in costs])
    matched_vendors: Mapping[str, str] = {}
    matched_categories: Mapping[str, str] = {}
    if resolver is not None:
        matched_vendors = resolver.match_vendors(vendors) if vendors else {}
        matched_categories = resolver.match_categories(categories) if categories else {}
    found_vendors, unmatched_vendors = _partition(vendors, matched_vendors)
    found_categories, unmatched_categories = _partition(categories, matched_categories)

    result = ValidationResult(
        headers=table.headers,
        delimiter=table.delimiter,
        mapping=mapping,
        total_rows=len(table.rows),
        valid_rows=len(costs),
        error_rows=error_rows,
        errors=tuple(errors),
        costs=tuple(costs),
        vendors=vendors,
        categories=categories,
        matched_vendors=found_vendors,
        unmatched_vendors=unmatched_vendors,
        matched_categories=found_categories,
        unmatched_categories=unmatched_categories,
    )
    logger.info(
        "import_validated",
        extra={
            "total_rows": result.total_rows,
            "valid_rows": result.valid_rows,
            "error_rows": result.error_rows,
            "delimiter": result.delimiter,
        },
    )
    return result


def commit_import(
    result: ValidationResult,
    repository: CostRepository,
    *,
    create_new_vendors: bool = True,
    create_new_categories: bool = False,
) -> CommitSummary:
    """Hand the validated rows of `result` to the repository."""
    if result.error_rows:
        raise CommitRejectedError(
            f"{result.error_rows} row(s) still have errors; fix them before importing"
        )
    if not result.costs:
        raise CommitRejectedError("At least one cost entry is required")

    try:
        summary = repository.save_costs(
            result.costs,
            vendors=result.vendors,
            categories=result.categories,
            create_new_vendors=create_new_vendors,
            create_new_categories=create_new_categories,
        )
    except Exception:
        logger.exception("import_commit_failed", extra={"rows": len(result.costs)})
        raise

    logger.info(
        "import_committed",
        extra={
            "inserted": summary.inserted,
            "created_vendors": len(summary.created_vendor_ids),
            "created_categories": len(summary.created_category_ids),
        },
    )
    return summary
