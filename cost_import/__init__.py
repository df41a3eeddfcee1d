"""CSV cost-import pipeline: tokenize, disambiguate, map and validate cost exports."""

__version__ = "0.1.0"

from cost_import.amounts import format_cents, parse_amount
from cost_import.columns import COLUMN_ALIASES, detect_column_mapping, resolve_column_mapping
from cost_import.dates import parse_date
from cost_import.errors import (
    CommitRejectedError,
    CostImportError,
    EmptyInputError,
    InvalidAmountError,
    InvalidDateError,
    MappingError,
    StructuralError,
    UploadTooLargeError,
)
from cost_import.importer import (
    CommitSummary,
    CostRepository,
    NameResolver,
    ValidationResult,
    commit_import,
    validate_import,
)
from cost_import.tokenizer import ParseOptions, RawTable, parse
from cost_import.validation import RowError, ValidatedCost, validate_row

__all__ = [
    "COLUMN_ALIASES",
    "CommitRejectedError",
    "CommitSummary",
    "CostImportError",
    "CostRepository",
    "EmptyInputError",
    "InvalidAmountError",
    "InvalidDateError",
    "MappingError",
    "NameResolver",
    "ParseOptions",
    "RawTable",
    "RowError",
    "StructuralError",
    "UploadTooLargeError",
    "ValidatedCost",
    "ValidationResult",
    "commit_import",
    "detect_column_mapping",
    "format_cents",
    "parse",
    "parse_amount",
    "parse_date",
    "resolve_column_mapping",
    "validate_import",
    "validate_row",
]
