"""Exception types raised by the cost-import pipeline."""

from __future__ import annotations


class CostImportError(ValueError):
    """Base class for every error the import pipeline raises."""


class EmptyInputError(CostImportError):
    def __init__(self, message: str = "file is empty") -> None:
        super().__init__(message)


class StructuralError(CostImportError):
    """A data row does not have the same number of fields as the header row."""

    def __init__(self, line_number: int, expected: int, found: int) -> None:
        super().__init__(
            f"row {line_number} has {found} columns but the header has {expected}"
        )
        self.line_number = line_number
        self.expected = expected
        self.found = found


class MappingError(CostImportError):
    pass


class UploadTooLargeError(CostImportError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"file is {size} bytes; the maximum accepted upload is {limit} bytes"
        )
        self.size = size
        self.limit = limit


class CommitRejectedError(CostImportError):
    pass


class InvalidDateError(CostImportError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"Invalid date format: {raw}")
        self.raw = raw


class InvalidAmountError(CostImportError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"Invalid amount: {raw}")
        self.raw = raw
