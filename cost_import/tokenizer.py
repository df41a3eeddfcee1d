"""
tokenizer.py — delimited-text tokenizer for cost imports

Turns one decoded text buffer into a RawTable: the delimiter, the header
strings and one {header: raw value} mapping per data row. Knows nothing
about dates or money.

Public API:
    table = parse(text)
    table = parse(text, ParseOptions(delimiter=";", has_headers=False))

Quoting follows the usual spreadsheet-export rules: a field wrapped in
double quotes may contain the delimiter, line breaks and doubled quotes
(`""` -> `"`). Line terminators are \\r\\n, \\r and \\n.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from cost_import.errors import EmptyInputError, StructuralError

logger = logging.getLogger(__name__)

DELIMITER_CANDIDATES = (",", "\t", ";")
DEFAULT_DELIMITER = ","
QUOTE = '"'


@dataclass(frozen=True)
class ParseOptions:
    delimiter: Optional[str] = None   # None = detect from the first content line
    has_headers: bool = True
    trim_values: bool = True


@dataclass(frozen=True)
class RawTable:
    """Structural view of one import file. Every row has one value per header."""

    delimiter: str
    headers: tuple[str, ...]
    rows: tuple[dict[str, str], ...] = field(default_factory=tuple)

    def line_number(self, index: int) -> int:
        """1-based line number of the data row at `index` (header row = line 0)."""
        return index + 1


# ══════════════════════════════════════════════════════════════════════════════
# LOGICAL ROWS
# ══════════════════════════════════════════════════════════════════════════════

def split_logical_rows(text: str) -> list[str]:
    """
    Split the buffer into logical rows.

    One running quote flag is kept for the whole buffer, so a line break
    inside an open quote stays part of the current row. A doubled quote
    flips the flag twice and therefore leaves it unchanged.
    """
    rows: list[str] = []
    in_quotes = False
    start = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == QUOTE:
            in_quotes = not in_quotes
        elif not in_quotes and (ch == "\n" or ch == "\r"):
            rows.append(text[start:i])
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            start = i + 1
        i += 1
    rows.append(text[start:])
    return rows


def split_fields(row: str, delimiter: str) -> list[str]:
    """Split one logical row into raw field strings, unwrapping quotes."""
    fields: list[str] = []
    buf: list[str] = []
    in_quotes = False
    i = 0
    n = len(row)
    while i < n:
        ch = row[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and row[i + 1] == QUOTE:
                buf.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
        i += 1
    fields.append("".join(buf))
    return fields


# ══════════════════════════════════════════════════════════════════════════════
# DELIMITER DETECTION
# ══════════════════════════════════════════════════════════════════════════════

def detect_delimiter(line: str) -> str:
    """
    Pick the delimiter for a file from its first content line.

    Counts comma, tab and semicolon outside quoted spans. The highest count
    wins; a tie for the highest count, or no candidate at all, means comma.
    """
    counts = {candidate: 0 for candidate in DELIMITER_CANDIDATES}
    in_quotes = False
    for ch in line:
        if ch == QUOTE:
            in_quotes = not in_quotes
        elif not in_quotes and ch in counts:
            counts[ch] += 1

    best = max(counts.values())
    winners = [candidate for candidate, count in counts.items() if count == best]
    if best == 0 or len(winners) > 1:
        return DEFAULT_DELIMITER
    return winners[0]


def _is_blank(fields: list[str]) -> bool:
    return all(not value.strip() for value in fields)


def _strip_blank_edges(rows: list[list[str]]) -> list[list[str]]:
    start = 0
    end = len(rows)
    while start < end and _is_blank(rows[start]):
        start += 1
    while end > start and _is_blank(rows[end - 1]):
        end -= 1
    return rows[start:end]


# ══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════════════════════

def parse(text: str, options: Optional[ParseOptions] = None) -> RawTable:
    """
    Tokenize `text` into a RawTable.

    Raises:
        EmptyInputError  if there is no content line once blanks are removed.
        StructuralError  if a data row's field count differs from the header's.
    """
    options = options or ParseOptions()
    if not text or not text.strip():
        raise EmptyInputError()

    logical_rows = split_logical_rows(text)
    content = [line for line in logical_rows if line.strip()]
    if not content:
        raise EmptyInputError()

    delimiter = options.delimiter or detect_delimiter(content[0])
    logger.debug(
        "delimiter_detected",
        extra={"delimiter": delimiter, "forced": options.delimiter is not None},
    )

    # Whitespace-only lines are skipped unless they hold a delimiter ("\t\t" in a TSV).
    lines = [line for line in logical_rows if line.strip() or delimiter in line]
    parsed = _strip_blank_edges([split_fields(line, delimiter) for line in lines])
    if not parsed:
        raise EmptyInputError()

    if options.has_headers:
        headers = parsed[0]
        data_rows = parsed[1:]
    else:
        headers = [f"Column {i + 1}" for i in range(len(parsed[0]))]
        data_rows = parsed

    if options.trim_values:
        headers = [header.strip() for header in headers]

    expected = len(headers)
    rows: list[dict[str, str]] = []
    for index, values in enumerate(data_rows):
        if len(values) != expected:
            raise StructuralError(index + 1, expected, len(values))
        if options.trim_values:
            values = [value.strip() for value in values]
        rows.append(dict(zip(headers, values)))

    return RawTable(delimiter=delimiter, headers=tuple(headers), rows=tuple(rows))
