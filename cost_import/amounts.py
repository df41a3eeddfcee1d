"""
amounts.py — currency/amount normalisation to integer cents

parse_amount() reduces the notations accounting exports use to one signed
integer number of cents:

    "1500"            ->  150000
    "$1,500.00"       ->  150000
    "AUD 1 500.50"    ->  150050
    "€1.500,00"       ->  150000
    "($1,500.00)"     -> -150000
    "-45.5"           ->   -4550

The decimal string is converted exactly and rounded half-up to whole cents
exactly once, here. Nothing downstream ever sees a fractional amount.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

from cost_import.errors import InvalidAmountError

LEADING_CODE_RE = re.compile(r"^(AUD|USD|EUR|GBP|JPY)\s*", re.IGNORECASE)
TRAILING_CODE_RE = re.compile(r"\s*(AUD|USD|EUR|GBP|JPY)$", re.IGNORECASE)
CURRENCY_SYMBOL_RE = re.compile(r"[$€£¥]")
WHITESPACE_RE = re.compile(r"\s+")

# 1.500 / 1.500,00 : period groups thousands, comma marks decimals.
# Everything else (1,500.00, 1500, 12,5) treats commas as grouping.
EUROPEAN_RE = re.compile(r"\d+\.\d{3}(?:,\d{1,2})?$")
DECIMAL_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")

CENT = Decimal("1")


def _split_sign(value: str) -> tuple[str, bool]:
    if len(value) >= 2 and value.startswith("(") and value.endswith(")"):
        return value[1:-1].strip(), True
    if value.startswith("-"):
        return value[1:].strip(), True
    return value, False


def _strip_currency(value: str) -> str:
    value = LEADING_CODE_RE.sub("", value, count=1)
    value = TRAILING_CODE_RE.sub("", value)
    return CURRENCY_SYMBOL_RE.sub("", value)


def _normalise_separators(value: str) -> str:
    if EUROPEAN_RE.search(value):
        return value.replace(".", "").replace(",", ".", 1)
    return value.replace(",", "")


def parse_amount(raw: str) -> int:
    """Return the amount in `raw` as signed integer cents or raise InvalidAmountError."""
    value, negative = _split_sign(raw.strip())
    value = WHITESPACE_RE.sub("", _strip_currency(value))

    # "$-50": the sign sat behind the currency marker
    if value.startswith("-"):
        negative = not negative
        value = value[1:]

    cleaned = _normalise_separators(value)
    if not DECIMAL_RE.match(cleaned):
        raise InvalidAmountError(raw)

    # Precision covers every digit of `cleaned` plus the two cent places.
    with localcontext() as ctx:
        ctx.prec = len(cleaned) + 3
        cents = int((Decimal(cleaned) * 100).quantize(CENT, rounding=ROUND_HALF_UP))
    return -cents if negative else cents


def format_cents(cents: int, symbol: str = "$") -> str:
    """Canonical rendering of a cents value, e.g. -150000 -> "-$1500.00"."""
    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(cents), 100)
    return f"{sign}{symbol}{whole}.{fraction:02d}"
