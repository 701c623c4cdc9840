"""
Ordered pattern rules for pulling invoice fields out of flattened OCR text.

Each field has a priority-ordered list of compiled patterns; the first
pattern that produces a usable match wins. Rules live here as data so new
layouts can be supported by appending a pattern rather than touching the
extractor.
"""

import re
from dataclasses import dataclass
from loguru import logger

# ASCII-only classes: \d and \s must not match full-width digits or
# other Unicode look-alikes that float() would still parse.
_FLAGS = re.IGNORECASE | re.ASCII

# Heuristic confidence assigned when a field is matched (0-100 scale, same
# as Textract block confidence).
INVOICE_NUMBER_CONFIDENCE = 85
TOTAL_AMOUNT_CONFIDENCE = 80
VENDOR_NAME_CONFIDENCE = 70

DEFAULT_CURRENCY = "USD"
MIN_INVOICE_NUMBER_LENGTH = 3
VENDOR_SCAN_LINES = 3
MIN_VENDOR_LENGTH = 4

_TOKEN = r"([a-zA-Z0-9\-/]+)"

INVOICE_NUMBER_PATTERNS = [
    re.compile(r"invoice\s*#?\s*:?\s*" + _TOKEN, _FLAGS),
    re.compile(r"inv\s*#?\s*:?\s*" + _TOKEN, _FLAGS),
    re.compile(r"invoice\s*number\s*:?\s*" + _TOKEN, _FLAGS),
    re.compile(r"bill\s*#?\s*:?\s*" + _TOKEN, _FLAGS),
]

# group 1: optional ISO currency code, group 2: amount
_AMOUNT = r"\s*:?\s*([A-Z]{3})?\s*\$?([0-9,]+\.?[0-9]*)"

TOTAL_AMOUNT_PATTERNS = [
    re.compile(r"total" + _AMOUNT, _FLAGS),
    re.compile(r"amount\s*due" + _AMOUNT, _FLAGS),
    re.compile(r"balance\s*due" + _AMOUNT, _FLAGS),
    re.compile(r"grand\s*total" + _AMOUNT, _FLAGS),
]

_MONTHS = (
    "january|february|march|april|may|june|july|"
    "august|september|october|november|december"
)

# Families are tried in order; the first family with any hit supplies both dates.
DATE_PATTERN_FAMILIES = [
    re.compile(r"\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}", re.ASCII),
    re.compile(r"\d{4}[/\-]\d{1,2}[/\-]\d{1,2}", re.ASCII),
    re.compile(r"(?:" + _MONTHS + r")\s+\d{1,2},?\s+\d{4}", _FLAGS),
]

VENDOR_EXCLUDE_PATTERN = re.compile(r"invoice|bill|statement", _FLAGS)


@dataclass(frozen=True)
class AmountMatch:
    amount: float
    currency: str | None = None


def match_invoice_number(text: str) -> str | None:
    for pattern in INVOICE_NUMBER_PATTERNS:
        match = pattern.search(text)
        if match and len(match.group(1)) >= MIN_INVOICE_NUMBER_LENGTH:
            return match.group(1).strip()
    return None


def match_total_amount(text: str) -> AmountMatch | None:
    """
    Find the invoice total and, when printed next to it, its currency code.

    A pattern whose number cannot be parsed (e.g. a bare "," captured from
    "Total: ,") is skipped and the next pattern is tried.
    """
    for pattern in TOTAL_AMOUNT_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        try:
            amount = float(match.group(2).replace(",", ""))
        except ValueError:
            logger.debug("Ignoring unparseable amount", raw=match.group(0))
            continue
        return AmountMatch(amount=amount, currency=match.group(1))
    return None


def match_dates(text: str) -> tuple[str | None, str | None]:
    """
    Return (invoice_date, due_date) from the first date family with a hit.

    Dates are returned exactly as printed; no normalization is attempted.
    """
    for pattern in DATE_PATTERN_FAMILIES:
        found = [m.group(0) for m in pattern.finditer(text)]
        if found:
            return found[0], found[1] if len(found) > 1 else None
    return None, None


def match_vendor_name(text: str) -> str | None:
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    for line in lines[:VENDOR_SCAN_LINES]:
        if len(line) >= MIN_VENDOR_LENGTH and not VENDOR_EXCLUDE_PATTERN.search(line):
            return line
    return None
