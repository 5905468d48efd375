from __future__ import annotations

import re
import warnings

import pandas as pd

"""Heuristic cell parsers.

Two independent date paths exist and must stay separate:

- extract_year / extract_month work on the raw text of the date cell and drive
  the row filters (year/month selectors).
- parse_full_date / resolve_period do a real date parse with a fallback to the
  document's own date and drive the monthly buckets of the statistics.

They can disagree for the same cell (e.g. "15.10.2023" filters as month 10 but
may bucket differently); that is expected.

None of these functions raise on malformed input.
"""

__all__ = [
    "extract_year",
    "extract_month",
    "parse_full_date",
    "resolve_period",
    "parse_length",
    "leading_float",
]

_YEAR_RE = re.compile(r"\d{4}", re.ASCII)
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")
_NON_NUMERIC_RE = re.compile(r"[^\d.,-]", re.ASCII)
_LEADING_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)


def extract_year(text: str | None) -> str | None:
    """First run of four digits anywhere in the text ("2023"), else None."""
    if not text:
        return None
    m = _YEAR_RE.search(text)
    return m.group(0) if m else None


def _leading_int(segment: str) -> int | None:
    m = _LEADING_INT_RE.match(segment)
    return int(m.group(1)) if m else None


def extract_month(text: str | None) -> int | None:
    """Month number from ``YYYY-MM-DD`` or ``DD.MM.YYYY`` style text.

    Splits on "-" first, then on "."; the second segment is read as a leading
    integer ("05" -> 5). No second segment or no digits -> None. The value is
    not range-checked.
    """
    if not text:
        return None
    parts = text.split("-")
    if len(parts) >= 2:
        return _leading_int(parts[1])
    parts = text.split(".")
    if len(parts) >= 2:
        return _leading_int(parts[1])
    return None


def parse_full_date(text: str | None) -> pd.Timestamp | None:
    """Parse free-form date text; None when it cannot be read as a date."""
    if not text or not text.strip():
        return None
    try:
        with warnings.catch_warnings():
            # 形式推定の UserWarning は不要
            warnings.simplefilter("ignore")
            ts = pd.to_datetime(text.strip(), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts


def resolve_period(cell_text: str | None, document_date: str | None) -> tuple[int, int] | None:
    """(year, month) of a row for bucketing.

    The date cell is tried first, then the document-level date. None when both
    fail; such rows stay out of the monthly buckets but still count in unit
    totals.
    """
    ts = parse_full_date(cell_text)
    if ts is None:
        ts = parse_full_date(document_date)
    if ts is None:
        return None
    return ts.year, ts.month


def leading_float(text: str | None) -> float | None:
    """Longest numeric prefix of the text after leading whitespace ("1200 m" -> 1200.0).

    None when the text does not start with a number.
    """
    if not text:
        return None
    m = _LEADING_FLOAT_RE.match(text.lstrip())
    if not m:
        return None
    try:
        return float(m.group(0))
    except ValueError:
        return None


def parse_length(text: str | None) -> float:
    """Lossy measurement parse: "14,5 m (přibl.)" -> 14.5, failure -> 0.0."""
    if not text:
        return 0.0
    clean = _NON_NUMERIC_RE.sub("", _WHITESPACE_RE.sub("", text))
    clean = clean.replace(",", ".", 1)
    value = leading_float(clean)
    return 0.0 if value is None else value
