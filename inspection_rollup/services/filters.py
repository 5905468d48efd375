from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..models.document import Document
from ..models.filter_state import ALL, FilterState
from ..models.materialized_row import MaterializedRow
from .parsers import extract_month, extract_year

"""Row filter engine.

All predicates must pass (plain conjunction); the input order is preserved. The
year and month selectors read the raw filter-date string of each row, not the
full date parse used by the statistics.
"""

__all__ = [
    "filter_rows",
    "matches",
    "available_units",
    "available_categories",
    "available_years",
]


def _matches_text(row: MaterializedRow, needle: str) -> bool:
    if needle in row.unit.lower():
        return True
    if needle in row.document.title.lower():
        return True
    return any(v and needle in v.lower() for v in row.values)


def matches(row: MaterializedRow, state: FilterState) -> bool:
    if state.unit != ALL and row.unit != state.unit:
        return False
    if state.category != ALL and row.document.category != state.category:
        return False
    if state.year != ALL and extract_year(row.filter_date) != state.year:
        return False
    if state.month != ALL:
        month = extract_month(row.filter_date)
        if month is None or str(month) != state.month:
            return False
    if state.text:
        return _matches_text(row, state.text.lower())
    return True


def filter_rows(rows: Iterable[MaterializedRow], state: FilterState) -> list[MaterializedRow]:
    return [r for r in rows if matches(r, state)]


def available_units(documents: Iterable[Document]) -> list[str]:
    """Distinct non-empty unit names for the unit selector, sorted."""
    return sorted({d.unit for d in documents if d.unit})


def available_categories(documents: Iterable[Document]) -> list[str]:
    """Distinct non-empty document categories for the category selector, sorted."""
    return sorted({d.category for d in documents if d.category})


def available_years(rows: Sequence[MaterializedRow]) -> list[str]:
    """Years found in the rows' filter dates, newest first."""
    years = {extract_year(r.filter_date) for r in rows}
    return sorted((y for y in years if y), reverse=True)
