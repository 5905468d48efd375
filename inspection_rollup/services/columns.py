from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..config.loader import ColumnVocabulary

"""Column role inference from header text.

The extracted tables carry no schema, so the date column and the measured
length column are recognised purely by header words. Matching is
case-insensitive and the lowest matching index wins. NOT_FOUND (-1) means the
document has no date/length semantics; it is not an error.
"""

__all__ = [
    "NOT_FOUND",
    "ColumnRoles",
    "classify_columns",
    "find_date_column",
    "find_length_column",
]

NOT_FOUND = -1

_DEFAULT_VOCABULARY = ColumnVocabulary()


@dataclass(frozen=True)
class ColumnRoles:
    date_index: int = NOT_FOUND
    length_index: int = NOT_FOUND


def _lower_headers(headers: Sequence[str | None] | None) -> list[str]:
    if not headers:
        return []
    return [(h or "").lower() for h in headers]


def find_date_column(
    headers: Sequence[str | None] | None,
    vocabulary: ColumnVocabulary | None = None,
) -> int:
    """Index of the first header containing a date keyword, else NOT_FOUND."""
    vocab = vocabulary or _DEFAULT_VOCABULARY
    for idx, header in enumerate(_lower_headers(headers)):
        if any(word in header for word in vocab.date_keywords):
            return idx
    return NOT_FOUND


def find_length_column(
    headers: Sequence[str | None] | None,
    vocabulary: ColumnVocabulary | None = None,
) -> int:
    """Index of the measured-length column, else NOT_FOUND.

    A header exactly equal to a priority token ("zkontrolováno") wins over any
    other match, wherever it stands. Otherwise the first header containing a
    length keyword or exactly equal to a short token ("m", "bm") is used.
    """
    vocab = vocabulary or _DEFAULT_VOCABULARY
    lowered = _lower_headers(headers)
    for idx, header in enumerate(lowered):
        if header in vocab.length_priority_tokens:
            return idx
    for idx, header in enumerate(lowered):
        if header in vocab.length_exact_tokens:
            return idx
        if any(word in header for word in vocab.length_keywords):
            return idx
    return NOT_FOUND


def classify_columns(
    headers: Sequence[str | None] | None,
    vocabulary: ColumnVocabulary | None = None,
) -> ColumnRoles:
    return ColumnRoles(
        date_index=find_date_column(headers, vocabulary),
        length_index=find_length_column(headers, vocabulary),
    )
