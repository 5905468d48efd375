from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..config.loader import ColumnVocabulary
from ..models.document import Document
from ..models.materialized_row import MaterializedRow
from .columns import find_date_column

"""Row materialization and cross-document deduplication ("smart merge").

Documents are walked newest first so that, with dedupe on, the surviving copy
of a duplicated row is the one from the most recently uploaded document. Rows
inside a document keep their original order.
"""

__all__ = [
    "materialize",
    "order_documents",
    "row_signature",
]

logger = logging.getLogger(__name__)


def row_signature(unit: str, values: Iterable[str | None]) -> str:
    """Equality key of a row: unit name plus trimmed, lower-cased cells."""
    cells = [(v or "").strip().lower() for v in values]
    return "|".join([unit, *cells])


def order_documents(documents: Iterable[Document]) -> list[Document]:
    """Most recently uploaded first; ties keep their input order."""
    return sorted(documents, key=lambda d: d.uploaded_at, reverse=True)


def materialize(
    documents: Sequence[Document],
    dedupe: bool,
    vocabulary: ColumnVocabulary | None = None,
) -> list[MaterializedRow]:
    """Flatten every document's rows into one ordered list.

    Parameters
    ----------
    documents: source documents in any order
    dedupe: drop rows whose signature was already emitted
    vocabulary: header words used to find the date column

    Returns
    -------
    list[MaterializedRow]: newest document first, then original row order
    """
    out: list[MaterializedRow] = []
    seen: set[str] = set()
    skipped = 0

    for doc in order_documents(documents):
        date_idx = find_date_column(doc.headers, vocabulary)
        for idx, row in enumerate(doc.rows):
            if dedupe:
                signature = row_signature(doc.unit, row.values)
                if signature in seen:
                    skipped += 1
                    continue
                seen.add(signature)
            filter_date = ""
            if 0 <= date_idx < len(row.values):
                filter_date = row.values[date_idx] or ""
            out.append(
                MaterializedRow(
                    row_id=f"{doc.id}-{idx}",
                    document=doc,
                    row_index=idx,
                    values=row.values,
                    filter_date=filter_date,
                    status=row.status,
                    requires_fix=row.requires_fix,
                )
            )

    logger.debug(
        "materialized documents=%d rows=%d dedupe=%s duplicates_dropped=%d",
        len(documents),
        len(out),
        dedupe,
        skipped,
    )
    return out
