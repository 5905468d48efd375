from __future__ import annotations

from dataclasses import dataclass

from .document import Document, RowStatus

"""MaterializedRow model.

A read-only view of one table row with its resolved document context. It is the
atomic unit of filtering and aggregation and is rebuilt on every query; it is
never persisted.
"""

__all__ = [
    "MaterializedRow",
]


@dataclass(frozen=True)
class MaterializedRow:
    """Row values plus the context needed to filter and aggregate them."""
    row_id: str  # "{document_id}-{row_index}", unique across documents
    document: Document  # source document reference
    row_index: int  # position inside document.rows
    values: tuple[str, ...]
    filter_date: str  # raw text of the detected date cell, or ""
    status: RowStatus = RowStatus.NEW
    requires_fix: bool = False

    @property
    def unit(self) -> str:
        return self.document.unit

    @property
    def document_id(self) -> str:
        return self.document.id
