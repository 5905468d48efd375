from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from ..models.document import Document, RowStatus, TableRow

"""Row status commands.

Every command is a pure function from (documents, command) to a new document
list. Nothing is mutated in place; the external store applies and persists the
result. Rows are addressed by (document id, row position).

Also hosts the document-level commands (add / delete), since they share the
same copy-on-write contract.
"""

__all__ = [
    "RowRef",
    "set_status",
    "reset_status",
    "bulk_set_status",
    "missing_refs",
    "toggle_fix",
    "add_document",
    "delete_document",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowRef:
    document_id: str
    row_index: int

    @staticmethod
    def parse(text: str) -> RowRef:
        """Parse ``DOC:IDX`` (the document id may itself contain colons)."""
        doc_id, sep, idx = text.rpartition(":")
        if not sep or not doc_id:
            raise ValueError(f"row reference must look like DOC:IDX, got {text!r}")
        return RowRef(doc_id, int(idx))

    def __str__(self) -> str:
        return f"{self.document_id}:{self.row_index}"


RowRefLike = RowRef | tuple[str, int]


def _as_ref(item: RowRefLike) -> RowRef:
    if isinstance(item, RowRef):
        return item
    doc_id, idx = item
    return RowRef(str(doc_id), int(idx))


def _exists(doc: Document, row_index: int) -> bool:
    return 0 <= row_index < len(doc.rows)


def _update_rows(
    documents: Sequence[Document],
    targets: dict[str, set[int]],
    change: dict[str, object],
) -> list[Document]:
    result: list[Document] = []
    for doc in documents:
        indexes = targets.get(doc.id)
        if not indexes:
            result.append(doc)
            continue
        rows = list(doc.rows)
        for idx in indexes:
            if _exists(doc, idx):
                rows[idx] = replace(rows[idx], **change)
        result.append(replace(doc, rows=tuple(rows)))
    return result


def set_status(
    documents: Sequence[Document], document_id: str, row_index: int, status: RowStatus
) -> list[Document]:
    """Replace the status of exactly one row; unknown rows leave the list as is."""
    return _update_rows(documents, {document_id: {row_index}}, {"status": status})


def reset_status(documents: Sequence[Document], document_id: str, row_index: int) -> list[Document]:
    return set_status(documents, document_id, row_index, RowStatus.NEW)


def missing_refs(documents: Sequence[Document], items: Iterable[RowRefLike]) -> list[RowRef]:
    """References a bulk command would skip (no such document or row)."""
    by_id = {d.id: d for d in documents}
    missing: list[RowRef] = []
    for item in items:
        ref = _as_ref(item)
        doc = by_id.get(ref.document_id)
        if doc is None or not _exists(doc, ref.row_index):
            missing.append(ref)
    return missing


def bulk_set_status(
    documents: Sequence[Document], items: Iterable[RowRefLike], status: RowStatus
) -> list[Document]:
    """Apply one status to every listed row in a single update.

    Items pointing at rows that no longer exist are skipped; the rest of the
    batch is still applied.
    """
    refs = [_as_ref(i) for i in items]
    for ref in missing_refs(documents, refs):
        logger.debug("bulk status: skipping missing row %s", ref)
    targets: dict[str, set[int]] = {}
    for ref in refs:
        targets.setdefault(ref.document_id, set()).add(ref.row_index)
    return _update_rows(documents, targets, {"status": status})


def toggle_fix(documents: Sequence[Document], document_id: str, row_index: int) -> list[Document]:
    """Flip the remediation flag of one row; status is untouched."""
    result: list[Document] = []
    for doc in documents:
        if doc.id != document_id or not _exists(doc, row_index):
            result.append(doc)
            continue
        rows = list(doc.rows)
        row: TableRow = rows[row_index]
        rows[row_index] = replace(row, requires_fix=not row.requires_fix)
        result.append(replace(doc, rows=tuple(rows)))
    return result


def add_document(documents: Sequence[Document], document: Document) -> list[Document]:
    """Prepend a freshly extracted document."""
    return [document, *documents]


def delete_document(documents: Sequence[Document], document_id: str) -> list[Document]:
    """Drop a document together with all its rows."""
    return [d for d in documents if d.id != document_id]
