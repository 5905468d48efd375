from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from ..models.materialized_row import MaterializedRow

"""Table export of materialized rows with pandas.

Documents carry different header lists, so each row is keyed by its own header
names and pandas aligns the union; cells of other documents stay empty.
Columns beyond a document's header list are named ``column_{n}``.
"""

__all__ = [
    "META_COLUMNS",
    "ExportError",
    "rows_to_frame",
    "export_rows",
]

META_COLUMNS = ["row_id", "document_id", "unit", "title", "filter_date", "status", "remediation"]


class ExportError(Exception):
    pass


def _header_name(headers: Sequence[str], idx: int) -> str:
    if idx < len(headers) and headers[idx]:
        return headers[idx]
    return f"column_{idx}"


def rows_to_frame(rows: Sequence[MaterializedRow]) -> pd.DataFrame:
    records: list[dict[str, object]] = []
    value_columns: list[str] = []
    for r in rows:
        record: dict[str, object] = {
            "row_id": r.row_id,
            "document_id": r.document_id,
            "unit": r.unit,
            "title": r.document.title,
            "filter_date": r.filter_date,
            "status": r.status.value,
            "remediation": r.requires_fix,
        }
        for idx, value in enumerate(r.values):
            name = _header_name(r.document.headers, idx)
            if name in META_COLUMNS:
                name = f"{name}_{idx}"
            if name not in value_columns:
                value_columns.append(name)
            record[name] = value
        records.append(record)
    return pd.DataFrame.from_records(records, columns=META_COLUMNS + value_columns)


def export_rows(rows: Sequence[MaterializedRow], path: Path) -> Path:
    """Write rows to ``.csv`` or ``.xlsx`` depending on the suffix."""
    df = rows_to_frame(rows)
    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            df.to_csv(path, index=False, encoding="utf-8")
        elif suffix == ".xlsx":
            df.to_excel(path, index=False, sheet_name="rows")
        else:
            raise ExportError(f"unsupported export format: {path.suffix or '<none>'}")
    except OSError as e:
        raise ExportError(f"cannot write {path}: {e}") from e
    return path
