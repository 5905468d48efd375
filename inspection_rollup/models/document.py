from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

"""Document and TableRow domain models.

A Document is one scanned inspection report after extraction: a header list,
rows of string cells and some document-level metadata. Documents are owned by the
external store; the engine only reads them and produces replaced copies when a
row annotation changes.
"""

__all__ = [
    "RowStatus",
    "TableRow",
    "Document",
    "UNSPECIFIED_UNIT",
]

# 抽出側が中心を特定できなかった場合の値
UNSPECIFIED_UNIT = "Neurčeno"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class RowStatus(Enum):
    """Workflow status of a single table row.

    States are mutually exclusive and any state may move to any other one.
    NEW is the default and is never written back to storage.
    """
    NEW = "NEW"
    UPLOADED = "UPLOADED"
    NEEDS_FIX = "NEEDS_FIX"
    UNUSABLE = "UNUSABLE"

    @classmethod
    def parse(cls, raw: Any) -> RowStatus:
        """Read a stored status value; unknown or missing values fall back to NEW."""
        if isinstance(raw, RowStatus):
            return raw
        if not isinstance(raw, str):
            return cls.NEW
        key = raw.strip().upper()
        if key == "REVISION":  # 旧バージョンの保存値
            return cls.NEEDS_FIX
        try:
            return cls(key)
        except ValueError:
            return cls.NEW


@dataclass(frozen=True)
class TableRow:
    """One extracted table row, positionally aligned with the document headers."""
    values: tuple[str, ...]
    status: RowStatus = RowStatus.NEW
    requires_fix: bool = False  # remediation flag, independent of status

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> TableRow:
        values = raw.get("values") or []
        fix = raw.get("remediationFlag", raw.get("requiresGisFix", False))
        return TableRow(
            values=tuple("" if v is None else str(v) for v in values),
            status=RowStatus.parse(raw.get("status")),
            requires_fix=bool(fix),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"values": list(self.values)}
        if self.status is not RowStatus.NEW:
            out["status"] = self.status.value
        if self.requires_fix:
            out["remediationFlag"] = True
        return out


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=UTC)
    if not isinstance(raw, str) or not raw.strip():
        return _EPOCH
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(text)
    except ValueError:
        return _EPOCH
    return ts if ts.tzinfo else ts.replace(tzinfo=UTC)


@dataclass(frozen=True)
class Document:
    """A single extracted report together with its table."""
    id: str
    uploaded_at: datetime  # upload time (UTC); newest document wins on dedupe
    unit: str = UNSPECIFIED_UNIT  # organisational unit ("center")
    title: str = ""
    date: str = ""  # document-level declared date, raw text
    headers: tuple[str, ...] = ()
    rows: tuple[TableRow, ...] = ()
    file_name: str = ""
    category: str = ""
    summary: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> Document:
        """Build a Document from its stored mapping.

        Missing keys degrade to empty defaults. An unreadable upload timestamp
        becomes the epoch so the document sorts last.
        """
        headers = raw.get("headers") or []
        rows = raw.get("rows") or []
        return Document(
            id=str(raw.get("id", "")),
            uploaded_at=_parse_timestamp(raw.get("uploadTimestamp")),
            unit=str(raw.get("unit") or UNSPECIFIED_UNIT),
            title=str(raw.get("title") or ""),
            date=str(raw.get("date") or ""),
            headers=tuple("" if h is None else str(h) for h in headers),
            rows=tuple(TableRow.from_dict(r) for r in rows if isinstance(r, dict)),
            file_name=str(raw.get("fileName") or ""),
            category=str(raw.get("category") or ""),
            summary=str(raw.get("summary") or ""),
            tags=tuple(str(t) for t in raw.get("tags") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "uploadTimestamp": self.uploaded_at.isoformat().replace("+00:00", "Z"),
            "unit": self.unit,
            "title": self.title,
            "date": self.date,
            "category": self.category,
            "summary": self.summary,
            "tags": list(self.tags),
            "headers": list(self.headers),
            "rows": [r.to_dict() for r in self.rows],
        }
