# Shared pytest fixtures
from __future__ import annotations
import json
import tempfile
from datetime import UTC, datetime
from pathlib import Path

import pytest

from inspection_rollup.models.document import UNSPECIFIED_UNIT, Document, RowStatus, TableRow


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """unspecified_unit: Neurčeno
date_keywords: [datum, dne, kdy, termín, date]
length_keywords: [délka, delka, metr, length]
length_exact_tokens: [m, bm]
length_priority_tokens: [zkontrolováno, zkontrolovano]
near_target_ratio: 0.8
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "rollup.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def _row(raw) -> TableRow:
    if isinstance(raw, TableRow):
        return raw
    return TableRow(values=tuple(raw))


@pytest.fixture()
def make_document():
    """Factory for Documents; rows may be plain lists of cell strings."""
    def _make(
        doc_id: str,
        rows=(),
        *,
        unit: str = "Most",
        headers=("Datum", "Ulice", "Délka"),
        uploaded: datetime | str = "2024-01-01T00:00:00Z",
        title: str = "",
        date: str = "",
    ) -> Document:
        if isinstance(uploaded, str):
            uploaded = datetime.fromisoformat(uploaded.replace("Z", "+00:00"))
        return Document(
            id=doc_id,
            uploaded_at=uploaded,
            unit=unit,
            title=title or f"Protokol {doc_id}",
            date=date,
            headers=tuple(headers),
            rows=tuple(_row(r) for r in rows),
        )
    return _make


@pytest.fixture()
def most_documents(make_document) -> list[Document]:
    """Older doc A with one row, newer doc B repeating it plus one more row."""
    headers = ("Datum", "Délka")
    doc_a = make_document(
        "A",
        [["2023-05-01", "14,5"]],
        headers=headers,
        uploaded="2023-06-01T08:00:00Z",
    )
    doc_b = make_document(
        "B",
        [["2023-05-01", "14,5"], ["2023-06-01", "5"]],
        headers=headers,
        uploaded="2023-07-01T08:00:00Z",
    )
    return [doc_a, doc_b]


@pytest.fixture()
def mixed_documents(make_document) -> list[Document]:
    """Two units plus an unspecified-unit document, with statuses and flags set."""
    teplice = make_document(
        "T1",
        [
            TableRow(("2023-03-10", "Dlouhá", "100"), status=RowStatus.UPLOADED),
            TableRow(("2023-03-20", "Krátká", "50"), requires_fix=True),
            TableRow(("2023-04-02", "Nová", "25,5 m"), status=RowStatus.NEEDS_FIX),
        ],
        unit="Teplice",
        uploaded="2023-05-01T00:00:00Z",
        title="Kamerová prohlídka Teplice",
    )
    most = make_document(
        "M1",
        [
            TableRow(("2023-03-15", "Hlavní", "200"), status=RowStatus.UPLOADED, requires_fix=True),
            TableRow(("", "Bez data", "40")),
        ],
        unit="Most",
        uploaded="2023-05-02T00:00:00Z",
        date="2023-08-01",
    )
    unknown = make_document(
        "U1",
        [["2023-03-01", "Neznámá", "10"]],
        unit=UNSPECIFIED_UNIT,
        uploaded="2023-05-03T00:00:00Z",
    )
    return [teplice, most, unknown]


@pytest.fixture()
def store_file(temp_workdir: Path, most_documents) -> Path:
    path = temp_workdir / "data" / "store.json"
    payload = {
        "documents": [d.to_dict() for d in most_documents],
        "targets": {"2023": {"Most": 12000}},
    }
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path
