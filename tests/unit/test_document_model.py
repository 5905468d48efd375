from __future__ import annotations

from datetime import UTC, datetime

import pytest

from inspection_rollup.models.document import UNSPECIFIED_UNIT, Document, RowStatus, TableRow


def test_document_from_dict_full_shape():
    doc = Document.from_dict(
        {
            "id": "doc-1",
            "fileName": "protokol.pdf",
            "uploadTimestamp": "2023-07-01T08:30:00Z",
            "unit": "Most",
            "title": "Kamerová prohlídka",
            "date": "2023-06-30",
            "category": "Protokol",
            "summary": "Prohlídka stok",
            "tags": ["kanalizace"],
            "headers": ["Datum", "Délka"],
            "rows": [
                {"values": ["2023-06-01", "14,5"]},
                {"values": ["2023-06-02", None], "status": "UPLOADED", "remediationFlag": True},
            ],
        }
    )
    assert doc.id == "doc-1"
    assert doc.uploaded_at == datetime(2023, 7, 1, 8, 30, tzinfo=UTC)
    assert doc.headers == ("Datum", "Délka")
    assert doc.rows[0] == TableRow(("2023-06-01", "14,5"))
    assert doc.rows[1].values == ("2023-06-02", "")
    assert doc.rows[1].status is RowStatus.UPLOADED
    assert doc.rows[1].requires_fix is True
    assert doc.tags == ("kanalizace",)


def test_document_from_dict_missing_fields_degrade_to_defaults():
    doc = Document.from_dict({"id": "x"})
    assert doc.unit == UNSPECIFIED_UNIT
    assert doc.headers == ()
    assert doc.rows == ()
    assert doc.uploaded_at == datetime(1970, 1, 1, tzinfo=UTC)


def test_bad_timestamp_sorts_as_epoch():
    doc = Document.from_dict({"id": "x", "uploadTimestamp": "včera"})
    assert doc.uploaded_at.year == 1970


def test_naive_timestamp_is_treated_as_utc():
    doc = Document.from_dict({"id": "x", "uploadTimestamp": "2023-07-01T08:30:00"})
    assert doc.uploaded_at.tzinfo is not None


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, RowStatus.NEW),
        ("UPLOADED", RowStatus.UPLOADED),
        ("needs_fix", RowStatus.NEEDS_FIX),
        ("REVISION", RowStatus.NEEDS_FIX),
        ("UNUSABLE", RowStatus.UNUSABLE),
        ("whatever", RowStatus.NEW),
        (3, RowStatus.NEW),
    ],
)
def test_row_status_parse(raw, expected):
    assert RowStatus.parse(raw) is expected


def test_legacy_remediation_key_is_read():
    row = TableRow.from_dict({"values": ["a"], "requiresGisFix": True})
    assert row.requires_fix is True


def test_to_dict_omits_new_status_and_false_flag():
    assert TableRow(("a",)).to_dict() == {"values": ["a"]}
    assert TableRow(("a",), RowStatus.NEEDS_FIX, True).to_dict() == {
        "values": ["a"],
        "status": "NEEDS_FIX",
        "remediationFlag": True,
    }


def test_document_dict_round_trip(make_document):
    doc = make_document("d", [TableRow(("2023-05-01", "x", "1"), RowStatus.UPLOADED)], date="2023-05-01")
    assert Document.from_dict(doc.to_dict()) == doc
    assert doc.to_dict()["uploadTimestamp"] == "2024-01-01T00:00:00Z"


def test_document_is_immutable(make_document):
    doc = make_document("d")
    with pytest.raises(AttributeError):
        doc.unit = "Teplice"
