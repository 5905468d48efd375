from __future__ import annotations

from inspection_rollup.models.document import UNSPECIFIED_UNIT, RowStatus, TableRow
from inspection_rollup.services.materializer import materialize, order_documents, row_signature


def test_row_signature_trims_and_lowercases_cells_not_unit():
    sig = row_signature("Most", ["  2023-05-01 ", "Hlavní ULICE", None])
    assert sig == "Most|2023-05-01|hlavní ulice|"
    assert row_signature("MOST", ["a"]) != row_signature("Most", ["a"])


def test_order_documents_newest_first_stable_on_ties(make_document):
    a = make_document("a", uploaded="2023-01-01T00:00:00Z")
    b = make_document("b", uploaded="2023-03-01T00:00:00Z")
    c = make_document("c", uploaded="2023-01-01T00:00:00Z")
    assert [d.id for d in order_documents([a, b, c])] == ["b", "a", "c"]


def test_no_dedupe_keeps_every_row_in_order(most_documents):
    rows = materialize(most_documents, dedupe=False)
    assert len(rows) == sum(len(d.rows) for d in most_documents)
    assert [r.row_id for r in rows] == ["B-0", "B-1", "A-0"]


def test_dedupe_keeps_newest_copy(most_documents):
    rows = materialize(most_documents, dedupe=True)
    assert [r.row_id for r in rows] == ["B-0", "B-1"]
    assert all(r.document_id == "B" for r in rows)


def test_dedupe_is_case_and_whitespace_insensitive(make_document):
    old = make_document("old", [["2023-05-01", "Ulice", "10"]], uploaded="2023-01-01T00:00:00Z")
    new = make_document("new", [[" 2023-05-01", "ULICE ", "10"]], uploaded="2023-02-01T00:00:00Z")
    rows = materialize([old, new], dedupe=True)
    assert [r.row_id for r in rows] == ["new-0"]


def test_dedupe_within_single_document(make_document):
    doc = make_document("d", [["2023-05-01", "x", "1"], ["2023-05-01", "x", "1"]])
    assert len(materialize([doc], dedupe=True)) == 1
    assert len(materialize([doc], dedupe=False)) == 2


def test_same_values_different_units_are_not_duplicates(make_document):
    most = make_document("m", [["2023-05-01", "x", "1"]], unit="Most")
    teplice = make_document("t", [["2023-05-01", "x", "1"]], unit="Teplice")
    assert len(materialize([most, teplice], dedupe=True)) == 2


def test_unspecified_unit_rows_are_materialized_and_dedupe_among_themselves(make_document):
    u1 = make_document("u1", [["2023-05-01", "x", "1"]], unit=UNSPECIFIED_UNIT, uploaded="2023-01-01T00:00:00Z")
    u2 = make_document("u2", [["2023-05-01", "x", "1"]], unit=UNSPECIFIED_UNIT, uploaded="2023-02-01T00:00:00Z")
    most = make_document("m", [["2023-05-01", "x", "1"]], unit="Most")
    rows = materialize([u1, u2, most], dedupe=True)
    assert sorted(r.row_id for r in rows) == ["m-0", "u2-0"]


def test_filter_date_taken_from_detected_date_column(make_document):
    doc = make_document("d", [["Hlavní", "2023-05-01", "10"]], headers=("Ulice", "Datum", "Délka"))
    (row,) = materialize([doc], dedupe=False)
    assert row.filter_date == "2023-05-01"


def test_filter_date_empty_without_date_column_or_short_row(make_document):
    no_date = make_document("n", [["Hlavní", "10"]], headers=("Ulice", "Délka"))
    short = make_document("s", [["Hlavní"]], headers=("Ulice", "Datum"))
    rows = materialize([no_date, short], dedupe=False)
    assert [r.filter_date for r in rows] == ["", ""]


def test_status_and_flag_carried_over(make_document):
    doc = make_document(
        "d",
        [TableRow(("2023-05-01", "x", "1"), status=RowStatus.UNUSABLE, requires_fix=True)],
    )
    (row,) = materialize([doc], dedupe=False)
    assert row.status is RowStatus.UNUSABLE
    assert row.requires_fix is True
    assert row.row_index == 0
    assert row.document is doc


def test_empty_documents_contribute_nothing(make_document):
    assert materialize([make_document("e", [])], dedupe=True) == []
    assert materialize([], dedupe=True) == []


def test_row_ids_unique_across_documents(mixed_documents):
    rows = materialize(mixed_documents, dedupe=False)
    ids = [r.row_id for r in rows]
    assert len(ids) == len(set(ids))
