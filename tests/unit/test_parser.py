from core.parser import parse_csv, split_rows
from core.records import NO_ROOM, RECORD_COLUMNS, records_to_frame

HEADER = "Ruangan,Item,Komplain,Tgl,Status,Perbaikan,Kendala,Hambatan,Catatan\n"


def test_header_only_yields_no_records():
    assert parse_csv(HEADER) == []
    assert parse_csv(HEADER.rstrip("\n")) == []
    assert parse_csv("") == []


def test_quoted_field_keeps_embedded_comma():
    records = parse_csv(HEADER + 'A,"B, and C",D,,,,,,,\n')
    assert len(records) == 1
    assert records[0].item_name == "B, and C"
    assert records[0].complaint_type == "D"


def test_escaped_quotes_become_literal_quote():
    records = parse_csv(HEADER + 'Room,"She said ""hi""",x\n')
    assert records[0].item_name == 'She said "hi"'


def test_quoted_field_may_span_lines():
    records = parse_csv(HEADER + 'Room,Bed,"line one\nline two",d\n')
    assert records[0].complaint_type == "line one\nline two"
    assert records[0].complaint_date == "d"


def test_rows_with_blank_item_are_dropped():
    text = HEADER + "ICU,   ,Rusak,01/01,Proses,2024,x,y,z\nICU\nICU,Bed\n"
    records = parse_csv(text)
    assert [r.item_name for r in records] == ["Bed"]


def test_fields_are_trimmed_and_missing_fields_default():
    records = parse_csv(HEADER + "  ,  Bed  , Rusak \n")
    r = records[0]
    assert r.room_name == NO_ROOM
    assert r.item_name == "Bed"
    assert r.complaint_type == "Rusak"
    assert r.repair_date == ""
    assert r.technician_notes == ""


def test_ids_follow_sheet_rows_not_output_position(sample_csv):
    records = parse_csv(sample_csv)
    assert [r.id for r in records] == ["row-2", "row-3", "row-5", "row-6"]


def test_sample_sheet_maps_columns(sample_csv):
    records = parse_csv(sample_csv)
    chair = records[2]
    assert chair.room_name == "IGD"
    assert chair.complaint_type == "Roda lepas, patah"
    assert chair.repair_date == "-"
    assert chair.obstacles_header == "Sparepart"
    assert chair.obstacles_main == "Tunggu sparepart"
    assert records[3].room_name == NO_ROOM


def test_first_row_is_always_discarded():
    records = parse_csv("ICU,Bed,Rusak\nIGD,Chair,Patah\n")
    assert [r.item_name for r in records] == ["Chair"]


def test_line_endings_and_blank_lines():
    assert split_rows("a,b\r\nc,d\re,f\n\n\r\ng,h") == [["a", "b"], ["c", "d"], ["e", "f"], ["g", "h"]]


def test_extra_columns_are_ignored():
    records = parse_csv(HEADER + "r,i,c,d,s,f,g,h,notes,extra,more\n")
    assert records[0].technician_notes == "notes"


def test_unbalanced_quote_is_flushed_best_effort():
    rows = split_rows('h1,h2\nRoom,"Bed, still open\nnext')
    assert rows == [["h1", "h2"], ["Room", "Bed, still open\nnext"]]
    records = parse_csv('h1,h2\nRoom,"Bed, still open\nnext')
    assert records[0].item_name == "Bed, still open\nnext"


def test_export_and_reparse_is_stable(sample_csv):
    records = parse_csv(sample_csv)
    exported = records_to_frame(records)[RECORD_COLUMNS].to_csv(index=False)
    reparsed = parse_csv(exported)

    def fields(rs):
        return [tuple(getattr(r, c) for c in RECORD_COLUMNS) for r in rs]

    assert fields(reparsed) == fields(records)


def test_export_and_reparse_keeps_quotes_and_newlines():
    text = (
        HEADER
        + 'ICU,"Monitor ""Philips""","Layar mati,\nbunyi ""bip""",01/02/2024,Proses,,,,"Cek kabel\r\nlagi"\n'
        + 'IGD,Kursi,"""Roda""",02/02/2024,,,,,\n'
    )
    records = parse_csv(text)
    assert records[0].item_name == 'Monitor "Philips"'
    assert records[0].complaint_type == 'Layar mati,\nbunyi "bip"'
    assert records[0].technician_notes == "Cek kabel\r\nlagi"
    assert records[1].complaint_type == '"Roda"'

    exported = records_to_frame(records)[RECORD_COLUMNS].to_csv(index=False)
    reparsed = parse_csv(exported)
    assert [tuple(getattr(r, c) for c in RECORD_COLUMNS) for r in reparsed] == [
        tuple(getattr(r, c) for c in RECORD_COLUMNS) for r in records
    ]
