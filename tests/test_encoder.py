import csv
import io

from bulk_valuation.schemas import ResultRow
from bulk_valuation.services.encoder import encode_records, encode_rows, to_csv_value
from bulk_valuation.services.results import OUTPUT_COLUMNS


def test_plain_values_are_bare_and_none_is_empty():
    assert to_csv_value("Chicago") == "Chicago"
    assert to_csv_value(450000) == "450000"
    assert to_csv_value(None) == ""
    assert to_csv_value("") == ""


def test_special_characters_force_quoting():
    assert to_csv_value("1 Main St, Apt 2") == '"1 Main St, Apt 2"'
    assert to_csv_value('the "big" one') == '"the ""big"" one"'
    assert to_csv_value("line1\nline2") == '"line1\nline2"'
    assert to_csv_value("line1\r\nline2") == '"line1\r\nline2"'


def test_escaped_values_survive_a_standard_csv_parser():
    tricky = ["a,b", 'say "hi"', "multi\nline", "cr\rhere", ',"\n']
    text = encode_records(["v"], [{"v": value} for value in tricky])
    parsed = list(csv.reader(io.StringIO(text, newline="")))
    assert [row[0] for row in parsed[1:]] == tricky


def test_header_then_rows_in_order_without_trailing_newline():
    rows = [
        ResultRow(input_address="1 Main St", match_status="matched", estimated_value="450000"),
        ResultRow(input_apn="9", match_status="no_match"),
    ]
    text = encode_rows(rows)
    lines = text.split("\n")

    assert lines[0] == ",".join(OUTPUT_COLUMNS)
    assert len(lines) == 3
    assert not text.endswith("\n")
    first = next(csv.DictReader(io.StringIO(text)))
    assert first["input_address"] == "1 Main St"
    assert first["estimated_value"] == "450000"
    assert first["pdf_url"] == ""


def test_encoding_is_deterministic():
    rows = [ResultRow(input_city='Chi, "IL"', match_status="error:timeout") for _ in range(5)]
    assert encode_rows(rows).encode() == encode_rows(list(rows)).encode()


def test_header_only_when_no_rows():
    assert encode_rows([]) == ",".join(OUTPUT_COLUMNS)
