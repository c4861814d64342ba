import pytest

from bulk_valuation.core.errors import InputError
from bulk_valuation.schemas import InputRow
from bulk_valuation.services.headers import decode_upload, normalize_header, parse_table


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Address", "address"),
        ("address1", "address"),
        (" STREET ", "address"),
        ("street_address", "address"),
        ("City_Name", "city"),
        ("st", "state"),
        ("State_Code", "state"),
        ("ZIP5", "zip"),
        ("postal_code", "zip"),
        ("zipcode", "zip"),
        ("Parcel", "apn"),
        ("parcel_number", "apn"),
        ("FIPS_CODE", "fips"),
        ("\ufeffStreet", "address"),
    ],
)
def test_header_synonyms_map_to_canonical_fields(raw, expected):
    assert normalize_header(raw) == expected


def test_unknown_header_is_lowercased_and_trimmed():
    assert normalize_header("  Owner Name ") == "owner name"
    assert normalize_header(None) == ""
    assert normalize_header("") == ""


def test_mixed_synonym_header_row_parses_to_address_fields():
    text = 'Street,City,St,Zip\n"1 Main St","Chicago","IL","60601"\n'
    rows = list(parse_table(text))
    assert rows == [InputRow(address="1 Main St", city="Chicago", state="IL", zip="60601")]


def test_cells_are_trimmed_and_unknown_columns_dropped():
    text = "owner, address ,city,state,zip\nJane Doe,  5 Elm Rd ,Austin , TX,78701\n"
    (row,) = parse_table(text)
    assert row.address == "5 Elm Rd"
    assert row.city == "Austin"
    assert row.state == "TX"
    assert row.zip == "78701"
    assert row.apn is None


def test_blank_cell_rows_kept_and_empty_lines_skipped():
    text = "apn,fips\n111,17031\n\n , \n,\n222,17031\n"
    rows = list(parse_table(text))
    assert [r.apn for r in rows] == ["111", "", "", "222"]
    assert rows[1] == InputRow(apn="", fips="")


def test_bom_before_quoted_header():
    raw = b'\xef\xbb\xbf"Street","City","St","Zip"\n"1 Main St","Chicago","IL","60601"\n'
    expected = [InputRow(address="1 Main St", city="Chicago", state="IL", zip="60601")]

    assert list(parse_table(decode_upload(raw))) == expected
    assert list(parse_table(raw.decode("utf-8"))) == expected


def test_short_rows_leave_missing_fields_absent():
    text = "address,city,state,zip\n1 Main St,Chicago\n"
    (row,) = parse_table(text)
    assert row.city == "Chicago"
    assert row.state is None
    assert row.zip is None


def test_rightmost_duplicate_column_wins():
    text = "street,address,city,state\nold,new,Chicago,IL\n"
    (row,) = parse_table(text)
    assert row.address == "new"


def test_quoted_cells_with_commas_and_newlines():
    text = 'address,city,state\n"1 Main St, Apt 2","Chi\ncago",IL\n'
    (row,) = parse_table(text)
    assert row.address == "1 Main St, Apt 2"
    assert row.city == "Chi\ncago"


def test_empty_and_header_only_tables_yield_nothing():
    assert list(parse_table("")) == []
    assert list(parse_table("   \n")) == []
    assert list(parse_table("address,city,state,zip\n")) == []


def test_headers_without_a_selector_set_still_parse(caplog):
    rows = list(parse_table("name,phone\nBob,555\n"))
    assert rows == [InputRow()]
    assert "neither address nor parcel headers" in caplog.text


def test_decode_upload_handles_bom_and_rejects_bad_bytes():
    text = decode_upload("\ufeffaddress,city\n".encode("utf-8"))
    assert text == "address,city\n"

    with pytest.raises(InputError) as exc:
        decode_upload(b"\xff\xfe\x00bad")
    assert exc.value.code == "invalid_encoding"
    assert exc.value.status_code == 400
