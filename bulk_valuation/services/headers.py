"""
Upload parsing: header synonyms → canonical fields, CSV text → InputRow.
"""
import csv
import io
import logging
from typing import Iterator

from ..core.errors import InputError
from ..core.utils import clean_cell
from ..schemas import InputRow

logger = logging.getLogger(__name__)

FIELDS = ("address", "city", "state", "zip", "apn", "fips")
ADDRESS_HEADERS = frozenset({"address", "city", "state", "zip"})
PARCEL_HEADERS = frozenset({"apn", "fips"})

HEADER_SYNONYMS = {
    "address": "address",
    "address1": "address",
    "street": "address",
    "street_address": "address",
    "city": "city",
    "city_name": "city",
    "state": "state",
    "state_code": "state",
    "st": "state",
    "zip": "zip",
    "zip_code": "zip",
    "zipcode": "zip",
    "postal_code": "zip",
    "zip5": "zip",
    "apn": "apn",
    "parcel": "apn",
    "parcel_number": "apn",
    "fips": "fips",
    "fips_code": "fips",
}

def normalize_header(header: str | None) -> str:
    """Canonical field name for a raw header, else its trimmed lower-case form."""
    if not header:
        return ""
    normalized = header.lstrip("\ufeff").strip().lower()
    return HEADER_SYNONYMS.get(normalized, normalized)

def decode_upload(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InputError("invalid_encoding", "Upload must be UTF-8 encoded CSV.") from exc

def parse_table(text: str) -> Iterator[InputRow]:
    """
    Yield one InputRow per data row, in file order. Only empty lines are
    skipped; a row of blank cells still yields an (empty) InputRow.

    Columns whose header doesn't map to a known field are dropped. If two
    columns map to the same field the rightmost one wins.
    """
    # BOM must go before csv sees it, or a quoted first header keeps its quotes
    text = text.lstrip("\ufeff")
    if not text.strip():
        return
    reader = csv.reader(io.StringIO(text, newline=""))
    header = next(reader, None)
    if header is None:
        return
    columns = [normalize_header(h) for h in header]

    present = set(columns)
    if not (ADDRESS_HEADERS <= present or PARCEL_HEADERS <= present):
        logger.warning(
            "bulk upload has neither address nor parcel headers; columns=%s",
            [c for c in columns if c],
        )

    for cells in reader:
        if not cells:
            continue
        values = {}
        for name, cell in zip(columns, cells):
            if name in FIELDS:
                values[name] = clean_cell(cell)
        yield InputRow(**values)
