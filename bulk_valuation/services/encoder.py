from typing import Any, Iterable, Mapping, Sequence

from ..schemas import ResultRow
from .results import OUTPUT_COLUMNS

_NEEDS_QUOTES = (",", '"', "\n", "\r")

def to_csv_value(value: Any) -> str:
    """Empty for None; quoted with doubled quotes only when required."""
    if value is None:
        return ""
    text = str(value)
    if any(ch in text for ch in _NEEDS_QUOTES):
        return '"' + text.replace('"', '""') + '"'
    return text

def encode_records(headers: Sequence[str], records: Iterable[Mapping[str, Any]]) -> str:
    lines = [",".join(to_csv_value(h) for h in headers)]
    for record in records:
        lines.append(",".join(to_csv_value(record.get(h)) for h in headers))
    return "\n".join(lines)

def encode_rows(rows: Sequence[ResultRow]) -> str:
    """The bulk results CSV: fixed header, then rows in the order given."""
    return encode_records(OUTPUT_COLUMNS, (row.model_dump() for row in rows))
