from ..data.base import ResolutionOutcome, Matched
from ..schemas import InputRow, ResultRow, ValuationFields

OUTPUT_COLUMNS: tuple[str, ...] = tuple(ResultRow.model_fields)
VALUATION_COLUMNS: tuple[str, ...] = tuple(ValuationFields.model_fields)

def _text(value) -> str:
    """JSON-style stringification: true/false, 450000.0 → 450000."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

def assemble_row(row: InputRow, outcome: ResolutionOutcome) -> ResultRow:
    """
    Echo the input, stamp the match status, and copy whatever valuation
    fields came back. Only a match contributes valuation values.
    """
    fields = {
        "input_address": _text(row.address),
        "input_city": _text(row.city),
        "input_state": _text(row.state),
        "input_zip": _text(row.zip),
        "input_apn": _text(row.apn),
        "input_fips": _text(row.fips),
        "match_status": outcome.match_status,
    }
    if isinstance(outcome, Matched):
        if outcome.data is not None:
            for name in VALUATION_COLUMNS:
                fields[name] = _text(getattr(outcome.data, name))
        fields["pdf_url"] = _text(outcome.pdf_url)
    return ResultRow(**fields)
