from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, StrictBool

# Upstream values are echoed as-is; StrictBool first so JSON true stays a bool
Scalar = Optional[Union[StrictBool, int, float, str]]

class InputRow(BaseModel):
    """One uploaded row, keyed by normalized field name. Absent column → None."""
    model_config = ConfigDict(frozen=True)

    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    apn: Optional[str] = None
    fips: Optional[str] = None

class ValuationFields(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    estimated_value: Scalar = None
    price_range_min: Scalar = None
    price_range_max: Scalar = None
    confidence_score: Scalar = None
    fsd_score: Scalar = None
    qvm_value_range_code: Scalar = None
    qvm_asof_date: Scalar = None
    last_sale_date: Scalar = None
    full_address: Scalar = None
    city: Scalar = None
    state: Scalar = None
    zip: Scalar = None
    apn: Scalar = None
    fips: Scalar = None
    request_id: Scalar = None

class Artifacts(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    pdf_url: Optional[str] = None

class SimpleValueResponse(BaseModel):
    """Body of POST /v1/report/simple-value. Every part is optional."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    data: Optional[ValuationFields] = None
    artifacts: Optional[Artifacts] = None

class ResultRow(BaseModel):
    """
    One output CSV row. Field order *is* the column order of the bulk CSV.
    """
    model_config = ConfigDict(frozen=True)

    input_address: str = ""
    input_city: str = ""
    input_state: str = ""
    input_zip: str = ""
    input_apn: str = ""
    input_fips: str = ""
    match_status: str
    estimated_value: str = ""
    price_range_min: str = ""
    price_range_max: str = ""
    confidence_score: str = ""
    fsd_score: str = ""
    qvm_value_range_code: str = ""
    qvm_asof_date: str = ""
    last_sale_date: str = ""
    full_address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    apn: str = ""
    fips: str = ""
    request_id: str = ""
    pdf_url: str = ""

class FlatRowsRequest(BaseModel):
    flat_rows: Optional[list[dict[str, Any]]] = Field(default=None, alias="flatRows")
