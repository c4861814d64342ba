from fastapi import APIRouter, Depends, File, Response, UploadFile
from ..schemas import FlatRowsRequest
from ..services.batch_service import BatchService
from ..services.encoder import encode_records
from ..core.errors import InputError
from ..core.security import require_api_key, rate_limit

router = APIRouter()

BULK_FILENAME = "datanest_simple_value_results.csv"
EXPORT_FILENAME = "datanest_results.csv"

def service_dep() -> BatchService:
    # Builds the upstream client; raises ConfigurationError if the key is missing.
    return BatchService()

def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

@router.post("/bulk/simple-value")
async def post_bulk_simple_value(
    file: UploadFile | None = File(default=None),
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    svc: BatchService = Depends(service_dep),
):
    if file is None:
        raise InputError("file_required", "Attach a CSV file in the 'file' form field.")
    raw = await file.read()
    csv_text = await svc.run(raw)
    return _csv_response(csv_text, BULK_FILENAME)

@router.post("/csv")
async def post_csv(
    body: FlatRowsRequest,
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
):
    rows = body.flat_rows or []
    content = encode_records(list(rows[0].keys()), rows) if rows else ""
    return _csv_response(content, EXPORT_FILENAME)
