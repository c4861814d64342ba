import asyncio
import logging
import time
from typing import Any

import httpx
from fastapi import APIRouter, Body, Depends, Query, Response
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.security import require_api_key, rate_limit
from ..data.proxy_client import DatanestProxy, proxy_client
from ..data.valuation_client import SIMPLE_VALUE_PATH

logger = logging.getLogger(__name__)

router = APIRouter()

LOOKUP_PATH = "/v1/property/lookup"

def proxy_dep() -> DatanestProxy:
    return proxy_client()

def _passthrough_error(resp: httpx.Response) -> Response:
    return Response(content=resp.text or resp.reason_phrase, status_code=resp.status_code)

@router.post("/lookup")
async def post_lookup(
    payload: Any = Body(...),
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    proxy: DatanestProxy = Depends(proxy_dep),
):
    started = time.perf_counter()
    try:
        upstream = await proxy.post_json(LOOKUP_PATH, payload, settings.LOOKUP_TIMEOUT_SECONDS)
    except (asyncio.TimeoutError, httpx.HTTPError) as exc:
        logger.error("proxy /api/lookup error: %s", str(exc) or type(exc).__name__)
        return JSONResponse({"detail": "proxy_error"}, status_code=502)

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    logger.info(
        "property-lookup status: %d took %d ms", upstream.status_code, elapsed_ms,
        extra={"elapsed_ms": elapsed_ms},
    )
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type", "application/json"),
    )

@router.post("/report/simple-value")
async def post_report_simple_value(
    payload: Any = Body(...),
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    proxy: DatanestProxy = Depends(proxy_dep),
):
    try:
        resp = await proxy.post_json(SIMPLE_VALUE_PATH, payload, settings.REPORT_TIMEOUT_SECONDS)
    except (asyncio.TimeoutError, httpx.TimeoutException):
        return JSONResponse({"detail": "proxy_timeout"}, status_code=504)
    except httpx.HTTPError as exc:
        return JSONResponse({"detail": str(exc) or "proxy_error"}, status_code=504)

    if not resp.is_success:
        return _passthrough_error(resp)
    return Response(content=resp.content, status_code=200, media_type="application/json")

@router.get("/artifact")
async def get_artifact(
    url: str = Query(default=""),
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    proxy: DatanestProxy = Depends(proxy_dep),
):
    full_url = proxy.artifact_url(url)
    if not full_url:
        return JSONResponse({"detail": "invalid_artifact_url"}, status_code=400)

    try:
        resp = await proxy.get(full_url, settings.ARTIFACT_TIMEOUT_SECONDS)
    except (asyncio.TimeoutError, httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("proxy /api/artifact error: %s", str(exc) or type(exc).__name__)
        return JSONResponse({"detail": "proxy_error"}, status_code=502)

    if not resp.is_success:
        return _passthrough_error(resp)

    headers = {"content-disposition": resp.headers.get("content-disposition", "attachment")}
    return Response(
        content=resp.content,
        status_code=200,
        headers=headers,
        media_type=resp.headers.get("content-type", "application/octet-stream"),
    )
