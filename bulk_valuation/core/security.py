from datetime import datetime, timezone
from cachetools import TTLCache
from fastapi import Header, HTTPException, Request
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_429_TOO_MANY_REQUESTS
from .config import settings

# One counter per (caller, minute); entries outlive their minute by a little
_buckets: TTLCache = TTLCache(maxsize=8192, ttl=120)

def require_api_key(x_api_key: str | None = Header(default=None, alias="x-api-key")):
    """
    Header-based API key check for callers of this service.
    Distinct from DATANEST_API_KEY, which we send upstream.
    """
    if not settings.API_KEY:
        # If unset, we allow requests (dev convenience).
        return
    if x_api_key != settings.API_KEY:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid API key")

def rate_limit(request: Request):
    """
    Basic in-process RPM limiter, keyed by API key (if present) and client IP.
    A bulk upload counts as one request regardless of its row count.
    """
    rpm = max(1, settings.RATE_LIMIT_RPM)
    client_ip = request.client.host if request.client else "unknown"
    api_key = request.headers.get("x-api-key") or "anon"
    minute_bucket = datetime.now(timezone.utc).strftime("%Y%m%d%H%M")
    key = f"rate:{api_key}:{client_ip}:{minute_bucket}"

    count = _buckets.get(key, 0) + 1
    _buckets[key] = count
    if count > rpm:
        raise HTTPException(status_code=HTTP_429_TOO_MANY_REQUESTS, detail="Rate limit exceeded")

def reset_rate_limits() -> None:
    _buckets.clear()
