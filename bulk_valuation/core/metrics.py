import time
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Define metrics (names follow Prometheus conventions)
REQ_COUNT = Counter("http_requests_total", "Total HTTP requests", ["path","method","code"])
REQ_LATENCY = Histogram("http_request_duration_seconds", "Request latency", ["path","method"])

# Bulk pipeline
BULK_ROWS = Counter("bulk_rows_total", "Bulk rows resolved, by outcome", ["match_status"])
BULK_ROW_LATENCY = Histogram(
    "bulk_row_duration_seconds",
    "Wall time of one bulk row resolution",
    buckets=(0.1, 0.25, 0.5, 1, 2.5, 5, 10, 20, 30, 45, 55, 60),
)

def _status_label(match_status: str) -> str:
    # error:<http_status> would explode label cardinality; bucket by class
    if match_status.startswith("error:") and match_status[6:].isdigit():
        return f"error:{match_status[6]}xx"
    return match_status

def record_row(match_status: str, elapsed: float) -> None:
    BULK_ROWS.labels(match_status=_status_label(match_status)).inc()
    BULK_ROW_LATENCY.observe(elapsed)

class PromMiddleware(BaseHTTPMiddleware):
    """
    Measures latency and counts requests.
    """
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed = time.perf_counter() - start

        # Prefer the route template so path params don't become labels
        route = request.scope.get("route")
        path = getattr(route, "path", None) or request.url.path
        method = request.method
        code = str(response.status_code)

        REQ_COUNT.labels(path=path, method=method, code=code).inc()
        REQ_LATENCY.labels(path=path, method=method).observe(elapsed)
        return response

async def metrics_endpoint(request: Request):
    """
    GET /api/metrics — scraped by Prometheus.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
