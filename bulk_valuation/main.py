from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Routers
from .routers.bulk import router as bulk_router
from .routers.proxy import router as proxy_router

# Core modules
from .core.config import settings
from .core.errors import BatchError
from .core.logging import configure_logging, CorrelationIdMiddleware
from .core.metrics import PromMiddleware, metrics_endpoint

def create_app() -> FastAPI:
    """
    App factory so tests and ASGI servers can instantiate cleanly.
    """
    configure_logging()  # Set up JSON logs + correlation-id filter

    app = FastAPI(
        title="Bulk Simple-Value API",
        version="1.0.0",
        description="Resolves uploaded address/parcel CSVs against the simple-value valuation API.",
    )

    allow_origins = [o.strip() for o in settings.ALLOW_ORIGINS.split(",")] if settings.ALLOW_ORIGINS else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-Id"],
    )

    # Observability middlewares
    app.add_middleware(CorrelationIdMiddleware)  # Adds/propagates X-Request-Id
    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PromMiddleware)       # Records req/latency metrics

    # Batch-fatal errors become one structured JSON response
    @app.exception_handler(BatchError)
    async def batch_error_handler(request: Request, exc: BatchError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Meta routes
    @app.get("/api/health", tags=["meta"])
    def health():
        return {"status": "ok"}

    @app.get("/api/ping", tags=["meta"])
    def ping():
        return {"pong": True}

    if settings.PROMETHEUS_ENABLED:
        app.add_route("/api/metrics", metrics_endpoint, methods=["GET"])

    # Business routes
    app.include_router(bulk_router, prefix="/api", tags=["bulk"])
    app.include_router(proxy_router, prefix="/api", tags=["proxy"])

    return app

app = create_app()
