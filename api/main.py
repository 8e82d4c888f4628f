import logging
import os
import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from starlette.middleware.base import BaseHTTPMiddleware

from api.db import create_schema, make_engine, make_session_factory
from api.routers import earthquakes
from api.store import SqlStore
from listing.engine import ListingEngine
from listing.errors import ValidationError
from listing.store import RecordStore

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


load_dotenv()

logger = logging.getLogger(__name__)


# =========================
# PROMETHEUS METRICS
# =========================

# Requests by method, path and status code
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

# Latency by method and path
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        path = request.url.path
        method = request.method
        status = response.status_code

        REQUEST_COUNT.labels(method=method, path=path, status=status).inc()
        REQUEST_LATENCY.labels(method=method, path=path).observe(process_time)

        return response


def _default_store() -> SqlStore:
    engine = make_engine()
    create_schema(engine)
    return SqlStore(make_session_factory(engine))


def create_app(store: RecordStore = None) -> FastAPI:
    """Build the API around a record store; defaults to the ``DATABASE`` one.

    Run with ``uvicorn api.main:create_app --factory``.
    """
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

    app = FastAPI(
        title="Earthquakes API",
        version="0.2",
        description="Filtered, paginated and sorted listing of earthquake records.",
    )
    app.state.listing_engine = ListingEngine(store if store is not None else _default_store())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(MetricsMiddleware)

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        logger.info("rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc), "field": exc.field})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # Prometheus text format
    @app.get("/metrics")
    def metrics():
        data = generate_latest()
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)

    app.include_router(earthquakes.router)
    return app
