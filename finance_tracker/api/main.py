"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_tracker.api.dependencies import get_request_id
from finance_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_tracker.api.v1 import dashboard, records, spending, subscriptions, tasks
from finance_tracker.domain.exceptions import (
    InvalidPeriod,
    InvalidRecord,
    RecordConflict,
    RecordNotFound,
    StoreOperationFailed,
)
from finance_tracker.infrastructure.database.session import init_db
from finance_tracker.infrastructure.observability.logging import setup_logging
from finance_tracker.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        init_db()
    yield


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors raised anywhere below the routers to HTTP responses"""

    @app.exception_handler(InvalidPeriod)
    async def invalid_period_handler(request: Request, exc: InvalidPeriod):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RecordNotFound)
    async def not_found_handler(request: Request, exc: RecordNotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidRecord)
    async def invalid_record_handler(request: Request, exc: InvalidRecord):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(RecordConflict)
    async def conflict_handler(request: Request, exc: RecordConflict):
        logging.warning(f"Write conflict: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=409, content={"detail": f"{exc.operation} conflicts with an existing record"})

    @app.exception_handler(StoreOperationFailed)
    async def store_failed_handler(request: Request, exc: StoreOperationFailed):
        logging.error(f"Store error: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable, nothing was changed"})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Tracker",
        description="Income, spending, subscription, and task tracking service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Fixed paths like /tasks/board must register before /tasks/{record_id}
    app.include_router(dashboard.router, prefix="/v1", tags=["overview"])
    app.include_router(spending.router, prefix="/v1", tags=["spending"])
    app.include_router(subscriptions.router, prefix="/v1", tags=["subscriptions"])
    app.include_router(tasks.router, prefix="/v1", tags=["tasks"])
    app.include_router(records.router, prefix="/v1", tags=["records"])

    return app


app = create_app()
