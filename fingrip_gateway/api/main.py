"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fingrip_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fingrip_gateway.api.v1 import bank, budgets, challenges, goals, preferences, savings, score, subscriptions, transactions
from fingrip_gateway.domain.exceptions import AlreadyImplementedError, InvalidPreferenceError, NotFoundError
from fingrip_gateway.infrastructure.database.session import init_db
from fingrip_gateway.infrastructure.observability.logging import setup_logging
from fingrip_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="FinGrip Gateway",
        description="Personal finance tracking, financial health scoring and Tink bank sync",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(AlreadyImplementedError)
    async def conflict_handler(request: Request, exc: AlreadyImplementedError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(InvalidPreferenceError)
    async def invalid_preference_handler(request: Request, exc: InvalidPreferenceError):
        logging.warning(f"Rejected preference: {exc}")
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(challenges.router, prefix="/v1", tags=["challenges"])
    app.include_router(subscriptions.router, prefix="/v1", tags=["subscriptions"])
    app.include_router(savings.router, prefix="/v1", tags=["savings"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])
    app.include_router(score.router, prefix="/v1", tags=["score"])
    app.include_router(bank.router, prefix="/v1", tags=["bank"])
    app.include_router(preferences.router, prefix="/v1", tags=["preferences"])

    return app


app = create_app()
