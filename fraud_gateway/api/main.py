"""FastAPI application factory"""

from typing import Optional

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from fraud_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from fraud_gateway.api.v1 import catalog, evaluate, history
from fraud_gateway.config import Settings, build_default_catalog, settings
from fraud_gateway.domain.rules import sweep_catalog
from fraud_gateway.infrastructure.catalog_store import CatalogStore
from fraud_gateway.infrastructure.history import HistoryRegistry
from fraud_gateway.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    config = config or settings

    app = FastAPI(
        title="Card Fraud Risk Gateway",
        description="Rule-based risk verdicts for card transactions",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Invalid operator configuration fails here, at startup
    app.state.catalogs = CatalogStore(standard=build_default_catalog(config), sweep=sweep_catalog())
    app.state.histories = HistoryRegistry(capacity=config.history_capacity, max_sessions=config.max_sessions)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": config.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(evaluate.router, prefix="/v1", tags=["evaluations"])
    app.include_router(history.router, prefix="/v1", tags=["history"])
    app.include_router(catalog.router, prefix="/v1", tags=["catalog"])

    return app


app = create_app()
