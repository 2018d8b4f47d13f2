"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from fraud_gateway.infrastructure.catalog_store import CatalogStore
from fraud_gateway.infrastructure.history import HistoryRegistry


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_catalog_store(request: Request) -> CatalogStore:
    """Provide the application's active rule catalogs"""
    return request.app.state.catalogs


def get_history_registry(request: Request) -> HistoryRegistry:
    """Provide per-session evaluation histories"""
    return request.app.state.histories
