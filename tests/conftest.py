"""Pytest fixtures for testing"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from fraud_gateway.api.main import create_app
from fraud_gateway.config import Settings
from fraud_gateway.domain.models import DeviceType, MerchantCategory, TimeOfDay, Transaction
from fraud_gateway.domain.rules import EvaluationContext, RuleCatalog, standard_catalog


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation clock: mid-June 2026"""
    return datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def catalog() -> RuleCatalog:
    return standard_catalog()


@pytest.fixture
def context(catalog: RuleCatalog, now: datetime) -> EvaluationContext:
    return catalog.context(now.date())


@pytest.fixture
def clean_transaction() -> Transaction:
    """Low-risk, in-person retail purchase with valid card data"""
    return Transaction(
        amount=100.0,
        card_number="4111 1111 1111 1111",
        cvv="123",
        expiry_month=12,
        expiry_year=2030,
        merchant_category=MerchantCategory.RETAIL,
        time_of_day=TimeOfDay.BUSINESS,
        card_present=True,
        device_type=DeviceType.MOBILE,
        recent_transactions=1,
        location="New York, USA",
        cardholder_name="Jane Doe",
        merchant_name="Corner Store",
    )


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with default settings"""
    app = create_app(Settings())
    return TestClient(app)


@pytest.fixture
def clean_payload() -> dict:
    """Raw form payload equivalent to a clean transaction"""
    return {
        "card_number": "4111 1111 1111 1111",
        "amount": 100,
        "cvv": "123",
        "expiry_month": "12",
        "expiry_year": "2099",
        "merchant_category": "retail",
        "time_of_day": "business",
        "card_present": True,
        "device_type": "mobile",
        "recent_transactions": 1,
        "location": "Austin, USA",
    }
