"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from fraud_gateway.domain.models import Verdict
from fraud_gateway.domain.rules import RuleCatalog


class EvaluationRequest(BaseModel):
    """
    Request body for POST /v1/evaluate.

    Fields mirror the raw card form; numeric fields accept strings so form
    input reaches intake unchanged.
    """

    card_number: Optional[str] = Field(None, description="Card number, spaces allowed")
    amount: Optional[Union[float, str]] = Field(None, description="Transaction amount")
    cvv: str = ""
    expiry_month: Optional[Union[int, str]] = None
    expiry_year: Optional[Union[int, str]] = None
    cardholder_name: str = ""
    merchant_name: str = ""
    merchant_category: str = "retail"
    location: str = ""
    device_type: str = "mobile"
    time_of_day: str = "business"
    card_present: Union[bool, str] = True
    recent_transactions: Optional[Union[int, str]] = Field(None, description="Transactions in the last hour")


class RiskFactorSchema(BaseModel):
    """Single rule that contributed to the score"""

    rule: str
    impact: float
    description: str


class VerdictResponse(BaseModel):
    """Response for POST /v1/evaluate"""

    transaction_id: str
    timestamp: datetime
    score: float
    tier: str
    recommendation: str
    confidence: int
    factors: List[RiskFactorSchema]
    catalog: str

    @classmethod
    def from_verdict(cls, verdict: Verdict) -> "VerdictResponse":
        return cls(
            transaction_id=verdict.transaction_id,
            timestamp=verdict.timestamp,
            score=verdict.score,
            tier=verdict.tier.value,
            recommendation=verdict.recommendation.value,
            confidence=verdict.confidence,
            factors=[
                RiskFactorSchema(rule=f.rule, impact=f.impact, description=f.description)
                for f in verdict.factors
            ],
            catalog=verdict.catalog_name,
        )


class HistoryResponse(BaseModel):
    """Response for GET /v1/history"""

    session_id: str
    verdicts: List[VerdictResponse]


class CatalogResponse(BaseModel):
    """Response for GET/PUT /v1/catalog"""

    name: str
    rules: List[str]
    merchant_weights: Dict[str, float]
    time_weights: Dict[str, float]

    @classmethod
    def from_catalog(cls, catalog: RuleCatalog) -> "CatalogResponse":
        return cls(
            name=catalog.name,
            rules=list(catalog.rule_names),
            merchant_weights={tag.value: weight for tag, weight in catalog.merchant_weights.items()},
            time_weights={tag.value: weight for tag, weight in catalog.time_weights.items()},
        )


class CatalogUpdateRequest(BaseModel):
    """Request body for PUT /v1/catalog; omitted parts keep their current value"""

    rules: Optional[List[str]] = None
    merchant_weights: Optional[Dict[str, float]] = None
    time_weights: Optional[Dict[str, float]] = None
