"""Risk evaluator - core business logic for card transaction verdicts"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from fraud_gateway.domain.models import Recommendation, RiskFactor, RiskTier, Transaction, Verdict
from fraud_gateway.domain.rules import RuleCatalog, standard_catalog

MAX_SCORE = 100.0

# (lower bound, tier, recommendation, confidence), highest bound first
TIER_THRESHOLDS: Tuple[Tuple[float, RiskTier, Recommendation, int], ...] = (
    (70, RiskTier.HIGH_RISK, Recommendation.BLOCK_TRANSACTION, 95),
    (40, RiskTier.MEDIUM_RISK, Recommendation.MANUAL_REVIEW, 85),
    (20, RiskTier.LOW_RISK, Recommendation.APPROVE_WITH_MONITORING, 90),
    (0, RiskTier.LEGITIMATE, Recommendation.APPROVE_TRANSACTION, 98),
)

DEFAULT_CATALOG = standard_catalog()


def collect_factors(
    transaction: Transaction,
    catalog: RuleCatalog,
    now: datetime,
) -> List[RiskFactor]:
    """Apply every rule in catalog order and keep the ones that fired"""
    context = catalog.context(now.date())
    factors = []
    for rule in catalog.rules:
        result = rule.apply(transaction, context)
        if result.fired:
            factors.append(RiskFactor(rule=rule.name, impact=result.impact, description=result.description or ""))
    return factors


def calculate_risk_score(factors: List[RiskFactor]) -> float:
    """Sum rule impacts and clamp to [0, 100]"""
    total = sum(factor.impact for factor in factors)
    return round(min(max(total, 0.0), MAX_SCORE), 2)


def classify_score(score: float) -> Tuple[RiskTier, Recommendation, int]:
    """
    Map a clamped score to tier, recommendation and confidence.

    Bands (score >= lower bound):
    - 70+:   HIGH_RISK     / BLOCK_TRANSACTION       / 95
    - 40-70: MEDIUM_RISK   / MANUAL_REVIEW           / 85
    - 20-40: LOW_RISK      / APPROVE_WITH_MONITORING / 90
    - <20:   LEGITIMATE    / APPROVE_TRANSACTION     / 98

    Returns: (tier, recommendation, confidence)
    """
    for lower_bound, tier, recommendation, confidence in TIER_THRESHOLDS:
        if score >= lower_bound:
            return tier, recommendation, confidence
    # Scores are clamped to >= 0, so this only catches NaN-like input
    return RiskTier.LEGITIMATE, Recommendation.APPROVE_TRANSACTION, 98


def new_transaction_id() -> str:
    return f"TXN_{uuid.uuid4().hex[:16].upper()}"


def evaluate(
    transaction: Transaction,
    catalog: Optional[RuleCatalog] = None,
    now: Optional[datetime] = None,
) -> Verdict:
    """
    Main entry point: score a transaction against a rule catalog.

    `now` stamps the verdict and supplies the current month for the expiry
    rule; it defaults to the current UTC time. The transaction is not mutated
    and no history is touched.
    """
    catalog = catalog or DEFAULT_CATALOG
    now = now or datetime.now(timezone.utc)

    factors = collect_factors(transaction, catalog, now)
    score = calculate_risk_score(factors)
    tier, recommendation, confidence = classify_score(score)

    return Verdict(
        transaction_id=new_transaction_id(),
        timestamp=now,
        score=score,
        tier=tier,
        recommendation=recommendation,
        confidence=confidence,
        factors=tuple(factors),
        catalog_name=catalog.name,
    )
