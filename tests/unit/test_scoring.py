"""Unit tests for risk evaluation and classification"""

from dataclasses import replace

import pytest

from fraud_gateway.domain.exceptions import MissingRequiredFieldError
from fraud_gateway.domain.intake import transaction_from_input
from fraud_gateway.domain.models import (
    DeviceType,
    MerchantCategory,
    Recommendation,
    RiskFactor,
    RiskTier,
    RuleResult,
    TimeOfDay,
)
from fraud_gateway.domain.rules import Rule, configure_catalog, sweep_catalog
from fraud_gateway.domain.scoring import calculate_risk_score, classify_score, evaluate


def factor_map(verdict):
    return {f.rule: f.impact for f in verdict.factors}


def test_clean_transaction_is_legitimate(clean_transaction, now):
    """Small in-person retail purchase with valid card data scores zero"""
    verdict = evaluate(clean_transaction, now=now)

    assert verdict.score == 0
    assert verdict.tier == RiskTier.LEGITIMATE
    assert verdict.recommendation == Recommendation.APPROVE_TRANSACTION
    assert verdict.confidence == 98
    assert verdict.factors == ()


def test_high_risk_transaction_is_blocked(clean_transaction, now):
    """Large card-not-present gambling purchase at night with high velocity"""
    txn = replace(
        clean_transaction,
        amount=6000,
        card_present=False,
        merchant_category=MerchantCategory.GAMBLING,
        recent_transactions=6,
        time_of_day=TimeOfDay.LATE_NIGHT,
        location="Foreign - international",
    )

    verdict = evaluate(txn, now=now)
    factors = factor_map(verdict)

    assert factors["High transaction amount"] == 25
    assert factors["Card not present"] == 20
    assert factors["High-risk merchant category"] == 24
    assert factors["High transaction velocity"] == 20
    assert factors["Unusual transaction time"] == 10
    assert factors["International transaction"] == 15
    assert verdict.score == 100  # 114 clamped
    assert verdict.tier == RiskTier.HIGH_RISK
    assert verdict.recommendation == Recommendation.BLOCK_TRANSACTION
    assert verdict.confidence == 95


def test_elevated_amount_alone_stays_legitimate(clean_transaction, now):
    verdict = evaluate(replace(clean_transaction, amount=1500), now=now)

    assert verdict.score == 15
    assert [f.rule for f in verdict.factors] == ["Elevated transaction amount"]
    assert verdict.tier == RiskTier.LEGITIMATE


def test_malformed_card_data_is_a_risk_signal(clean_transaction, now):
    """Short CVV and card number add points instead of rejecting the transaction"""
    verdict = evaluate(replace(clean_transaction, amount=50, cvv="12", card_number="123"), now=now)

    assert factor_map(verdict) == {"Invalid CVV format": 10, "Invalid card number": 15}
    assert verdict.score == 25
    assert verdict.tier == RiskTier.LOW_RISK
    assert verdict.recommendation == Recommendation.APPROVE_WITH_MONITORING
    assert verdict.confidence == 90


def test_expired_card_needs_manual_review(clean_transaction, now):
    verdict = evaluate(replace(clean_transaction, expiry_year=2024), now=now)

    assert verdict.score == 30
    assert verdict.tier == RiskTier.MEDIUM_RISK
    assert verdict.recommendation == Recommendation.MANUAL_REVIEW
    assert verdict.confidence == 85


def test_missing_required_fields_produce_no_verdict():
    with pytest.raises(MissingRequiredFieldError) as exc_info:
        transaction_from_input({"cvv": "123", "merchant_category": "retail"})

    assert exc_info.value.fields == ("card_number", "amount")


def test_factors_follow_catalog_order(clean_transaction, now):
    txn = replace(
        clean_transaction,
        cvv="1",
        device_type=DeviceType.UNKNOWN,
        card_present=False,
        amount=700,
    )
    verdict = evaluate(txn, now=now)

    assert [f.rule for f in verdict.factors] == [
        "Moderate transaction amount",
        "Card not present",
        "Unknown device",
        "Invalid CVV format",
    ]
    assert verdict.score == 53


@pytest.mark.parametrize(
    "score, tier, recommendation, confidence",
    [
        (100, RiskTier.HIGH_RISK, Recommendation.BLOCK_TRANSACTION, 95),
        (70, RiskTier.HIGH_RISK, Recommendation.BLOCK_TRANSACTION, 95),
        (69, RiskTier.MEDIUM_RISK, Recommendation.MANUAL_REVIEW, 85),
        (69.99, RiskTier.MEDIUM_RISK, Recommendation.MANUAL_REVIEW, 85),
        (40, RiskTier.MEDIUM_RISK, Recommendation.MANUAL_REVIEW, 85),
        (39.99, RiskTier.LOW_RISK, Recommendation.APPROVE_WITH_MONITORING, 90),
        (20, RiskTier.LOW_RISK, Recommendation.APPROVE_WITH_MONITORING, 90),
        (19.99, RiskTier.LEGITIMATE, Recommendation.APPROVE_TRANSACTION, 98),
        (0, RiskTier.LEGITIMATE, Recommendation.APPROVE_TRANSACTION, 98),
    ],
)
def test_classify_score_boundaries(score, tier, recommendation, confidence):
    assert classify_score(score) == (tier, recommendation, confidence)


def test_calculate_risk_score_clamps():
    assert calculate_risk_score([]) == 0
    assert calculate_risk_score([RiskFactor("a", 60, ""), RiskFactor("b", 60, "")]) == 100
    assert calculate_risk_score([RiskFactor("a", 24.0, ""), RiskFactor("b", 6.0, "")]) == 30


def test_score_is_monotonic_in_amount(clean_transaction, now):
    amounts = [0, 100, 500, 500.01, 1000, 1000.01, 5000, 5000.01, 1_000_000]
    scores = [evaluate(replace(clean_transaction, amount=a), now=now).score for a in amounts]

    assert scores == sorted(scores)


def test_score_stays_within_bounds(clean_transaction, now):
    worst = replace(
        clean_transaction,
        amount=10_000,
        cvv="",
        card_number="",
        expiry_year=1999,
        merchant_category=MerchantCategory.GAMBLING,
        time_of_day=TimeOfDay.LATE_NIGHT,
        card_present=False,
        device_type=DeviceType.UNKNOWN,
        recent_transactions=50,
        location="international",
    )
    assert evaluate(worst, now=now).score == 100
    assert 0 <= evaluate(clean_transaction, now=now).score <= 100


def test_evaluation_is_idempotent(clean_transaction, now):
    txn = replace(clean_transaction, amount=2500, card_present=False)
    first = evaluate(txn, now=now)
    second = evaluate(txn, now=now)

    assert first.transaction_id != second.transaction_id
    assert (first.score, first.tier, first.recommendation, first.confidence, first.factors) == (
        second.score,
        second.tier,
        second.recommendation,
        second.confidence,
        second.factors,
    )


def test_evaluation_stamps_timestamp_and_catalog(clean_transaction, now):
    verdict = evaluate(clean_transaction, now=now)

    assert verdict.timestamp == now
    assert verdict.transaction_id.startswith("TXN_")
    assert verdict.catalog_name == "standard"


def test_same_engine_serves_sweep_catalog(clean_transaction, now):
    """Reduced catalog with linear velocity scoring"""
    txn = replace(
        clean_transaction,
        amount=1500,
        recent_transactions=3,
        location="international",
        time_of_day=TimeOfDay.LATE_NIGHT,
        merchant_category=MerchantCategory.ONLINE,
        card_present=False,
    )

    verdict = evaluate(txn, sweep_catalog(), now=now)

    assert factor_map(verdict) == {
        "High transaction amount": 20,
        "Transaction velocity": 15,
        "International transaction": 15,
        "Unusual transaction time": 10,
        "High-risk merchant category": 10,
        "Card not present": 15,
    }
    assert verdict.score == 85
    assert verdict.tier == RiskTier.HIGH_RISK
    assert verdict.catalog_name == "sweep"


def test_sweep_catalog_baseline(clean_transaction, now):
    """One recent transaction still carries the linear velocity points"""
    verdict = evaluate(replace(clean_transaction, amount=50), sweep_catalog(), now=now)

    assert factor_map(verdict) == {"Transaction velocity": 5}
    assert verdict.tier == RiskTier.LEGITIMATE


def test_custom_catalog_weights_change_score(clean_transaction, now):
    catalog = configure_catalog(
        rules=["High-risk merchant category"],
        merchant_weights={"retail": 0.9},
        time_weights={},
    )
    verdict = evaluate(clean_transaction, catalog, now=now)

    assert verdict.score == 27
    assert verdict.tier == RiskTier.LOW_RISK


def test_evaluation_does_not_mutate_transaction(clean_transaction, now):
    snapshot = replace(clean_transaction)
    evaluate(clean_transaction, now=now)
    assert clean_transaction == snapshot


def test_custom_rule_negative_impact_is_ignored(clean_transaction, now):
    catalog = configure_catalog(
        rules=[Rule("Discount", lambda txn, ctx: RuleResult(-40, "credit")), "Card not present"],
        merchant_weights={},
        time_weights={},
    )
    verdict = evaluate(replace(clean_transaction, card_present=False), catalog, now=now)

    assert verdict.score == 20
    assert [f.rule for f in verdict.factors] == ["Card not present"]
