"""Prometheus metrics for monitoring verdict mix and rule activity"""

from prometheus_client import Counter, Histogram

from fraud_gateway.domain.models import Verdict

# Verdict metrics
verdict_counter = Counter(
    "fraud_verdict_total",
    "Total transaction verdicts issued",
    ["tier", "catalog"],  # LEGITIMATE | LOW_RISK | MEDIUM_RISK | HIGH_RISK
)

rule_hit_counter = Counter(
    "fraud_rule_hits_total",
    "Rules that fired, by rule name",
    ["rule"],
)

risk_score_histogram = Histogram(
    "fraud_risk_score",
    "Distribution of clamped risk scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

# Rejected input
missing_field_counter = Counter(
    "fraud_missing_field_total",
    "Evaluations refused for missing required fields",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_verdict(verdict: Verdict) -> None:
    """Record verdict metrics for monitoring tier distribution and rule activity"""
    verdict_counter.labels(tier=verdict.tier.value, catalog=verdict.catalog_name).inc()
    risk_score_histogram.observe(verdict.score)

    for factor in verdict.factors:
        rule_hit_counter.labels(rule=factor.rule).inc()
