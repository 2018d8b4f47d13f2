"""Rule catalog - named, additive risk rules and the base-risk tables they read"""

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Type, Union

from fraud_gateway.domain.exceptions import InvalidConfigurationError
from fraud_gateway.domain.models import (
    DeviceType,
    MerchantCategory,
    RuleResult,
    TimeOfDay,
    Transaction,
)
from fraud_gateway.utils.card_utils import is_expired, normalize_card_number

NO_CONTRIBUTION = RuleResult()

MERCHANT_LABELS: Dict[MerchantCategory, str] = {
    MerchantCategory.RETAIL: "Retail Store",
    MerchantCategory.ONLINE: "Online Shopping",
    MerchantCategory.RESTAURANT: "Restaurant",
    MerchantCategory.GAS: "Gas Station",
    MerchantCategory.ATM: "ATM Withdrawal",
    MerchantCategory.GAMBLING: "Gambling",
    MerchantCategory.ADULT: "Adult Entertainment",
    MerchantCategory.CRYPTO: "Cryptocurrency",
    MerchantCategory.HIGH_RISK: "High-risk Merchant",
}

TIME_LABELS: Dict[TimeOfDay, str] = {
    TimeOfDay.BUSINESS: "Business Hours (9AM-5PM)",
    TimeOfDay.EVENING: "Evening (5PM-10PM)",
    TimeOfDay.LATE_NIGHT: "Late Night (10PM-6AM)",
    TimeOfDay.EARLY_MORNING: "Early Morning (6AM-9AM)",
}

# Initial operator defaults; not derived from data
DEFAULT_MERCHANT_WEIGHTS: Dict[str, float] = {
    "retail": 0.1,
    "online": 0.3,
    "restaurant": 0.1,
    "gas": 0.2,
    "atm": 0.4,
    "gambling": 0.8,
    "adult": 0.7,
    "crypto": 0.6,
    "high-risk": 0.8,
}

DEFAULT_TIME_WEIGHTS: Dict[str, float] = {
    "business": 0.1,
    "evening": 0.2,
    "late-night": 0.5,
    "early-morning": 0.3,
}

# Parameter-sweep profile, scaled by 20
SWEEP_MERCHANT_WEIGHTS: Dict[str, float] = {
    "online": 0.5,
    "gambling": 1.0,
    "adult": 1.0,
    "crypto": 1.0,
    "high-risk": 1.0,
}

SWEEP_TIME_WEIGHTS: Dict[str, float] = {
    "late-night": 0.5,
    "early-morning": 0.25,
}


@dataclass(frozen=True)
class EvaluationContext:
    """Read-only inputs a rule may consult besides the transaction itself"""

    merchant_weights: Mapping[MerchantCategory, float]
    time_weights: Mapping[TimeOfDay, float]
    as_of: date


RuleCheck = Callable[[Transaction, EvaluationContext], RuleResult]


@dataclass(frozen=True)
class Rule:
    """Named, pure mapping from a transaction to a non-negative contribution"""

    name: str
    check: RuleCheck

    def apply(self, transaction: Transaction, context: EvaluationContext) -> RuleResult:
        result = self.check(transaction, context)
        if result.impact <= 0:
            return NO_CONTRIBUTION
        return result


# ---------------------------------------------------------------------------
# Rule factories
# ---------------------------------------------------------------------------


def amount_band_rule(name: str, lower: float, upper: Optional[float], impact: float, note: str) -> Rule:
    """Fires when lower < amount <= upper (no upper bound when upper is None)"""

    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        if txn.amount > lower and (upper is None or txn.amount <= upper):
            return RuleResult(impact, f"${txn.amount:,.2f} {note}")
        return NO_CONTRIBUTION

    return Rule(name, check)


def velocity_band_rule(name: str, lower: int, upper: Optional[int], impact: float, note: str) -> Rule:
    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        count = txn.recent_transactions
        if count > lower and (upper is None or count <= upper):
            return RuleResult(impact, f"{count} {note}")
        return NO_CONTRIBUTION

    return Rule(name, check)


def velocity_linear_rule(name: str, per_transaction: float) -> Rule:
    """Adds a fixed number of points for every transaction in the trailing hour"""

    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        impact = txn.recent_transactions * per_transaction
        return RuleResult(impact, f"{txn.recent_transactions} transactions in the last hour")

    return Rule(name, check)


def merchant_risk_rule(name: str, multiplier: float, min_impact: float = 0.0) -> Rule:
    """
    Scale the merchant base-risk by `multiplier`.

    The rule fires only when the scaled value is strictly above `min_impact`.
    """

    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        if txn.merchant_category is None:
            return NO_CONTRIBUTION
        weight = context.merchant_weights.get(txn.merchant_category, 0.0)
        impact = round(weight * multiplier, 2)
        if impact > min_impact:
            label = MERCHANT_LABELS[txn.merchant_category]
            return RuleResult(impact, f"{label} has elevated fraud risk")
        return NO_CONTRIBUTION

    return Rule(name, check)


def time_risk_rule(name: str, multiplier: float, min_impact: float = 0.0) -> Rule:
    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        if txn.time_of_day is None:
            return NO_CONTRIBUTION
        weight = context.time_weights.get(txn.time_of_day, 0.0)
        impact = round(weight * multiplier, 2)
        if impact > min_impact:
            label = TIME_LABELS[txn.time_of_day]
            return RuleResult(impact, f"{label} transactions have higher risk")
        return NO_CONTRIBUTION

    return Rule(name, check)


def card_not_present_rule(name: str, impact: float) -> Rule:
    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        if not txn.card_present:
            return RuleResult(impact, "Online/phone transactions have higher fraud risk")
        return NO_CONTRIBUTION

    return Rule(name, check)


def unknown_device_rule(name: str, impact: float) -> Rule:
    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        if txn.device_type == DeviceType.UNKNOWN:
            return RuleResult(impact, "Unrecognized device increases risk")
        return NO_CONTRIBUTION

    return Rule(name, check)


def location_keyword_rule(name: str, keywords: Iterable[str], impact: float, description: str) -> Rule:
    """Case-insensitive substring match on the free-text location"""
    needles = tuple(k.lower() for k in keywords)

    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        location = txn.location.lower()
        if any(needle in location for needle in needles):
            return RuleResult(impact, description)
        return NO_CONTRIBUTION

    return Rule(name, check)


def invalid_cvv_rule(name: str, impact: float) -> Rule:
    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        if len(txn.cvv) not in (3, 4):
            return RuleResult(impact, "CVV does not match expected format")
        return NO_CONTRIBUTION

    return Rule(name, check)


def invalid_card_number_rule(name: str, impact: float) -> Rule:
    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        digits = normalize_card_number(txn.card_number)
        if not 13 <= len(digits) <= 19:
            return RuleResult(impact, "Card number format appears invalid")
        return NO_CONTRIBUTION

    return Rule(name, check)


def expired_card_rule(name: str, impact: float) -> Rule:
    def check(txn: Transaction, context: EvaluationContext) -> RuleResult:
        if is_expired(txn.expiry_year, txn.expiry_month, context.as_of):
            return RuleResult(impact, "Card expiry date has passed")
        return NO_CONTRIBUTION

    return Rule(name, check)


# ---------------------------------------------------------------------------
# Rule registries
# ---------------------------------------------------------------------------


def _registry(rules: Sequence[Rule]) -> Mapping[str, Rule]:
    return MappingProxyType({rule.name: rule for rule in rules})


STANDARD_RULES: Mapping[str, Rule] = _registry(
    [
        amount_band_rule("High transaction amount", 5000, None, 25, "exceeds normal spending"),
        amount_band_rule("Elevated transaction amount", 1000, 5000, 15, "above average"),
        amount_band_rule("Moderate transaction amount", 500, 1000, 8, "slightly elevated"),
        merchant_risk_rule("High-risk merchant category", multiplier=30, min_impact=15),
        time_risk_rule("Unusual transaction time", multiplier=20, min_impact=5),
        card_not_present_rule("Card not present", 20),
        unknown_device_rule("Unknown device", 15),
        velocity_band_rule("High transaction velocity", 5, None, 20, "transactions in short timeframe"),
        velocity_band_rule("Elevated transaction velocity", 3, 5, 10, "recent transactions detected"),
        location_keyword_rule(
            "International transaction",
            ("international", "foreign"),
            15,
            "Cross-border transaction detected",
        ),
        invalid_cvv_rule("Invalid CVV format", 10),
        invalid_card_number_rule("Invalid card number", 15),
        expired_card_rule("Expired card", 30),
    ]
)

SWEEP_RULES: Mapping[str, Rule] = _registry(
    [
        amount_band_rule("High transaction amount", 1000, None, 20, "over $1,000"),
        amount_band_rule("Elevated transaction amount", 500, 1000, 10, "above average"),
        amount_band_rule("Moderate transaction amount", 100, 500, 5, "slightly elevated"),
        velocity_linear_rule("Transaction velocity", per_transaction=5),
        location_keyword_rule("International transaction", ("international",), 15, "Cross-border transaction"),
        location_keyword_rule("High-risk location", ("high-risk",), 25, "High-risk country"),
        time_risk_rule("Unusual transaction time", multiplier=20),
        merchant_risk_rule("High-risk merchant category", multiplier=20),
        card_not_present_rule("Card not present", 15),
        unknown_device_rule("Unknown device", 10),
    ]
)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleCatalog:
    """Ordered rules plus the base-risk tables they are evaluated against"""

    name: str
    rules: Tuple[Rule, ...]
    merchant_weights: Mapping[MerchantCategory, float]
    time_weights: Mapping[TimeOfDay, float]

    @property
    def rule_names(self) -> Tuple[str, ...]:
        return tuple(rule.name for rule in self.rules)

    def context(self, as_of: date) -> EvaluationContext:
        return EvaluationContext(
            merchant_weights=self.merchant_weights,
            time_weights=self.time_weights,
            as_of=as_of,
        )


def _validate_weights(
    table: Mapping[Union[str, Enum], float],
    enum_type: Type[Enum],
    label: str,
) -> Mapping:
    validated = {}
    for key, value in table.items():
        try:
            tag = enum_type(key)
        except ValueError:
            raise InvalidConfigurationError(f"Unknown {label} tag: {key!r}") from None

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidConfigurationError(f"{label} weight for {tag.value!r} must be a number")
        if not math.isfinite(value) or value < 0:
            raise InvalidConfigurationError(f"{label} weight for {tag.value!r} must be non-negative")

        validated[tag] = float(value)

    return MappingProxyType(validated)


def configure_catalog(
    rules: Sequence[Union[Rule, str]],
    merchant_weights: Mapping[Union[str, MerchantCategory], float],
    time_weights: Mapping[Union[str, TimeOfDay], float],
    name: str = "custom",
    registry: Mapping[str, Rule] = STANDARD_RULES,
) -> RuleCatalog:
    """
    Build a validated rule catalog.

    Rules may be given as Rule objects or as names looked up in `registry`.
    Order is preserved and determines factor order in verdicts.

    Raises:
        InvalidConfigurationError: unknown or duplicate rule, empty rule list,
            unknown merchant/time tag, or a negative/non-numeric weight
    """
    if not rules:
        raise InvalidConfigurationError("Catalog must contain at least one rule")

    resolved = []
    seen = set()
    for entry in rules:
        if isinstance(entry, Rule):
            rule = entry
        elif isinstance(entry, str) and entry in registry:
            rule = registry[entry]
        else:
            raise InvalidConfigurationError(f"Unknown rule: {entry!r}")

        if rule.name in seen:
            raise InvalidConfigurationError(f"Duplicate rule: {rule.name!r}")
        seen.add(rule.name)
        resolved.append(rule)

    return RuleCatalog(
        name=name,
        rules=tuple(resolved),
        merchant_weights=_validate_weights(merchant_weights, MerchantCategory, "merchant"),
        time_weights=_validate_weights(time_weights, TimeOfDay, "time"),
    )


def standard_catalog(
    merchant_weights: Optional[Mapping[str, float]] = None,
    time_weights: Optional[Mapping[str, float]] = None,
    enabled_rules: Optional[Sequence[str]] = None,
) -> RuleCatalog:
    """Detailed per-transaction catalog with the default tables unless overridden"""
    return configure_catalog(
        rules=list(enabled_rules) if enabled_rules is not None else list(STANDARD_RULES),
        merchant_weights=DEFAULT_MERCHANT_WEIGHTS if merchant_weights is None else merchant_weights,
        time_weights=DEFAULT_TIME_WEIGHTS if time_weights is None else time_weights,
        name="standard",
    )


def sweep_catalog() -> RuleCatalog:
    """Reduced parameter-sweep catalog with linear velocity scoring"""
    return configure_catalog(
        rules=list(SWEEP_RULES),
        merchant_weights=SWEEP_MERCHANT_WEIGHTS,
        time_weights=SWEEP_TIME_WEIGHTS,
        name="sweep",
        registry=SWEEP_RULES,
    )
