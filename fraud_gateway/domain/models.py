"""Domain models - pure Python dataclasses representing card risk entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class MerchantCategory(str, Enum):
    RETAIL = "retail"
    ONLINE = "online"
    RESTAURANT = "restaurant"
    GAS = "gas"
    ATM = "atm"
    GAMBLING = "gambling"
    ADULT = "adult"
    CRYPTO = "crypto"
    HIGH_RISK = "high-risk"


class TimeOfDay(str, Enum):
    BUSINESS = "business"  # 9AM-5PM
    EVENING = "evening"  # 5PM-10PM
    LATE_NIGHT = "late-night"  # 10PM-6AM
    EARLY_MORNING = "early-morning"  # 6AM-9AM


class DeviceType(str, Enum):
    MOBILE = "mobile"
    DESKTOP = "desktop"
    TABLET = "tablet"
    POS = "pos"
    UNKNOWN = "unknown"


class RiskTier(str, Enum):
    LEGITIMATE = "LEGITIMATE"
    LOW_RISK = "LOW_RISK"
    MEDIUM_RISK = "MEDIUM_RISK"
    HIGH_RISK = "HIGH_RISK"


class Recommendation(str, Enum):
    APPROVE_TRANSACTION = "APPROVE_TRANSACTION"
    APPROVE_WITH_MONITORING = "APPROVE_WITH_MONITORING"
    MANUAL_REVIEW = "MANUAL_REVIEW"
    BLOCK_TRANSACTION = "BLOCK_TRANSACTION"


@dataclass(frozen=True)
class Transaction:
    """Proposed card transaction submitted for evaluation"""

    amount: float
    card_number: str
    cvv: str = ""
    expiry_month: int = 0
    expiry_year: int = 0
    merchant_category: Optional[MerchantCategory] = MerchantCategory.RETAIL
    time_of_day: Optional[TimeOfDay] = TimeOfDay.BUSINESS
    card_present: bool = True
    device_type: DeviceType = DeviceType.MOBILE
    recent_transactions: int = 1  # transactions in the preceding hour
    location: str = ""
    cardholder_name: str = ""
    merchant_name: str = ""


@dataclass(frozen=True)
class RuleResult:
    """Contribution of a single rule; zero impact means the rule did not fire"""

    impact: float = 0.0
    description: Optional[str] = None

    @property
    def fired(self) -> bool:
        return self.impact > 0


@dataclass(frozen=True)
class RiskFactor:
    """Rule that fired on a transaction, carried in the verdict for explainability"""

    rule: str
    impact: float
    description: str


@dataclass(frozen=True)
class Verdict:
    """Output of a risk evaluation"""

    transaction_id: str
    timestamp: datetime
    score: float
    tier: RiskTier
    recommendation: Recommendation
    confidence: int
    factors: Tuple[RiskFactor, ...] = field(default_factory=tuple)
    catalog_name: str = "standard"
