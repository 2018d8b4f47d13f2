"""Turn raw form-style input into a validated Transaction"""

import math
import sys
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar

from fraud_gateway.domain.exceptions import MissingRequiredFieldError
from fraud_gateway.domain.models import DeviceType, MerchantCategory, TimeOfDay, Transaction

E = TypeVar("E", bound=Enum)

REQUIRED_FIELDS = ("card_number", "amount")

_TRUTHY = {"true", "yes", "1", "y", "on"}
_FALSY = {"false", "no", "0", "n", "off"}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_float(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    # Overflowing input keeps its sign and stays comparable
    return max(min(number, sys.float_info.max), -sys.float_info.max)


def _parse_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    # Accept "3.0" style numeric strings from form input
    number = _parse_float(value, math.nan)
    return int(number) if math.isfinite(number) else default


def _parse_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    return default


def _parse_tag(enum_type: Type[E], value: Any) -> Optional[E]:
    if isinstance(value, enum_type):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_type(value.strip().lower())
    except ValueError:
        return None


def transaction_from_input(data: Mapping[str, Any]) -> Transaction:
    """
    Build a Transaction from raw input.

    Requirements:
    - card_number and amount must be present, otherwise evaluation is refused
    - Non-numeric amount counts as 0, negative amount is clamped to 0
    - Missing or non-numeric velocity counts as 1, negative is clamped to 0
    - Missing expiry parses as 0, which the expiry rule treats as expired
    - Unrecognised merchant/time tags carry no base risk; unrecognised devices are "unknown"

    Raises:
        MissingRequiredFieldError: card_number and/or amount absent
    """
    missing = [name for name in REQUIRED_FIELDS if _is_blank(data.get(name))]
    if missing:
        raise MissingRequiredFieldError(missing)

    merchant = data.get("merchant_category", MerchantCategory.RETAIL.value)
    time_of_day = data.get("time_of_day", TimeOfDay.BUSINESS.value)
    device = data.get("device_type", DeviceType.MOBILE.value)

    return Transaction(
        amount=max(_parse_float(data["amount"], 0.0), 0.0),
        card_number=str(data["card_number"]),
        cvv=str(data.get("cvv") or ""),
        expiry_month=_parse_int(data.get("expiry_month"), 0),
        expiry_year=_parse_int(data.get("expiry_year"), 0),
        merchant_category=_parse_tag(MerchantCategory, merchant),
        time_of_day=_parse_tag(TimeOfDay, time_of_day),
        card_present=_parse_bool(data.get("card_present"), True),
        device_type=_parse_tag(DeviceType, device) or DeviceType.UNKNOWN,
        recent_transactions=max(_parse_int(data.get("recent_transactions"), 1), 0),
        location=str(data.get("location") or ""),
        cardholder_name=str(data.get("cardholder_name") or ""),
        merchant_name=str(data.get("merchant_name") or ""),
    )
