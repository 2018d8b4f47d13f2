"""Card data helpers"""

from datetime import date


def normalize_card_number(card_number: str) -> str:
    """Strip all whitespace from a card number"""
    return "".join(card_number.split())


def is_expired(expiry_year: int, expiry_month: int, as_of: date) -> bool:
    """Card is expired when (year, month) is earlier than the current (year, month)"""
    return (expiry_year, expiry_month) < (as_of.year, as_of.month)
