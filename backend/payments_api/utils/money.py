"""
Money Utilities — Minor/major currency unit conversion and amount validation.
"""
from decimal import Decimal
from typing import Any, Mapping, Optional


def to_major_units(amount: int, currency: str, minor_units: Mapping[str, int]) -> Decimal:
    """Convert a minor-unit amount (e.g. 2500 pence) to major units (25.00 pounds).

    Raises:
        ValueError: if no divisor is configured for the currency.
    """
    divisor = minor_units.get(currency.upper())
    if not divisor:
        raise ValueError(f"No minor-unit divisor configured for currency {currency!r}")
    return Decimal(amount) / Decimal(divisor)


def parse_minor_amount(value: Any) -> Optional[int]:
    """Return the amount as an int if it is a positive whole number, else None.

    JSON numbers such as 500.0 count as whole numbers. Booleans and strings do not.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        return None
    return value
