"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Largest unit price a cart line accepts (10 integer digits, 2 decimals)
MAX_PRICE = Decimal("9999999999.99")


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    try:
        return parse_money(value)
    except ValueError:
        return Decimal("0")


def parse_money(value: Number) -> Decimal:
    """
    Strict conversion used for stored documents and inbound prices.

    Raises:
        ValueError: value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary value: {value!r}")

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # Convert floats via str to keep the printed precision
            result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        except (InvalidOperation, ValueError, TypeError) as e:
            raise ValueError(f"Not a monetary value: {value!r}") from e

    if not result.is_finite():
        raise ValueError(f"Not a monetary value: {value!r}")
    return result


def round_money(value: Number) -> Decimal:
    """Round monetary value to cents."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON serialization or external APIs.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def validate_price(value: Number) -> Decimal:
    """
    Strict unit-price check: non-negative, at most MAX_PRICE, whole cents.

    Raises:
        ValueError: value is not an acceptable price
    """
    price = parse_money(value)
    if price < 0:
        raise ValueError(f"Price must be non-negative: {value!r}")
    if price > MAX_PRICE:
        raise ValueError(f"Price exceeds {MAX_PRICE}: {value!r}")
    if price != price.quantize(MONEY_PRECISION):
        raise ValueError(f"Price has more than two decimal places: {value!r}")
    return price
