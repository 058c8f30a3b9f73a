"""
Fixed-point helpers for Stellar asset amounts.

Every amount on the network has 7 decimal places. Conversions go through
Decimal and always truncate toward zero so a payment never spends more than
the user typed.
"""
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Union

DECIMALS = 7
SCALE = 10 ** DECIMALS  # 10_000_000 base units per whole unit
_QUANT = Decimal(1).scaleb(-DECIMALS)  # Decimal('1E-7')


def parse_amount(value: Union[str, int, Decimal]) -> Decimal:
    """Parse a user supplied amount; raises ValueError if it is not a finite number."""
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"Not a number: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return amount


def to_base_units(value: Union[str, int, Decimal]) -> int:
    """'10.5000000' -> 105000000"""
    amount = parse_amount(value)
    return int(amount.scaleb(DECIMALS).to_integral_value(rounding=ROUND_DOWN))


def from_base_units(units: int) -> str:
    """105000000 -> '10.5000000'"""
    amount = Decimal(int(units)).scaleb(-DECIMALS)
    return format(amount.quantize(_QUANT, rounding=ROUND_DOWN), 'f')


def format_amount(value: Union[str, int, Decimal]) -> str:
    """Render an amount with exactly 7 decimals, truncating extra digits."""
    return format(parse_amount(value).quantize(_QUANT, rounding=ROUND_DOWN), 'f')
