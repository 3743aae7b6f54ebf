# app/utils/money.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal, str]


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def apply_percentage_off(price: int, percentage: Number) -> int:
    """
    ``round(price * (1 - percentage / 100))`` rounded half-up.

    Percentage goes through ``str`` first so floats coming from JSON
    (``parseFloat`` on the admin form) do not carry binary noise.
    """
    factor = Decimal(1) - Decimal(str(percentage)) / Decimal(100)
    return round_half_up(Decimal(price) * factor)
