"""Price bands shown instead of exact shelf prices"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Tuple, Union

from stocmed.core.config import settings

Number = Union[Decimal, float, int]


def _to_decimal(value) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, float):
            # repr keeps 0.1 from expanding to its binary value
            amount = Decimal(repr(value))
        else:
            amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount


def round_to_step(amount: Decimal, step: int) -> Decimal:
    """Round to the nearest multiple of step, halves away from zero."""
    step = Decimal(step)
    return (amount / step).quantize(Decimal("1"), rounding=ROUND_HALF_UP) * step


def price_band(
    price: Optional[Number],
    spread: Optional[Decimal] = None,
    step: Optional[int] = None,
) -> Tuple[Optional[float], Optional[float]]:
    """
    Display range around a point price.

    delta = price * spread; min = round(price - delta) floored at 0,
    max = round(price + delta), both rounded to the nearest step.
    Returns (None, None) for a missing, negative or non-finite price.
    """
    amount = _to_decimal(price)
    if amount is None:
        return None, None

    spread = Decimal(settings.PRICE_BAND_SPREAD) if spread is None else Decimal(str(spread))
    step = settings.PRICE_BAND_STEP if step is None else step

    delta = amount * spread
    low = max(round_to_step(amount - delta, step), Decimal("0"))
    high = round_to_step(amount + delta, step)
    return float(low), float(high)
