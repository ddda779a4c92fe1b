from __future__ import annotations

from typing import Optional


def ratio_or_none(numerator: float, denominator: float, digits: Optional[int] = None) -> Optional[float]:
    """``numerator / denominator``, or ``None`` when there is nothing to divide by."""
    if not denominator or denominator < 0:
        return None
    ratio = numerator / denominator
    return ratio if digits is None else round(ratio, digits)


def ratio_or_zero(numerator: float, denominator: float, digits: int = 2) -> float:
    return ratio_or_none(numerator, denominator, digits) or 0.0


def pct_or_zero(numerator: float, denominator: float, digits: int = 1) -> float:
    ratio = ratio_or_none(numerator, denominator)
    return round(ratio * 100.0, digits) if ratio is not None else 0.0
