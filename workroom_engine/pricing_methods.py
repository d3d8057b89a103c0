"""
Base price formulas, one per pricing method.

All functions are pure. Quantities come from a calculator result
(linear meters, sqm, raw drop); prices come from the product's pricing setup.
"""

import logging
from typing import Iterable

from .schemas import DropRange, PricingMethod

logger = logging.getLogger(__name__)

# Spellings found in product catalogues and old templates
_METHOD_ALIASES = {
    "per-linear-meter": PricingMethod.PER_LINEAR_METER,
    "per-linear-metre": PricingMethod.PER_LINEAR_METER,
    "per-running-meter": PricingMethod.PER_LINEAR_METER,
    "per-running-metre": PricingMethod.PER_LINEAR_METER,
    "per-meter": PricingMethod.PER_LINEAR_METER,
    "per-metre": PricingMethod.PER_LINEAR_METER,
    "linear-meter": PricingMethod.PER_LINEAR_METER,
    "linear": PricingMethod.PER_LINEAR_METER,
    "per-sqm": PricingMethod.PER_SQM,
    "per-square-meter": PricingMethod.PER_SQM,
    "per-square-metre": PricingMethod.PER_SQM,
    "per-m2": PricingMethod.PER_SQM,
    "sqm": PricingMethod.PER_SQM,
    "fixed": PricingMethod.FIXED,
    "fixed-price": PricingMethod.FIXED,
    "flat": PricingMethod.FIXED,
    "per-unit": PricingMethod.FIXED,
    "per-item": PricingMethod.FIXED,
    "per-drop": PricingMethod.PER_DROP,
    "drop": PricingMethod.PER_DROP,
    "percentage": PricingMethod.PERCENTAGE,
    "percent": PricingMethod.PERCENTAGE,
    "pricing-grid": PricingMethod.PRICING_GRID,
    "grid": PricingMethod.PRICING_GRID,
    "matrix": PricingMethod.PRICING_GRID,
}


def normalize_pricing_method(code) -> PricingMethod:
    """
    Canonical PricingMethod for any known spelling.
    Empty/None means fixed. Unknown codes raise ValueError.
    """
    if isinstance(code, PricingMethod):
        return code
    key = str(code or "").strip().lower().replace("_", "-").replace(" ", "-")
    if not key:
        return PricingMethod.FIXED
    if key not in _METHOD_ALIASES:
        raise ValueError(
            f"Unknown pricing method: {code!r}. "
            f"Available: {[m.value for m in PricingMethod]}"
        )
    return _METHOD_ALIASES[key]


def price_per_running_meter(linear_meters: float, price_per_meter: float) -> float:
    return linear_meters * price_per_meter


def price_per_sqm(sqm: float, price_per_sqm_: float) -> float:
    return sqm * price_per_sqm_


def price_fixed(fixed_price: float) -> float:
    return fixed_price


def price_per_drop(drop_cm: float, ranges: Iterable[DropRange], quantity: float = 1) -> float:
    """
    Price from the first band with min_drop <= drop <= max_drop, times quantity.
    No matching band prices at 0 and never raises.
    """
    for band in ranges:
        if band.min_drop <= drop_cm <= band.max_drop:
            return band.price * quantity
    logger.warning("No drop band covers %scm, pricing at 0", drop_cm)
    return 0.0


def price_percentage(base: float, percentage: float) -> float:
    return base * percentage / 100.0
