"""
Markup, margin and profitability.

Markup is a percentage of cost added on top of cost.
Margin is the percentage of the selling price that is profit.
Cost 100 at 50% markup sells at 150 for a 33.3% margin.

Markup sources resolve in MarkupSource declaration order:
quote override > grid > product > implied > subcategory > category >
material/labor default > global default > minimum.
"""

import logging
import math
from decimal import Decimal
from typing import Iterable, Optional

from .config import settings
from .calculators.units import round_to
from .schemas import MarkupCandidate, MarkupResult, MarkupSource, ProfitStatus

logger = logging.getLogger(__name__)

_PRIORITY = {source: index for index, source in enumerate(MarkupSource)}


def apply_markup(cost: float, markup_percentage: float) -> float:
    """Selling price before rounding. Zero or negative cost is returned unchanged."""
    if cost <= 0:
        return cost
    return cost * (1 + markup_percentage / 100.0)


def calculate_gross_margin(cost: float, selling: float) -> float:
    """((selling - cost) / selling) * 100, one decimal. 0 when there is no selling price."""
    if selling <= 0:
        return 0.0
    return round_to((selling - cost) / selling * 100, 1)


def calculate_implied_markup(cost: float, selling: float) -> float:
    """
    Markup implied by a supplier's list cost and list selling price, whole percent.

    Halves round toward positive infinity: 62.5 -> 63, -2.5 -> -2.
    """
    if cost <= 0 or selling <= 0:
        return 0.0
    list_cost = Decimal(str(cost))
    implied = (Decimal(str(selling)) - list_cost) * 100 / list_cost
    return float(math.floor(implied + Decimal("0.5")))


def get_profit_status(margin_percentage: float, low_threshold: float = None,
                      good_threshold: float = None) -> ProfitStatus:
    if low_threshold is None:
        low_threshold = settings.PROFIT_LOW_THRESHOLD
    if good_threshold is None:
        good_threshold = settings.PROFIT_GOOD_THRESHOLD

    if margin_percentage < 0:
        return ProfitStatus.LOSS
    if margin_percentage < low_threshold:
        return ProfitStatus.LOW
    if margin_percentage < good_threshold:
        return ProfitStatus.NORMAL
    return ProfitStatus.GOOD


def _applies(candidate: MarkupCandidate) -> bool:
    if candidate.percentage is None:
        return False
    # A quote override of 0 is a deliberate "sell at cost"
    if candidate.source == MarkupSource.QUOTE_OVERRIDE:
        return True
    return candidate.percentage > 0


def resolve_markup(candidates: Iterable[MarkupCandidate],
                   minimum: Optional[float] = None) -> MarkupResult:
    """
    Pick the highest-priority applicable markup.

    `minimum` (or a MINIMUM candidate) is both the fallback when nothing
    else applies and a floor under whatever was picked. A quote override
    is taken as-is.
    """
    floor = minimum
    ranked = []
    for candidate in candidates:
        if candidate.source == MarkupSource.MINIMUM:
            if candidate.percentage is not None:
                floor = max(floor or 0.0, candidate.percentage)
            continue
        if _applies(candidate):
            ranked.append(candidate)
    ranked.sort(key=lambda c: _PRIORITY[c.source])

    if not ranked:
        if floor and floor > 0:
            return MarkupResult(percentage=floor, source=MarkupSource.MINIMUM)
        return MarkupResult(percentage=0.0, source=None)

    chosen = ranked[0]
    if chosen.source != MarkupSource.QUOTE_OVERRIDE and floor and chosen.percentage < floor:
        logger.warning(
            "%s markup %s%% below minimum %s%%, lifted to minimum",
            chosen.source.value, chosen.percentage, floor,
        )
        return MarkupResult(percentage=floor, source=MarkupSource.MINIMUM, floor_applied=True)

    logger.debug("Markup resolved: %s%% from %s", chosen.percentage, chosen.source.value)
    return MarkupResult(percentage=chosen.percentage, source=chosen.source)
