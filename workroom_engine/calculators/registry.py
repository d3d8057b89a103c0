"""
Calculator registry — maps product_type strings to calculator classes.

Roller, zebra and cellular share the blind formula; each gets its own entry
so the quote summary names the right product.
"""

from .base import BaseCalculator
from .blind import (
    CellularShadeCalculator,
    RollerBlindCalculator,
    VenetianCalculator,
    VerticalBlindCalculator,
    ZebraBlindCalculator,
)
from .curtain import CurtainRailroadedCalculator, CurtainVerticalCalculator
from .shutter import ShutterCalculator

CALCULATOR_REGISTRY: dict[str, type] = {
    "curtain_vertical": CurtainVerticalCalculator,
    "curtain_railroaded": CurtainRailroadedCalculator,
    "roller_blind": RollerBlindCalculator,
    "zebra_blind": ZebraBlindCalculator,
    "cellular_shade": CellularShadeCalculator,
    "venetian_blind": VenetianCalculator,
    "vertical_blind": VerticalBlindCalculator,
    "shutter": ShutterCalculator,
}


def get_calculator(product_type: str) -> BaseCalculator:
    """Returns an instance of the calculator for a product type, or raises ValueError."""
    if product_type not in CALCULATOR_REGISTRY:
        raise ValueError(
            f"No calculator registered for product type: {product_type}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}"
        )
    return CALCULATOR_REGISTRY[product_type]()


def has_calculator(product_type: str) -> bool:
    """Check if a calculator exists for a product type."""
    return product_type in CALCULATOR_REGISTRY


def list_calculators() -> list[str]:
    """List all registered product types."""
    return list(CALCULATOR_REGISTRY.keys())
