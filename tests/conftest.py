"""
Shared test fixtures — standard measurement sets and an engine with
predictable settings.
"""

import pytest

from workroom_engine.config import Settings
from workroom_engine.pricing_engine import PricingEngine


@pytest.fixture
def curtain_fields():
    """200cm rail, 260cm drop, 140cm plain fabric at 2x fullness: 11.35m."""
    return {
        "rail_width_cm": 200,
        "drop_cm": 260,
        "fabric_width_cm": 140,
        "fullness": 2.0,
        "panel_count": 1,
        "header_hem_cm": 10,
        "bottom_hem_cm": 10,
        "side_hem_cm": 5,
        "seam_hem_cm": 5,
        "return_left_cm": 5,
        "return_right_cm": 5,
        "overlap_cm": 5,
        "waste_percent": 0,
    }


@pytest.fixture
def blind_fields():
    """120 x 150 roller blind: 128 x 168 effective, 2.15 sqm."""
    return {
        "rail_width_cm": 120,
        "drop_cm": 150,
        "header_hem_cm": 8,
        "bottom_hem_cm": 10,
        "side_hem_cm": 4,
        "waste_percent": 0,
    }


@pytest.fixture
def engine():
    """Engine with no global default and no minimum markup."""
    return PricingEngine(settings=Settings(GLOBAL_MARKUP_DEFAULT=0.0, MINIMUM_MARKUP=0.0))
