"""
Shutter calculator tests.

Tests:
1-6.   Panel configuration (hinged, bifold, sliding, min/max limits)
7-8.   ShutterCalculator area + panels
9-12.  Order size from recess readings
"""

import pytest

from workroom_engine.calculators.shutter import (
    ShutterCalculator,
    configure_panels,
    resolve_order_size,
)
from workroom_engine.errors import InvalidInputError
from workroom_engine.schemas import MountType, PanelLayout


# ============================================================
# Panel configuration
# ============================================================

def test_hinged_panels_split_evenly():
    panels = configure_panels(180, PanelLayout.HINGED, 60)
    assert panels.panel_count == 3
    assert panels.panel_width_cm == 60


def test_bifold_rounds_up_to_even_count():
    """3 panels don't fold in pairs, so bifold takes 4."""
    panels = configure_panels(180, "bifold", 60)
    assert panels.layout == PanelLayout.BIFOLD
    assert panels.panel_count == 4
    assert panels.panel_width_cm == 45


def test_sliding_adds_overlap_per_join():
    """2 sliding panels over 180cm with 5cm overlap: (180 + 5) / 2."""
    panels = configure_panels(180, PanelLayout.SLIDING, 90, sliding_overlap_cm=5)
    assert panels.panel_count == 2
    assert panels.panel_width_cm == 92.5


def test_narrow_opening_gets_one_panel():
    panels = configure_panels(50, PanelLayout.HINGED, 60)
    assert panels.panel_count == 1
    assert panels.panel_width_cm == 50


def test_panel_wider_than_max_rejected():
    with pytest.raises(InvalidInputError) as exc_info:
        configure_panels(180, PanelLayout.HINGED, 60, max_panel_width_cm=50)
    assert exc_info.value.field == "panel_width_cm"


def test_panel_narrower_than_min_rejected():
    """100cm at 40cm preferred -> 3 panels of 33.33cm, under the 50cm minimum."""
    with pytest.raises(InvalidInputError):
        configure_panels(100, PanelLayout.HINGED, 40, min_panel_width_cm=50)


# ============================================================
# ShutterCalculator
# ============================================================

def test_shutter_area_and_panels(blind_fields):
    data = dict(blind_fields, rail_width_cm=180, side_hem_cm=0, preferred_panel_width_cm=60)
    result = ShutterCalculator().calculate(data)
    assert result.effective_width_cm == 180
    assert result.panel_count == 3
    assert result.panel_width_cm == 60
    assert result.breakdown.summary.startswith("SHUTTER:")


def test_shutter_without_panel_config(blind_fields):
    result = ShutterCalculator().calculate(blind_fields)
    assert result.sqm == 2.15
    assert result.panel_count is None
    assert result.panel_width_cm is None


# ============================================================
# Order size
# ============================================================

def _recess(**overrides):
    readings = {
        "width_top_cm": 90.5,
        "width_middle_cm": 90.2,
        "width_bottom_cm": 90.8,
        "height_left_cm": 120.0,
        "height_middle_cm": 119.6,
        "height_right_cm": 120.3,
        "width_deduction_cm": 0.5,
        "height_deduction_cm": 0.5,
        "width_overlap_cm": 5,
        "height_overlap_cm": 5,
    }
    readings.update(overrides)
    return readings


def test_inside_mount_uses_tightest_reading():
    size = resolve_order_size(_recess())
    assert size.mount == MountType.INSIDE
    assert size.width_cm == 89.7
    assert size.height_cm == 119.1


def test_outside_mount_covers_widest_reading():
    size = resolve_order_size(_recess(mount="outside"))
    assert size.mount == MountType.OUTSIDE
    assert size.width_cm == 95.8
    assert size.height_cm == 125.3


def test_deduction_larger_than_recess_rejected():
    with pytest.raises(InvalidInputError) as exc_info:
        resolve_order_size(_recess(width_deduction_cm=100))
    assert exc_info.value.field == "width_deduction_cm"


def test_negative_reading_rejected():
    with pytest.raises(InvalidInputError):
        resolve_order_size(_recess(height_left_cm=-5))
