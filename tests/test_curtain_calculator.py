"""
Curtain fabric calculator tests.

Tests:
1-6.   Vertical orientation (reference job, waste, pairs, breakdown, narrow and tiny rails)
7-9.   Railroaded orientation
10-13. Pattern repeat alignment
14-16. Orientation dispatch
17-20. Validation
21-22. Determinism and input forms
"""

import pytest

from workroom_engine.calculators.curtain import (
    CurtainRailroadedCalculator,
    CurtainVerticalCalculator,
    calculate_curtain,
)
from workroom_engine.errors import InvalidInputError
from workroom_engine.schemas import CurtainInput, CurtainOrientation


def _with(fields, **overrides):
    data = dict(fields)
    data.update(overrides)
    return data


# ============================================================
# Vertical (standard) orientation
# ============================================================

def test_vertical_reference_job(curtain_fields):
    """200 rail, 260 drop, 140 fabric, 2x fullness -> 4 widths, 11.35m."""
    result = CurtainVerticalCalculator().calculate(curtain_fields)
    assert result.orientation == CurtainOrientation.VERTICAL
    assert result.total_drop_cm == 280
    assert result.finished_width_cm == 410
    assert result.total_side_hems_cm == 10
    assert result.total_returns_cm == 10
    assert result.total_width_cm == 430
    assert result.widths_required == 4
    assert result.seams_count == 3
    assert result.seam_allowance_cm == 15
    assert result.linear_meters_raw == 11.35
    assert result.linear_meters == 11.35
    assert result.cut_drop_cm == 280


def test_vertical_waste_applied_after_raw_total(curtain_fields):
    """5% waste on 11.35m -> 11.92m, raw stays 11.35."""
    result = CurtainVerticalCalculator().calculate(_with(curtain_fields, waste_percent=5))
    assert result.linear_meters_raw == 11.35
    assert result.linear_meters == 11.92
    assert result.breakdown.steps[-1].label == "With waste"


def test_vertical_pair_doubles_side_hems(curtain_fields):
    """A pair has four side hems."""
    result = CurtainVerticalCalculator().calculate(_with(curtain_fields, panel_count=2))
    assert result.total_side_hems_cm == 20
    assert result.total_width_cm == 440
    assert result.widths_required == 4


def test_vertical_breakdown_steps_in_order(curtain_fields):
    """Breakdown lists every intermediate in calculation order."""
    result = CurtainVerticalCalculator().calculate(curtain_fields)
    labels = [step.label for step in result.breakdown.steps]
    assert labels == [
        "Total drop",
        "Finished width",
        "Total side hems",
        "Total returns",
        "Total width",
        "Widths required",
        "Seam allowance",
        "Total fabric",
    ]
    assert result.breakdown.summary == "VERTICAL: 4 width(s) x 280cm + 15cm seams = 11.35m"
    assert result.breakdown.values["widths_required"] == 4
    assert result.breakdown.values["seams_count"] == 3


def test_vertical_narrow_rail_needs_one_width():
    """A single width has no seams."""
    result = CurtainVerticalCalculator().calculate({
        "rail_width_cm": 50,
        "drop_cm": 100,
        "fabric_width_cm": 140,
        "fullness": 1.5,
    })
    assert result.widths_required == 1
    assert result.seams_count == 0
    assert result.seam_allowance_cm == 0
    assert result.linear_meters == 1.0


def test_vertical_tiny_rail_still_buys_one_width():
    """A near-zero rail against 50m wide fabric is still one width of one drop."""
    result = CurtainVerticalCalculator().calculate({
        "rail_width_cm": 1e-6,
        "drop_cm": 100,
        "fabric_width_cm": 5000,
        "fullness": 1,
    })
    assert result.widths_required == 1
    assert result.seams_count == 0
    assert result.linear_meters == 1.0


# ============================================================
# Railroaded orientation
# ============================================================

def test_railroaded_reference_job(curtain_fields):
    """280cm total drop over 140cm fabric -> 2 pieces of 430cm + 1 seam."""
    result = CurtainRailroadedCalculator().calculate(curtain_fields)
    assert result.orientation == CurtainOrientation.HORIZONTAL
    assert result.total_width_cm == 430
    assert result.widths_required == 2
    assert result.seams_count == 1
    assert result.seam_allowance_cm == 5
    assert result.linear_meters == 8.65
    assert result.breakdown.summary == "RAILROADED: 2 piece(s) x 430cm + 5cm seams = 8.65m"


def test_railroaded_single_piece_when_fabric_covers_drop(curtain_fields):
    """Wide fabric covers the whole drop in one piece, no seams."""
    result = CurtainRailroadedCalculator().calculate(_with(curtain_fields, fabric_width_cm=300))
    assert result.widths_required == 1
    assert result.seams_count == 0
    assert result.linear_meters == 4.3


def test_railroaded_tiny_drop_still_buys_one_piece(curtain_fields):
    """A near-zero drop with no hems is still one 430cm piece of fabric."""
    result = CurtainRailroadedCalculator().calculate(
        _with(curtain_fields, drop_cm=1e-6, header_hem_cm=0, bottom_hem_cm=0))
    assert result.widths_required == 1
    assert result.seams_count == 0
    assert result.linear_meters == 4.3


# ============================================================
# Pattern repeat
# ============================================================

def test_vertical_drop_aligned_to_pattern_repeat(curtain_fields):
    """280cm drop on a 65cm repeat is cut at 325cm."""
    result = CurtainVerticalCalculator().calculate(
        _with(curtain_fields, pattern_repeat_vertical_cm=65))
    assert result.total_drop_cm == 280
    assert result.cut_drop_cm == 325
    assert result.linear_meters == 13.15
    labels = [step.label for step in result.breakdown.steps]
    assert "Pattern-matched drop" in labels


def test_vertical_width_aligned_to_horizontal_repeat(curtain_fields):
    """430cm on 150cm fabric is 3 widths plain, 4 once matched to a 100cm repeat."""
    plain = CurtainVerticalCalculator().calculate(_with(curtain_fields, fabric_width_cm=150))
    matched = CurtainVerticalCalculator().calculate(
        _with(curtain_fields, fabric_width_cm=150, pattern_repeat_horizontal_cm=100))
    assert plain.widths_required == 3
    assert matched.widths_required == 4
    assert matched.total_width_cm == 430


def test_railroaded_cut_length_aligned_to_repeat(curtain_fields):
    """Railroaded roll runs across the window: 430cm cut becomes 500cm on a 100cm repeat."""
    result = CurtainRailroadedCalculator().calculate(
        _with(curtain_fields, pattern_repeat_vertical_cm=100))
    assert result.linear_meters == 10.05


def test_plain_fabric_has_no_pattern_steps(curtain_fields):
    result = CurtainVerticalCalculator().calculate(curtain_fields)
    assert not any(step.label.startswith("Pattern") for step in result.breakdown.steps)


# ============================================================
# Orientation dispatch
# ============================================================

def test_calculate_curtain_vertical_aliases(curtain_fields):
    assert calculate_curtain("vertical", curtain_fields).orientation == CurtainOrientation.VERTICAL
    assert calculate_curtain("standard", curtain_fields).orientation == CurtainOrientation.VERTICAL


def test_calculate_curtain_horizontal_aliases(curtain_fields):
    assert calculate_curtain("horizontal", curtain_fields).orientation == CurtainOrientation.HORIZONTAL
    assert calculate_curtain("railroaded", curtain_fields).orientation == CurtainOrientation.HORIZONTAL


def test_calculate_curtain_unknown_orientation(curtain_fields):
    with pytest.raises(ValueError):
        calculate_curtain("diagonal", curtain_fields)


# ============================================================
# Validation
# ============================================================

def test_zero_rail_width_rejected(curtain_fields):
    with pytest.raises(InvalidInputError) as exc_info:
        CurtainVerticalCalculator().calculate(_with(curtain_fields, rail_width_cm=0))
    assert exc_info.value.field == "rail_width_cm"


def test_negative_fullness_rejected(curtain_fields):
    with pytest.raises(InvalidInputError):
        CurtainVerticalCalculator().calculate(_with(curtain_fields, fullness=-1))


def test_panel_count_must_be_single_or_pair(curtain_fields):
    with pytest.raises(InvalidInputError) as exc_info:
        CurtainVerticalCalculator().calculate(_with(curtain_fields, panel_count=3))
    assert exc_info.value.field == "panel_count"


def test_nan_drop_rejected(curtain_fields):
    with pytest.raises(InvalidInputError):
        CurtainRailroadedCalculator().calculate(_with(curtain_fields, drop_cm=float("nan")))


# ============================================================
# Determinism
# ============================================================

def test_same_input_same_result(curtain_fields):
    """Repeat calls produce equal results, breakdown included."""
    calc = CurtainVerticalCalculator()
    assert calc.calculate(curtain_fields) == calc.calculate(curtain_fields)


def test_record_and_dict_inputs_agree(curtain_fields):
    calc = CurtainVerticalCalculator()
    assert calc.calculate(CurtainInput(**curtain_fields)) == calc.calculate(curtain_fields)
