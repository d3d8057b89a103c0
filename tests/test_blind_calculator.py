"""
Blind and shade calculator tests.

Tests:
1-4.   Roller / zebra / cellular area
5-6.   Venetian stack height and slats
7.     Vertical blind louver count
8-10.  Validation
11.    Determinism
"""

import pytest

from workroom_engine.calculators.blind import (
    BlindCalculator,
    CellularShadeCalculator,
    VenetianCalculator,
    VerticalBlindCalculator,
    ZebraBlindCalculator,
    calculate_blind,
)
from workroom_engine.errors import InvalidInputError
from workroom_engine.schemas import BlindVariant


# ============================================================
# Area
# ============================================================

def test_roller_reference_area(blind_fields):
    """120 x 150 with 4cm side hems, 8cm header, 10cm bottom -> 128 x 168 = 2.15 sqm."""
    result = calculate_blind(blind_fields)
    assert result.effective_width_cm == 128
    assert result.effective_height_cm == 168
    assert result.sqm_raw == 2.15
    assert result.sqm == 2.15
    assert result.variant == BlindVariant.ROLLER
    assert result.breakdown.summary == "ROLLER: 128cm x 168cm = 2.15sqm"


def test_area_with_waste(blind_fields):
    """10% waste on 2.1504 sqm -> 2.37."""
    data = dict(blind_fields, waste_percent=10)
    result = BlindCalculator().calculate(data)
    assert result.sqm == 2.37
    assert [step.label for step in result.breakdown.steps] == [
        "Effective width", "Effective height", "Area", "With waste",
    ]


def test_variant_named_in_summary(blind_fields):
    zebra = ZebraBlindCalculator().calculate(blind_fields)
    cellular = CellularShadeCalculator().calculate(blind_fields)
    assert zebra.variant == BlindVariant.ZEBRA
    assert zebra.breakdown.summary.startswith("ZEBRA:")
    assert cellular.breakdown.summary.startswith("CELLULAR:")
    assert zebra.sqm == cellular.sqm == 2.15


def test_variant_from_fields(blind_fields):
    """Generic calculator takes the variant from the fields."""
    result = BlindCalculator().calculate(dict(blind_fields, variant="cellular"))
    assert result.variant == BlindVariant.CELLULAR


# ============================================================
# Venetian / vertical
# ============================================================

def _venetian_fields(blind_fields):
    return dict(blind_fields, slat_width_cm=2.5, stack_factor=0.1, headrail_allowance_cm=5)


def test_venetian_stack_height(blind_fields):
    """0.1 x 150 drop + 5cm headrail = 20cm stack."""
    result = VenetianCalculator().calculate(_venetian_fields(blind_fields))
    assert result.stack_height_cm == 20
    assert result.sqm == 2.15
    assert result.breakdown.summary.startswith("VENETIAN:")


def test_venetian_slat_count(blind_fields):
    """150cm drop / 2.5cm slats = 60 slats."""
    result = VenetianCalculator().calculate(_venetian_fields(blind_fields))
    assert result.slat_count == 60


def test_vertical_blind_louver_count(blind_fields):
    """120cm rail / (10cm louver x 0.9 overlap) -> ceil(13.3) = 14 louvers."""
    data = dict(blind_fields, louver_width_cm=10, overlap_factor=0.9)
    result = VerticalBlindCalculator().calculate(data)
    assert result.louver_count == 14
    assert result.breakdown.summary.startswith("VERTICAL BLIND:")


# ============================================================
# Validation
# ============================================================

def test_zero_drop_rejected(blind_fields):
    with pytest.raises(InvalidInputError) as exc_info:
        calculate_blind(dict(blind_fields, drop_cm=0))
    assert exc_info.value.field == "drop_cm"


def test_negative_hem_rejected(blind_fields):
    with pytest.raises(InvalidInputError):
        calculate_blind(dict(blind_fields, side_hem_cm=-1))


def test_zero_slat_width_rejected(blind_fields):
    data = dict(_venetian_fields(blind_fields), slat_width_cm=0)
    with pytest.raises(InvalidInputError) as exc_info:
        VenetianCalculator().calculate(data)
    assert exc_info.value.field == "slat_width_cm"


def test_same_input_same_result(blind_fields):
    assert calculate_blind(blind_fields) == calculate_blind(blind_fields)
