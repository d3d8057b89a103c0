"""
Unit conversion, rounding and validation primitives.

Every calculator depends on these. Nothing else in the engine may redefine
a conversion or a rounding rule.

Units:
- Storage (database, measurement sheets): millimeters
- Engine inputs/outputs: centimeters (fabric widths are sold in cm)
- Billable quantities: meters / square meters
"""

import math
from decimal import Decimal, ROUND_HALF_UP

from ..errors import InvalidInputError


# --- Conversions ---

def mm_to_cm(value: float) -> float:
    return value / 10.0


def cm_to_mm(value: float) -> float:
    return value * 10.0


def cm_to_m(value: float) -> float:
    return value / 100.0


def m_to_cm(value: float) -> float:
    return value * 100.0


# --- Rounding ---

def round_to(value: float, decimals: int = 2) -> float:
    """
    Round half-up to a fixed number of decimals.

    Python's round() is banker's rounding (2.675 -> 2.67, 0.125 -> 0.12),
    which would make quote totals disagree with a calculator on the
    customer's desk. Goes through Decimal(str(x)) so the shortest float
    representation is what gets rounded.
    """
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Compact number for step expressions and grid keys: 200.0 -> '200', 2.5 -> '2.5'."""
    text = ("%.4f" % value).rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


# --- Allowances ---

def apply_waste(value: float, waste_percent: float) -> float:
    """Add a waste percentage. Zero or negative waste leaves the value untouched."""
    if waste_percent <= 0:
        return value
    return value * (1 + waste_percent / 100.0)


def calculate_seam_count(widths: int) -> int:
    """Seams joining N widths side by side: N - 1, never negative."""
    return max(0, widths - 1)


def calculate_seam_allowance(seams: int, seam_hem_total_cm: float) -> float:
    """seam_hem_total_cm is the TOTAL fabric consumed per join (both sides), not per side."""
    return seams * seam_hem_total_cm


def ceil_ratio(numerator: float, denominator: float) -> int:
    """
    ceil(numerator / denominator) for counting whole widths, pieces, louvers.

    A quotient within float noise of a whole number (3.0000000000000004)
    counts as that number; any real excess still rounds up. A positive
    numerator always needs at least one piece.
    """
    ratio = numerator / denominator
    nearest = round(ratio)
    if math.isclose(ratio, nearest, rel_tol=1e-12):
        count = int(nearest)
    else:
        count = math.ceil(ratio)
    if numerator > 0:
        return max(1, count)
    return count


def align_to_pattern_repeat(length_cm: float, repeat_cm: float) -> float:
    """Round a cut length up to a whole number of pattern repeats."""
    if repeat_cm <= 0:
        return length_cm
    return ceil_ratio(length_cm, repeat_cm) * repeat_cm


# --- Validation ---

def _assert_number(value, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(field, value, "a number")
    if not math.isfinite(value):
        raise InvalidInputError(field, value, "a finite number")


def assert_positive(value, field: str) -> None:
    """Reject zero, negative, NaN and infinite values."""
    _assert_number(value, field)
    if value <= 0:
        raise InvalidInputError(field, value, "greater than zero")


def assert_non_negative(value, field: str) -> None:
    """Reject negative, NaN and infinite values. Zero is allowed."""
    _assert_number(value, field)
    if value < 0:
        raise InvalidInputError(field, value, "zero or greater")
