"""
Blind and shade calculators — billable square meters.

Roller, zebra and cellular shades share one formula:
    effective_width  = rail_width + side_hem * 2
    effective_height = drop + header_hem + bottom_hem
    sqm_raw          = (effective_width / 100) * (effective_height / 100)
    sqm              = round(apply_waste(sqm_raw, waste_percent), 2)

Venetians also report the stack height of the raised slats and the slat count.
Vertical blinds also report the louver count.
"""

import logging

from ..schemas import (
    AreaInput,
    BlindInput,
    BlindResult,
    BlindVariant,
    VenetianInput,
    VenetianResult,
    VerticalBlindInput,
    VerticalBlindResult,
)
from .base import BaseCalculator, BreakdownBuilder
from .units import apply_waste, assert_non_negative, assert_positive, ceil_ratio, format_number as n

logger = logging.getLogger(__name__)


class AreaCalculator(BaseCalculator):
    """
    Shared area arithmetic for every sqm-priced product.

    Subclasses call area_steps() and then add their own steps before build().
    """

    input_model = AreaInput

    def validate(self, record) -> None:
        assert_positive(record.rail_width_cm, "rail_width_cm")
        assert_positive(record.drop_cm, "drop_cm")
        assert_non_negative(record.header_hem_cm, "header_hem_cm")
        assert_non_negative(record.bottom_hem_cm, "bottom_hem_cm")
        assert_non_negative(record.side_hem_cm, "side_hem_cm")
        assert_non_negative(record.waste_percent, "waste_percent")

    def area_steps(self, record, bd: BreakdownBuilder) -> dict:
        effective_width = record.rail_width_cm + record.side_hem_cm * 2
        bd.add(
            "Effective width",
            "%s + %s x 2 (side hems)" % (n(record.rail_width_cm), n(record.side_hem_cm)),
            self.round(effective_width), "cm", key="effective_width_cm",
        )

        effective_height = record.drop_cm + record.header_hem_cm + record.bottom_hem_cm
        bd.add(
            "Effective height",
            "%s + %s (header) + %s (bottom)" % (
                n(record.drop_cm), n(record.header_hem_cm), n(record.bottom_hem_cm)),
            self.round(effective_height), "cm", key="effective_height_cm",
        )

        sqm_raw = (effective_width / 100.0) * (effective_height / 100.0)
        bd.add(
            "Area",
            "%sm x %sm" % (n(effective_width / 100.0), n(effective_height / 100.0)),
            self.round(sqm_raw), "sqm", key="sqm_raw",
        )

        sqm = self.round(apply_waste(sqm_raw, record.waste_percent))
        bd.record("sqm", sqm)
        if record.waste_percent > 0:
            bd.add(
                "With waste",
                "%s x (1 + %s%%)" % (n(self.round(sqm_raw)), n(record.waste_percent)),
                sqm, "sqm",
            )

        return {
            "effective_width_cm": self.round(effective_width),
            "effective_height_cm": self.round(effective_height),
            "sqm_raw": self.round(sqm_raw),
            "sqm": sqm,
        }

    def area_summary(self, label: str, area: dict) -> str:
        return "%s: %scm x %scm = %ssqm" % (
            label, n(area["effective_width_cm"]), n(area["effective_height_cm"]), n(area["sqm"]))


class BlindCalculator(AreaCalculator):
    """Roller / zebra / cellular. A preset variant overrides the record's variant."""

    input_model = BlindInput
    variant = None

    def calculate(self, data) -> BlindResult:
        record = self.prepare(data)
        variant = self.variant or record.variant
        bd = BreakdownBuilder()
        area = self.area_steps(record, bd)
        summary = self.area_summary(variant.value.upper(), area)
        logger.debug("%s", summary)
        return BlindResult(variant=variant, breakdown=bd.build(summary), **area)


class RollerBlindCalculator(BlindCalculator):
    variant = BlindVariant.ROLLER


class ZebraBlindCalculator(BlindCalculator):
    variant = BlindVariant.ZEBRA


class CellularShadeCalculator(BlindCalculator):
    variant = BlindVariant.CELLULAR


class VenetianCalculator(AreaCalculator):
    """Venetian: area plus stack height of the raised slats."""

    input_model = VenetianInput

    def validate(self, record: VenetianInput) -> None:
        super().validate(record)
        assert_positive(record.slat_width_cm, "slat_width_cm")
        assert_positive(record.stack_factor, "stack_factor")
        assert_non_negative(record.headrail_allowance_cm, "headrail_allowance_cm")

    def calculate(self, data) -> VenetianResult:
        record = self.prepare(data)
        bd = BreakdownBuilder()
        area = self.area_steps(record, bd)

        stack_height = record.stack_factor * record.drop_cm + record.headrail_allowance_cm
        bd.add(
            "Stack height",
            "%s x %s + %s (headrail)" % (
                n(record.stack_factor), n(record.drop_cm), n(record.headrail_allowance_cm)),
            self.round(stack_height), "cm", key="stack_height_cm",
        )

        slat_count = ceil_ratio(record.drop_cm, record.slat_width_cm)
        bd.add(
            "Slats",
            "ceil(%s / %s)" % (n(record.drop_cm), n(record.slat_width_cm)),
            slat_count, "slats", key="slat_count",
        )

        summary = "%s, stack %scm" % (self.area_summary("VENETIAN", area), n(self.round(stack_height)))
        logger.debug("%s", summary)
        return VenetianResult(
            stack_height_cm=self.round(stack_height),
            slat_count=slat_count,
            breakdown=bd.build(summary),
            **area
        )


class VerticalBlindCalculator(AreaCalculator):
    """Vertical blind: area plus number of louvers across the rail."""

    input_model = VerticalBlindInput

    def validate(self, record: VerticalBlindInput) -> None:
        super().validate(record)
        assert_positive(record.louver_width_cm, "louver_width_cm")
        assert_positive(record.overlap_factor, "overlap_factor")

    def calculate(self, data) -> VerticalBlindResult:
        record = self.prepare(data)
        bd = BreakdownBuilder()
        area = self.area_steps(record, bd)

        coverage = record.louver_width_cm * record.overlap_factor
        louver_count = ceil_ratio(record.rail_width_cm, coverage)
        bd.add(
            "Louvers",
            "ceil(%s / (%s x %s))" % (
                n(record.rail_width_cm), n(record.louver_width_cm), n(record.overlap_factor)),
            louver_count, "louvers", key="louver_count",
        )

        summary = "%s, %d louver(s)" % (self.area_summary("VERTICAL BLIND", area), louver_count)
        logger.debug("%s", summary)
        return VerticalBlindResult(louver_count=louver_count, breakdown=bd.build(summary), **area)


def calculate_blind(data) -> BlindResult:
    return BlindCalculator().calculate(data)


def calculate_venetian(data) -> VenetianResult:
    return VenetianCalculator().calculate(data)


def calculate_vertical_blind(data) -> VerticalBlindResult:
    return VerticalBlindCalculator().calculate(data)
