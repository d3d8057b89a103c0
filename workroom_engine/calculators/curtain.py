"""
Curtain fabric calculator — linear meters of fabric to order.

Two fabric orientations:
- VERTICAL (standard): roll runs top to bottom, fabric widths are joined
  side by side to cover the gathered width.
- HORIZONTAL (railroaded): roll runs side to side, the fabric width covers
  the drop and the cut length is the full gathered width.

Shared steps (all cm):
    total_drop      = drop + header_hem + bottom_hem + pooling
    finished_width  = (rail_width + overlap) * fullness      # overlap BEFORE fullness
    total_side_hems = side_hem * 2 * panel_count
    total_width     = finished_width + return_left + return_right + total_side_hems

Vertical:
    widths_required = ceil(total_width / fabric_width)
    seam_allowance  = (widths_required - 1) * seam_hem       # seam_hem is TOTAL per join
    total_fabric_cm = widths_required * total_drop + seam_allowance

Railroaded:
    pieces          = ceil(total_drop / fabric_width)
    seam_allowance  = (pieces - 1) * seam_hem
    total_fabric_cm = pieces * total_width + seam_allowance

linear_meters = total_fabric_cm / 100, then waste is applied.
"""

import logging

from ..errors import InvalidInputError
from ..schemas import CurtainInput, CurtainOrientation, CurtainResult
from .base import BaseCalculator, BreakdownBuilder
from .units import (
    align_to_pattern_repeat,
    apply_waste,
    assert_non_negative,
    assert_positive,
    calculate_seam_allowance,
    calculate_seam_count,
    ceil_ratio,
    cm_to_m,
    format_number as n,
    round_to,
)

logger = logging.getLogger(__name__)

_ORIENTATION_ALIASES = {
    "vertical": CurtainOrientation.VERTICAL,
    "standard": CurtainOrientation.VERTICAL,
    "horizontal": CurtainOrientation.HORIZONTAL,
    "railroaded": CurtainOrientation.HORIZONTAL,
}


class CurtainCalculator(BaseCalculator):
    """Steps and validation shared by both orientations."""

    input_model = CurtainInput
    produces_linear_meters = True
    orientation = None
    summary_tag = ""

    def validate(self, record: CurtainInput) -> None:
        assert_positive(record.rail_width_cm, "rail_width_cm")
        assert_positive(record.drop_cm, "drop_cm")
        assert_positive(record.fullness, "fullness")
        assert_positive(record.fabric_width_cm, "fabric_width_cm")
        assert_positive(record.panel_count, "panel_count")
        if record.panel_count not in (1, 2):
            raise InvalidInputError("panel_count", record.panel_count, "1 (single) or 2 (pair)")
        assert_non_negative(record.header_hem_cm, "header_hem_cm")
        assert_non_negative(record.bottom_hem_cm, "bottom_hem_cm")
        assert_non_negative(record.side_hem_cm, "side_hem_cm")
        assert_non_negative(record.seam_hem_cm, "seam_hem_cm")
        assert_non_negative(record.return_left_cm, "return_left_cm")
        assert_non_negative(record.return_right_cm, "return_right_cm")
        assert_non_negative(record.overlap_cm, "overlap_cm")
        assert_non_negative(record.pooling_cm, "pooling_cm")
        assert_non_negative(record.waste_percent, "waste_percent")
        assert_non_negative(record.pattern_repeat_vertical_cm, "pattern_repeat_vertical_cm")
        assert_non_negative(record.pattern_repeat_horizontal_cm, "pattern_repeat_horizontal_cm")

    def pricing_dimensions(self, record: CurtainInput, result: CurtainResult):
        # Grids for made curtains are priced on the fabric width actually made up
        return result.total_width_cm, record.drop_cm

    def _shared_steps(self, record: CurtainInput, bd: BreakdownBuilder) -> dict:
        """Steps 1-4: identical for both orientations."""
        total_drop = record.drop_cm + record.header_hem_cm + record.bottom_hem_cm + record.pooling_cm
        bd.add(
            "Total drop",
            "%s + %s (header) + %s (bottom) + %s (pooling)" % (
                n(record.drop_cm), n(record.header_hem_cm),
                n(record.bottom_hem_cm), n(record.pooling_cm)),
            self.round(total_drop), "cm", key="total_drop_cm",
        )

        finished_width = (record.rail_width_cm + record.overlap_cm) * record.fullness
        bd.add(
            "Finished width",
            "(%s rail + %s overlap) x %s fullness" % (
                n(record.rail_width_cm), n(record.overlap_cm), n(record.fullness)),
            self.round(finished_width), "cm", key="finished_width_cm",
        )

        total_side_hems = record.side_hem_cm * 2 * record.panel_count
        bd.add(
            "Total side hems",
            "%s x 2 sides x %d panel(s)" % (n(record.side_hem_cm), record.panel_count),
            self.round(total_side_hems), "cm", key="total_side_hems_cm",
        )

        total_returns = record.return_left_cm + record.return_right_cm
        bd.add(
            "Total returns",
            "%s (left) + %s (right)" % (n(record.return_left_cm), n(record.return_right_cm)),
            self.round(total_returns), "cm", key="total_returns_cm",
        )

        total_width = finished_width + total_returns + total_side_hems
        bd.add(
            "Total width",
            "%s (finished) + %s (returns) + %s (side hems)" % (
                n(finished_width), n(total_returns), n(total_side_hems)),
            self.round(total_width), "cm", key="total_width_cm",
        )

        return {
            "total_drop": total_drop,
            "finished_width": finished_width,
            "total_side_hems": total_side_hems,
            "total_returns": total_returns,
            "total_width": total_width,
        }

    def _seam_steps(self, record: CurtainInput, pieces: int, bd: BreakdownBuilder):
        seams = calculate_seam_count(pieces)
        seam_allowance = calculate_seam_allowance(seams, record.seam_hem_cm)
        bd.record("seams_count", seams)
        bd.add(
            "Seam allowance",
            "%d seam(s) x %s cm/seam" % (seams, n(record.seam_hem_cm)),
            self.round(seam_allowance), "cm", key="seam_allowance_cm",
        )
        return seams, seam_allowance

    def _finish(self, record: CurtainInput, bd: BreakdownBuilder, shared: dict,
                cut_drop: float, pieces: int, seams: int, seam_allowance: float,
                total_fabric_cm: float, fabric_expression: str, summary_body: str) -> CurtainResult:
        """Steps 7-8 (total fabric, waste) and assembly of the result record."""
        linear_meters_raw = cm_to_m(total_fabric_cm)
        bd.add("Total fabric", fabric_expression, self.round(linear_meters_raw), "m", key="linear_meters_raw")

        linear_meters = self.round(apply_waste(linear_meters_raw, record.waste_percent))
        bd.record("linear_meters", linear_meters)
        if record.waste_percent > 0:
            bd.add(
                "With waste",
                "%s x (1 + %s%%)" % (n(self.round(linear_meters_raw)), n(record.waste_percent)),
                linear_meters, "m",
            )

        summary = "%s: %s = %sm" % (self.summary_tag, summary_body, n(linear_meters))
        result = CurtainResult(
            orientation=self.orientation,
            total_drop_cm=self.round(shared["total_drop"]),
            cut_drop_cm=self.round(cut_drop),
            finished_width_cm=self.round(shared["finished_width"]),
            total_side_hems_cm=self.round(shared["total_side_hems"]),
            total_returns_cm=self.round(shared["total_returns"]),
            total_width_cm=self.round(shared["total_width"]),
            widths_required=pieces,
            seams_count=seams,
            seam_allowance_cm=self.round(seam_allowance),
            linear_meters_raw=self.round(linear_meters_raw),
            linear_meters=linear_meters,
            breakdown=bd.build(summary),
        )
        logger.debug("%s", summary)
        return result


class CurtainVerticalCalculator(CurtainCalculator):
    """Standard orientation: buy length runs in the drop direction."""

    orientation = CurtainOrientation.VERTICAL
    summary_tag = "VERTICAL"

    def calculate(self, data) -> CurtainResult:
        record = self.prepare(data)
        bd = BreakdownBuilder()
        shared = self._shared_steps(record, bd)

        cut_drop = shared["total_drop"]
        if record.pattern_repeat_vertical_cm > 0:
            cut_drop = align_to_pattern_repeat(cut_drop, record.pattern_repeat_vertical_cm)
            bd.add(
                "Pattern-matched drop",
                "%s cm drop rounded up to %s cm repeat" % (
                    n(shared["total_drop"]), n(record.pattern_repeat_vertical_cm)),
                self.round(cut_drop), "cm", key="cut_drop_cm",
            )

        width_to_cover = shared["total_width"]
        if record.pattern_repeat_horizontal_cm > 0:
            width_to_cover = align_to_pattern_repeat(width_to_cover, record.pattern_repeat_horizontal_cm)
            bd.add(
                "Pattern-matched width",
                "%s cm width rounded up to %s cm repeat" % (
                    n(shared["total_width"]), n(record.pattern_repeat_horizontal_cm)),
                self.round(width_to_cover), "cm",
            )

        widths_required = ceil_ratio(width_to_cover, record.fabric_width_cm)
        bd.add(
            "Widths required",
            "ceil(%s / %s)" % (n(width_to_cover), n(record.fabric_width_cm)),
            widths_required, "widths", key="widths_required",
        )

        seams, seam_allowance = self._seam_steps(record, widths_required, bd)
        total_fabric_cm = widths_required * cut_drop + seam_allowance

        return self._finish(
            record, bd, shared, cut_drop, widths_required, seams, seam_allowance, total_fabric_cm,
            fabric_expression="(%d widths x %s cm drop) + %s cm seams" % (
                widths_required, n(cut_drop), n(seam_allowance)),
            summary_body="%d width(s) x %scm + %scm seams" % (
                widths_required, n(round_to(cut_drop, 0)), n(round_to(seam_allowance, 0))),
        )


class CurtainRailroadedCalculator(CurtainCalculator):
    """Railroaded orientation: fabric width covers the drop, buy length runs across the rail."""

    orientation = CurtainOrientation.HORIZONTAL
    summary_tag = "RAILROADED"

    def calculate(self, data) -> CurtainResult:
        record = self.prepare(data)
        bd = BreakdownBuilder()
        shared = self._shared_steps(record, bd)

        # Roll length runs across the window, so the roll-length repeat applies to the width cut
        cut_length = shared["total_width"]
        if record.pattern_repeat_vertical_cm > 0:
            cut_length = align_to_pattern_repeat(cut_length, record.pattern_repeat_vertical_cm)
            bd.add(
                "Pattern-matched width",
                "%s cm width rounded up to %s cm repeat" % (
                    n(shared["total_width"]), n(record.pattern_repeat_vertical_cm)),
                self.round(cut_length), "cm",
            )

        pieces = ceil_ratio(shared["total_drop"], record.fabric_width_cm)
        bd.add(
            "Horizontal pieces",
            "ceil(%s drop / %s fabric width)" % (n(shared["total_drop"]), n(record.fabric_width_cm)),
            pieces, "pieces", key="horizontal_pieces",
        )
        bd.record("widths_required", pieces)

        seams, seam_allowance = self._seam_steps(record, pieces, bd)
        total_fabric_cm = pieces * cut_length + seam_allowance

        return self._finish(
            record, bd, shared, shared["total_drop"], pieces, seams, seam_allowance, total_fabric_cm,
            fabric_expression="(%d pieces x %s cm width) + %s cm seams" % (
                pieces, n(cut_length), n(seam_allowance)),
            summary_body="%d piece(s) x %scm + %scm seams" % (
                pieces, n(round_to(cut_length, 0)), n(round_to(seam_allowance, 0))),
        )


def normalize_orientation(orientation) -> CurtainOrientation:
    """Map 'vertical'/'standard'/'horizontal'/'railroaded' to a CurtainOrientation."""
    if isinstance(orientation, CurtainOrientation):
        return orientation
    key = str(orientation or "").strip().lower()
    if key not in _ORIENTATION_ALIASES:
        raise ValueError(
            f"Unknown curtain orientation: {orientation!r}. "
            f"Available: {list(_ORIENTATION_ALIASES.keys())}"
        )
    return _ORIENTATION_ALIASES[key]


def calculate_curtain(orientation, data) -> CurtainResult:
    """Calculate curtain fabric for the given orientation. Unknown orientation raises ValueError."""
    if normalize_orientation(orientation) == CurtainOrientation.HORIZONTAL:
        return CurtainRailroadedCalculator().calculate(data)
    return CurtainVerticalCalculator().calculate(data)


def calculate_curtain_vertical(data) -> CurtainResult:
    return CurtainVerticalCalculator().calculate(data)


def calculate_curtain_horizontal(data) -> CurtainResult:
    return CurtainRailroadedCalculator().calculate(data)
