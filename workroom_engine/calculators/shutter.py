"""
Shutter calculator — area, panel configuration and order size.

Area is the blind formula (see blind.AreaCalculator).

Panels:
    panel_count = max(1, ceil(width / preferred_panel_width))
    bifold  -> panel_count rounded up to an even number (panels fold in pairs)
    sliding -> each join overlaps, so the shared width grows by
               (panel_count - 1) * sliding_overlap
    panel_width = shared_width / panel_count, must sit inside [min, max]

Order size from six recess readings:
    inside mount  -> narrowest reading minus deduction (frame must fit the tightest point)
    outside mount -> widest reading plus overlap
"""

import logging
from typing import Optional

from ..errors import InvalidInputError
from ..schemas import (
    MountType,
    OrderSize,
    PanelConfiguration,
    PanelLayout,
    RecessMeasurements,
    ShutterInput,
    ShutterResult,
)
from .base import BreakdownBuilder
from .blind import AreaCalculator
from .units import assert_non_negative, assert_positive, ceil_ratio, format_number as n, round_to

logger = logging.getLogger(__name__)


def configure_panels(width_cm: float, layout: PanelLayout, preferred_panel_width_cm: float,
                     min_panel_width_cm: float = 0.0,
                     max_panel_width_cm: Optional[float] = None,
                     sliding_overlap_cm: float = 0.0) -> PanelConfiguration:
    """
    Split a shutter width into panels.

    Raises InvalidInputError when the resulting panel width falls outside
    the manufacturer's min/max.
    """
    assert_positive(width_cm, "width_cm")
    assert_positive(preferred_panel_width_cm, "preferred_panel_width_cm")
    assert_non_negative(min_panel_width_cm, "min_panel_width_cm")
    assert_non_negative(sliding_overlap_cm, "sliding_overlap_cm")
    if max_panel_width_cm is not None:
        assert_positive(max_panel_width_cm, "max_panel_width_cm")

    layout = PanelLayout(layout)
    panel_count = max(1, ceil_ratio(width_cm, preferred_panel_width_cm))
    if layout == PanelLayout.BIFOLD and panel_count % 2:
        panel_count += 1

    shared_width = width_cm
    if layout == PanelLayout.SLIDING:
        shared_width += (panel_count - 1) * sliding_overlap_cm

    panel_width = round_to(shared_width / panel_count, 2)
    if panel_width < min_panel_width_cm:
        raise InvalidInputError(
            "panel_width_cm", panel_width, "at least %s cm" % n(min_panel_width_cm))
    if max_panel_width_cm is not None and panel_width > max_panel_width_cm:
        raise InvalidInputError(
            "panel_width_cm", panel_width, "at most %s cm" % n(max_panel_width_cm))

    return PanelConfiguration(layout=layout, panel_count=panel_count, panel_width_cm=panel_width)


class ShutterCalculator(AreaCalculator):
    """Shutter area, plus panel split when a preferred panel width is given."""

    input_model = ShutterInput

    def validate(self, record: ShutterInput) -> None:
        super().validate(record)
        if record.preferred_panel_width_cm is not None:
            assert_positive(record.preferred_panel_width_cm, "preferred_panel_width_cm")

    def calculate(self, data) -> ShutterResult:
        record = self.prepare(data)
        bd = BreakdownBuilder()
        area = self.area_steps(record, bd)
        summary = self.area_summary("SHUTTER", area)

        panels = None
        if record.preferred_panel_width_cm is not None:
            panels = configure_panels(
                record.rail_width_cm,
                record.panel_layout,
                record.preferred_panel_width_cm,
                min_panel_width_cm=record.min_panel_width_cm,
                max_panel_width_cm=record.max_panel_width_cm,
                sliding_overlap_cm=record.sliding_overlap_cm,
            )
            bd.add(
                "Panels",
                "%s layout, ceil(%s / %s)" % (
                    panels.layout.value, n(record.rail_width_cm), n(record.preferred_panel_width_cm)),
                panels.panel_count, "panels", key="panel_count",
            )
            bd.add(
                "Panel width",
                "%s cm over %d panel(s)" % (n(record.rail_width_cm), panels.panel_count),
                panels.panel_width_cm, "cm", key="panel_width_cm",
            )
            summary = "%s, %d %s panel(s) @ %scm" % (
                summary, panels.panel_count, panels.layout.value, n(panels.panel_width_cm))

        logger.debug("%s", summary)
        return ShutterResult(
            panel_layout=record.panel_layout,
            panel_count=panels.panel_count if panels else None,
            panel_width_cm=panels.panel_width_cm if panels else None,
            breakdown=bd.build(summary),
            **area
        )


def resolve_order_size(data) -> OrderSize:
    """Order width/height from recess readings. Accepts RecessMeasurements or a dict."""
    if not isinstance(data, RecessMeasurements):
        data = RecessMeasurements.model_validate(data)

    widths = (data.width_top_cm, data.width_middle_cm, data.width_bottom_cm)
    heights = (data.height_left_cm, data.height_middle_cm, data.height_right_cm)
    for name in ("width_top_cm", "width_middle_cm", "width_bottom_cm",
                 "height_left_cm", "height_middle_cm", "height_right_cm"):
        assert_positive(getattr(data, name), name)
    for name in ("width_deduction_cm", "height_deduction_cm",
                 "width_overlap_cm", "height_overlap_cm"):
        assert_non_negative(getattr(data, name), name)

    bd = BreakdownBuilder()
    readings_w = ", ".join(n(w) for w in widths)
    readings_h = ", ".join(n(h) for h in heights)
    if data.mount == MountType.OUTSIDE:
        width = max(widths) + data.width_overlap_cm
        height = max(heights) + data.height_overlap_cm
        bd.add("Order width", "max(%s) + %s overlap" % (readings_w, n(data.width_overlap_cm)),
               round_to(width, 2), "cm", key="width_cm")
        bd.add("Order height", "max(%s) + %s overlap" % (readings_h, n(data.height_overlap_cm)),
               round_to(height, 2), "cm", key="height_cm")
    else:
        width = min(widths) - data.width_deduction_cm
        height = min(heights) - data.height_deduction_cm
        bd.add("Order width", "min(%s) - %s deduction" % (readings_w, n(data.width_deduction_cm)),
               round_to(width, 2), "cm", key="width_cm")
        bd.add("Order height", "min(%s) - %s deduction" % (readings_h, n(data.height_deduction_cm)),
               round_to(height, 2), "cm", key="height_cm")

    if width <= 0:
        raise InvalidInputError("width_deduction_cm", data.width_deduction_cm,
                                "smaller than the narrowest width reading")
    if height <= 0:
        raise InvalidInputError("height_deduction_cm", data.height_deduction_cm,
                                "smaller than the shortest height reading")

    width = round_to(width, 2)
    height = round_to(height, 2)
    summary = "SHUTTER %s MOUNT: %scm x %scm" % (data.mount.value.upper(), n(width), n(height))
    return OrderSize(mount=data.mount, width_cm=width, height_cm=height, breakdown=bd.build(summary))


def calculate_shutter(data) -> ShutterResult:
    return ShutterCalculator().calculate(data)
