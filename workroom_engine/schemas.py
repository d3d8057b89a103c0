"""
Input/output records for the calculation engine.

All lengths are centimeters, all waste/markup/margin values are percents.
Records are frozen. Each calculation builds its own and nothing is cached.
"""

import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .calculators.units import format_number


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Enums ---

class CurtainOrientation(str, enum.Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class BlindVariant(str, enum.Enum):
    ROLLER = "roller"
    ZEBRA = "zebra"
    CELLULAR = "cellular"


class PanelLayout(str, enum.Enum):
    HINGED = "hinged"
    BIFOLD = "bifold"
    SLIDING = "sliding"


class MountType(str, enum.Enum):
    INSIDE = "inside"
    OUTSIDE = "outside"


class PricingMethod(str, enum.Enum):
    PER_LINEAR_METER = "per-linear-meter"
    PER_SQM = "per-sqm"
    FIXED = "fixed"
    PER_DROP = "per-drop"
    PERCENTAGE = "percentage"
    PRICING_GRID = "pricing-grid"


class MarkupSource(str, enum.Enum):
    # Declaration order IS the resolution priority (highest first)
    QUOTE_OVERRIDE = "quote_override"
    GRID = "grid"
    PRODUCT = "product"
    IMPLIED = "implied"
    SUBCATEGORY = "subcategory"
    CATEGORY = "category"
    MATERIAL_LABOR_DEFAULT = "material_labor_default"
    GLOBAL_DEFAULT = "global_default"
    MINIMUM = "minimum"


class CostComponent(str, enum.Enum):
    MATERIAL = "material"
    LABOR = "labor"


class ProfitStatus(str, enum.Enum):
    LOSS = "loss"
    LOW = "low"
    NORMAL = "normal"
    GOOD = "good"


# --- Breakdown ---

class FormulaStep(FrozenModel):
    label: str
    expression: str
    result: float
    unit: str = ""


class FormulaBreakdown(FrozenModel):
    steps: List[FormulaStep]
    summary: str
    values: Dict[str, float]


# --- Curtains ---

class CurtainInput(FrozenModel):
    rail_width_cm: float
    drop_cm: float
    fabric_width_cm: float
    fullness: float
    panel_count: int = 1
    header_hem_cm: float = 0.0
    bottom_hem_cm: float = 0.0
    side_hem_cm: float = 0.0
    seam_hem_cm: float = 0.0          # total per join, not per side
    return_left_cm: float = 0.0
    return_right_cm: float = 0.0
    overlap_cm: float = 0.0           # added before fullness
    pooling_cm: float = 0.0
    waste_percent: float = 0.0
    pattern_repeat_vertical_cm: float = 0.0
    pattern_repeat_horizontal_cm: float = 0.0


class CurtainResult(FrozenModel):
    orientation: CurtainOrientation
    total_drop_cm: float
    cut_drop_cm: float
    finished_width_cm: float
    total_side_hems_cm: float
    total_returns_cm: float
    total_width_cm: float
    widths_required: int
    seams_count: int
    seam_allowance_cm: float
    linear_meters_raw: float
    linear_meters: float
    breakdown: FormulaBreakdown


# --- Blinds / shades / shutters ---

class AreaInput(FrozenModel):
    rail_width_cm: float
    drop_cm: float
    header_hem_cm: float = 0.0
    bottom_hem_cm: float = 0.0
    side_hem_cm: float = 0.0
    waste_percent: float = 0.0


class BlindInput(AreaInput):
    variant: BlindVariant = BlindVariant.ROLLER


class VenetianInput(AreaInput):
    slat_width_cm: float
    stack_factor: float
    headrail_allowance_cm: float = 0.0


class VerticalBlindInput(AreaInput):
    louver_width_cm: float
    overlap_factor: float = 1.0


class ShutterInput(AreaInput):
    panel_layout: PanelLayout = PanelLayout.HINGED
    preferred_panel_width_cm: Optional[float] = None
    min_panel_width_cm: float = 0.0
    max_panel_width_cm: Optional[float] = None
    sliding_overlap_cm: float = 0.0


class AreaResult(FrozenModel):
    effective_width_cm: float
    effective_height_cm: float
    sqm_raw: float
    sqm: float
    breakdown: FormulaBreakdown


class BlindResult(AreaResult):
    variant: BlindVariant


class VenetianResult(AreaResult):
    stack_height_cm: float
    slat_count: int


class VerticalBlindResult(AreaResult):
    louver_count: int


class PanelConfiguration(FrozenModel):
    layout: PanelLayout
    panel_count: int
    panel_width_cm: float


class ShutterResult(AreaResult):
    panel_layout: PanelLayout
    panel_count: Optional[int] = None
    panel_width_cm: Optional[float] = None


class RecessMeasurements(FrozenModel):
    width_top_cm: float
    width_middle_cm: float
    width_bottom_cm: float
    height_left_cm: float
    height_middle_cm: float
    height_right_cm: float
    width_deduction_cm: float = 0.0
    height_deduction_cm: float = 0.0
    width_overlap_cm: float = 0.0     # outside mount only
    height_overlap_cm: float = 0.0    # outside mount only
    mount: MountType = MountType.INSIDE


class OrderSize(FrozenModel):
    mount: MountType
    width_cm: float
    height_cm: float
    breakdown: FormulaBreakdown


# --- Pricing ---

class DropRange(FrozenModel):
    min_drop: float
    max_drop: float
    price: float


class PricingGrid(FrozenModel):
    width_columns: List[float] = []
    drop_rows: List[float] = []
    prices: Dict[str, float] = {}

    @field_validator("width_columns", "drop_rows")
    @classmethod
    def _sorted_ascending(cls, value):
        return sorted(value)

    @staticmethod
    def key(width: float, drop: float) -> str:
        """Price key for a width column / drop row pair: '100_150'."""
        return "%s_%s" % (format_number(width), format_number(drop))


class MarkupCandidate(FrozenModel):
    source: MarkupSource
    percentage: Optional[float] = None
    # None applies to every cost component
    component: Optional[CostComponent] = None


class MarkupResult(FrozenModel):
    percentage: float
    source: Optional[MarkupSource] = None
    floor_applied: bool = False


class ManufacturingConfig(FrozenModel):
    """Make-up labor, charged per linear metre (curtains) or per sqm (area products)."""
    machine_price_per_metre: float = 0.0
    hand_price_per_metre: float = 0.0
    hand_finished: bool = False
    # Grid prices are made-up prices unless the supplier says otherwise
    grid_includes_manufacturing: bool = True


class PricingConfig(FrozenModel):
    pricing_method: str = PricingMethod.FIXED.value
    unit_price: float = 0.0
    quantity: float = 1.0
    drop_ranges: List[DropRange] = []
    grid: Optional[PricingGrid] = None
    grid_markup: Optional[float] = None
    percentage_base: float = 0.0
    # Supplier list prices, used to derive an implied markup
    list_cost_price: Optional[float] = None
    list_selling_price: Optional[float] = None
    manufacturing: ManufacturingConfig = ManufacturingConfig()


class OptionSelection(FrozenModel):
    name: str
    pricing_method: str = PricingMethod.FIXED.value
    price: float = 0.0
    quantity: float = 1.0
    grid: Optional[PricingGrid] = None


class TreatmentRequest(FrozenModel):
    product_type: str
    fields: Dict[str, Any]
    pricing: PricingConfig = PricingConfig()
    options: List[OptionSelection] = []
    markups: List[MarkupCandidate] = []


class PricedTreatment(FrozenModel):
    product_type: str
    measurement: Dict[str, Any]
    linear_meters: Optional[float] = None
    sqm: Optional[float] = None
    base_cost: float
    manufacturing_cost: float = 0.0
    options_cost: float
    cost_price: float
    base_selling: float = 0.0
    manufacturing_selling: float = 0.0
    options_selling: float = 0.0
    material_markup_percentage: float = 0.0
    material_markup_source: Optional[MarkupSource] = None
    labor_markup_percentage: float = 0.0
    labor_markup_source: Optional[MarkupSource] = None
    markup_percentage: float
    markup_source: Optional[MarkupSource] = None
    markup_amount: float
    selling_price: float
    gross_margin: float
    profit_status: ProfitStatus
    breakdown: FormulaBreakdown
    algorithm_version: str
