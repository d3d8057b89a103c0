"""
Workroom Engine — measurement-to-price calculations for made-to-order
curtains, blinds and shutters.

Calling layers import from here.
"""

from .calculators.blind import calculate_blind, calculate_venetian, calculate_vertical_blind
from .calculators.curtain import (
    calculate_curtain,
    calculate_curtain_horizontal,
    calculate_curtain_vertical,
)
from .calculators.registry import get_calculator, has_calculator, list_calculators
from .calculators.shutter import calculate_shutter, configure_panels, resolve_order_size
from .calculators.units import (
    align_to_pattern_repeat,
    apply_waste,
    assert_non_negative,
    assert_positive,
    calculate_seam_allowance,
    calculate_seam_count,
    cm_to_m,
    cm_to_mm,
    m_to_cm,
    mm_to_cm,
    round_to,
)
from .errors import CalculationError, InvalidInputError
from .markup import (
    apply_markup,
    calculate_gross_margin,
    calculate_implied_markup,
    get_profit_status,
    resolve_markup,
)
from .pricing_engine import PricingEngine
from .pricing_grid import lookup_grid_price, normalize_grid_data, validate_grid
from .pricing_methods import (
    normalize_pricing_method,
    price_fixed,
    price_per_drop,
    price_per_running_meter,
    price_per_sqm,
    price_percentage,
)
from .schemas import (
    AreaResult,
    BlindInput,
    BlindResult,
    BlindVariant,
    CostComponent,
    CurtainInput,
    CurtainOrientation,
    CurtainResult,
    DropRange,
    FormulaBreakdown,
    FormulaStep,
    ManufacturingConfig,
    MarkupCandidate,
    MarkupResult,
    MarkupSource,
    MountType,
    OptionSelection,
    OrderSize,
    PanelConfiguration,
    PanelLayout,
    PricedTreatment,
    PricingConfig,
    PricingGrid,
    PricingMethod,
    ProfitStatus,
    RecessMeasurements,
    ShutterInput,
    ShutterResult,
    TreatmentRequest,
    VenetianInput,
    VenetianResult,
    VerticalBlindInput,
    VerticalBlindResult,
)
