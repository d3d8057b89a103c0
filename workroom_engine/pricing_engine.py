"""
Pricing Engine.

Runs a product calculator and turns its billable quantity into a priced
treatment: base price, manufacturing, options, markup resolution per cost
component, margin and profit status.
Pure math. The same request always produces the same PricedTreatment.

Input: TreatmentRequest (product type, measurement fields, pricing setup,
       selected options, markup candidates)
Output: PricedTreatment
"""

import logging

from .calculators.registry import get_calculator
from .calculators.units import format_number as n, round_to
from .config import Settings, settings as default_settings
from .errors import CalculationError
from .markup import (
    apply_markup,
    calculate_gross_margin,
    calculate_implied_markup,
    get_profit_status,
    resolve_markup,
)
from .pricing_grid import lookup_grid_price
from .pricing_methods import (
    normalize_pricing_method,
    price_fixed,
    price_per_drop,
    price_per_running_meter,
    price_per_sqm,
    price_percentage,
)
from .schemas import (
    CostComponent,
    FormulaBreakdown,
    FormulaStep,
    MarkupCandidate,
    MarkupSource,
    OptionSelection,
    PricedTreatment,
    PricingMethod,
    TreatmentRequest,
)

logger = logging.getLogger(__name__)


class PricingEngine:
    """
    Single entry point for quote builders.
    Settings can be overridden per engine (tests, per-account defaults).
    """

    def __init__(self, settings: Settings = None):
        self.settings = settings or default_settings

    def _round(self, value: float) -> float:
        return round_to(value, self.settings.ROUNDING_DECIMALS)

    def build_priced_treatment(self, request) -> PricedTreatment:
        """
        Calculate and price one treatment.

        Args:
            request: TreatmentRequest or an equivalent dict

        Raises:
            ValueError: unknown product type or pricing method
            CalculationError: pricing method the product cannot supply a quantity for
            InvalidInputError: unusable measurement
        """
        if not isinstance(request, TreatmentRequest):
            request = TreatmentRequest.model_validate(request)

        calculator = get_calculator(request.product_type)
        record = calculator.parse_input(request.fields)
        result = calculator.calculate(record)
        quantities = calculator.billable_quantities(result)
        dimensions = calculator.pricing_dimensions(record, result)

        pricing = request.pricing
        method = normalize_pricing_method(pricing.pricing_method)
        steps = list(result.breakdown.steps)

        # --- Base price ---
        base_cost, base_expression = self._price_base(method, pricing, record, quantities, dimensions)
        base_cost = self._round(base_cost)
        steps.append(FormulaStep(label="Base cost", expression=base_expression, result=base_cost))

        # --- Manufacturing ---
        manufacturing_cost, manufacturing_expression = self._price_manufacturing(
            method, pricing.manufacturing, quantities, calculator.produces_linear_meters)
        manufacturing_cost = self._round(manufacturing_cost)
        if manufacturing_expression:
            steps.append(FormulaStep(
                label="Manufacturing", expression=manufacturing_expression, result=manufacturing_cost))

        # --- Options ---
        options_cost = 0.0
        for option in request.options:
            option_cost = self._round(self._price_option(option, base_cost, quantities, dimensions))
            options_cost += option_cost
            steps.append(FormulaStep(
                label="Option: %s" % option.name,
                expression="%s (%s)" % (n(option_cost), normalize_pricing_method(option.pricing_method).value),
                result=option_cost,
            ))
        options_cost = self._round(options_cost)

        cost_price = self._round(base_cost + manufacturing_cost + options_cost)
        steps.append(FormulaStep(
            label="Cost total",
            expression="%s (base) + %s (manufacturing) + %s (options)" % (
                n(base_cost), n(manufacturing_cost), n(options_cost)),
            result=cost_price,
        ))

        # --- Markup ---
        # Fabric, material and options carry the material markup; make-up carries labor
        candidates = self._markup_candidates(request, method)
        material = resolve_markup(
            self._for_component(candidates, CostComponent.MATERIAL),
            minimum=self.settings.MINIMUM_MARKUP,
        )
        labor = resolve_markup(
            self._for_component(candidates, CostComponent.LABOR),
            minimum=self.settings.MINIMUM_MARKUP,
        )

        base_selling = self._round(apply_markup(base_cost, material.percentage))
        options_selling = self._round(apply_markup(options_cost, material.percentage))
        manufacturing_selling = self._round(apply_markup(manufacturing_cost, labor.percentage))

        if manufacturing_cost == 0 or labor.percentage == material.percentage:
            markup_percentage = material.percentage
            markup_source = material.source
            selling_price = self._round(apply_markup(cost_price, markup_percentage))
            selling_expression = "%s x (1 + %s%%)" % (n(cost_price), n(markup_percentage))
            markup_expression = "%s%% (%s)" % (
                n(markup_percentage), markup_source.value if markup_source else "none")
        else:
            selling_price = self._round(base_selling + options_selling + manufacturing_selling)
            markup_percentage = 0.0
            if cost_price > 0:
                markup_percentage = round_to((selling_price - cost_price) / cost_price * 100, 2)
            markup_source = min(
                (m.source for m in (material, labor) if m.source is not None),
                key=list(MarkupSource).index,
                default=None,
            )
            selling_expression = "%s x (1 + %s%%) + %s x (1 + %s%%)" % (
                n(self._round(base_cost + options_cost)), n(material.percentage),
                n(manufacturing_cost), n(labor.percentage))
            markup_expression = "material %s%% (%s), labor %s%% (%s)" % (
                n(material.percentage), material.source.value if material.source else "none",
                n(labor.percentage), labor.source.value if labor.source else "none")

        markup_amount = self._round(selling_price - cost_price)
        steps.append(FormulaStep(label="Markup", expression=markup_expression, result=markup_amount))
        steps.append(FormulaStep(label="Selling total", expression=selling_expression, result=selling_price))

        gross_margin = calculate_gross_margin(cost_price, selling_price)
        profit_status = get_profit_status(
            gross_margin,
            low_threshold=self.settings.PROFIT_LOW_THRESHOLD,
            good_threshold=self.settings.PROFIT_GOOD_THRESHOLD,
        )

        values = dict(result.breakdown.values)
        values.update({
            "base_cost": base_cost,
            "manufacturing_cost": manufacturing_cost,
            "options_cost": options_cost,
            "cost_price": cost_price,
            "material_markup_percentage": material.percentage,
            "labor_markup_percentage": labor.percentage,
            "markup_percentage": markup_percentage,
            "selling_price": selling_price,
            "gross_margin": gross_margin,
        })
        summary = "%s | cost %s + %s%% markup = %s" % (
            result.breakdown.summary, n(cost_price), n(markup_percentage), n(selling_price))

        logger.debug(
            "Priced %s: cost=%s markup=%s%% selling=%s margin=%s%% (%s)",
            request.product_type, cost_price, markup_percentage, selling_price,
            gross_margin, profit_status.value,
        )

        return PricedTreatment(
            product_type=request.product_type,
            measurement=result.model_dump(mode="json", exclude={"breakdown"}),
            linear_meters=quantities.get("linear_meters"),
            sqm=quantities.get("sqm"),
            base_cost=base_cost,
            manufacturing_cost=manufacturing_cost,
            options_cost=options_cost,
            cost_price=cost_price,
            base_selling=base_selling,
            manufacturing_selling=manufacturing_selling,
            options_selling=options_selling,
            material_markup_percentage=material.percentage,
            material_markup_source=material.source,
            labor_markup_percentage=labor.percentage,
            labor_markup_source=labor.source,
            markup_percentage=markup_percentage,
            markup_source=markup_source,
            markup_amount=markup_amount,
            selling_price=selling_price,
            gross_margin=gross_margin,
            profit_status=profit_status,
            breakdown=FormulaBreakdown(steps=steps, summary=summary, values=values),
            algorithm_version=self.settings.ALGORITHM_VERSION,
        )

    # --- Base price ---

    def _price_base(self, method, pricing, record, quantities, dimensions):
        """Returns (cost, expression) for the product itself."""
        if method == PricingMethod.PER_LINEAR_METER:
            meters = self._require(quantities, "linear_meters", method)
            return (price_per_running_meter(meters, pricing.unit_price),
                    "%sm x %s/m" % (n(meters), n(pricing.unit_price)))

        if method == PricingMethod.PER_SQM:
            sqm = self._require(quantities, "sqm", method)
            return (price_per_sqm(sqm, pricing.unit_price),
                    "%ssqm x %s/sqm" % (n(sqm), n(pricing.unit_price)))

        if method == PricingMethod.PER_DROP:
            cost = price_per_drop(record.drop_cm, pricing.drop_ranges, pricing.quantity)
            return cost, "%scm drop band x %s" % (n(record.drop_cm), n(pricing.quantity))

        if method == PricingMethod.PERCENTAGE:
            return (price_percentage(pricing.percentage_base, pricing.unit_price),
                    "%s%% of %s" % (n(pricing.unit_price), n(pricing.percentage_base)))

        if method == PricingMethod.PRICING_GRID:
            width, drop = dimensions
            price = lookup_grid_price(pricing.grid, width, drop)
            if price is None:
                logger.warning("No grid price for %scm x %scm, pricing at 0", n(width), n(drop))
                price = 0.0
            return price, "grid %scm x %scm" % (n(width), n(drop))

        return price_fixed(pricing.unit_price), "fixed %s" % n(pricing.unit_price)

    @staticmethod
    def _require(quantities: dict, name: str, method: PricingMethod) -> float:
        value = quantities.get(name)
        if value is None:
            raise CalculationError(
                "%s pricing needs %s, which this product does not produce" % (method.value, name))
        return value

    # --- Manufacturing ---

    def _price_manufacturing(self, method, manufacturing, quantities, linear: bool):
        """
        Returns (cost, expression). Expression is empty when no make-up rate is set.

        Curtains are made up per linear metre of fabric, area products per sqm.
        A grid price already includes make-up unless the grid says otherwise.
        """
        if manufacturing.hand_finished:
            rate, finish = manufacturing.hand_price_per_metre, "hand"
        else:
            rate, finish = manufacturing.machine_price_per_metre, "machine"
        if rate <= 0:
            return 0.0, ""

        if method == PricingMethod.PRICING_GRID and manufacturing.grid_includes_manufacturing:
            return 0.0, "included in grid price"

        if linear:
            meters = self._require(quantities, "linear_meters", method)
            return rate * meters, "%sm x %s/m (%s)" % (n(meters), n(rate), finish)
        sqm = self._require(quantities, "sqm", method)
        return rate * sqm, "%ssqm x %s/sqm (%s)" % (n(sqm), n(rate), finish)

    # --- Options ---

    def _price_option(self, option: OptionSelection, base_cost: float,
                      quantities: dict, dimensions) -> float:
        method = normalize_pricing_method(option.pricing_method)

        if method == PricingMethod.FIXED:
            return option.price * option.quantity

        if method == PricingMethod.PER_LINEAR_METER:
            meters = self._require(quantities, "linear_meters", method)
            return price_per_running_meter(meters, option.price) * option.quantity

        if method == PricingMethod.PER_SQM:
            sqm = self._require(quantities, "sqm", method)
            return price_per_sqm(sqm, option.price) * option.quantity

        if method == PricingMethod.PERCENTAGE:
            if base_cost <= 0:
                return 0.0
            return price_percentage(base_cost, option.price)

        if method == PricingMethod.PRICING_GRID:
            width, drop = dimensions
            price = lookup_grid_price(option.grid, width, drop)
            if price is None:
                logger.warning("Option %r has no grid price for %scm x %scm, using flat price",
                               option.name, n(width), n(drop))
                price = option.price
            return price * option.quantity

        raise CalculationError("Option %r: %s pricing is not supported for options"
                               % (option.name, method.value))

    # --- Markup ---

    def _markup_candidates(self, request: TreatmentRequest, method: PricingMethod) -> list:
        pricing = request.pricing
        candidates = list(request.markups)

        if method == PricingMethod.PRICING_GRID and pricing.grid_markup is not None:
            candidates.append(MarkupCandidate(source=MarkupSource.GRID, percentage=pricing.grid_markup))

        if pricing.list_cost_price is not None and pricing.list_selling_price is not None:
            candidates.append(MarkupCandidate(
                source=MarkupSource.IMPLIED,
                percentage=calculate_implied_markup(pricing.list_cost_price, pricing.list_selling_price),
            ))

        candidates.append(MarkupCandidate(
            source=MarkupSource.MATERIAL_LABOR_DEFAULT,
            percentage=self.settings.MATERIAL_MARKUP_DEFAULT,
            component=CostComponent.MATERIAL,
        ))
        candidates.append(MarkupCandidate(
            source=MarkupSource.MATERIAL_LABOR_DEFAULT,
            percentage=self.settings.LABOR_MARKUP_DEFAULT,
            component=CostComponent.LABOR,
        ))
        candidates.append(MarkupCandidate(
            source=MarkupSource.GLOBAL_DEFAULT,
            percentage=self.settings.GLOBAL_MARKUP_DEFAULT,
        ))
        return candidates

    @staticmethod
    def _for_component(candidates: list, component: CostComponent) -> list:
        """Candidates that price this component: untagged ones and ones tagged for it."""
        return [c for c in candidates if c.component is None or c.component == component]
