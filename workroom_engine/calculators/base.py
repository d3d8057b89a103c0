"""
Abstract base class for all product calculators.

Input: a product input record (or a plain fields dict validated into one)
Output: a result record carrying a FormulaBreakdown
"""

import logging
from abc import ABC, abstractmethod

from ..schemas import FormulaBreakdown, FormulaStep
from .units import round_to

logger = logging.getLogger(__name__)


class BreakdownBuilder:
    """
    Collects FormulaSteps and named values in calculation order.

    Quote renderers show the steps verbatim, so the order steps are added in
    is the order the customer reads them.
    """

    def __init__(self):
        self.steps = []
        self.values = {}

    def add(self, label: str, expression: str, result: float,
            unit: str = "", key: str = None) -> float:
        """Append one step and optionally record its result under `key`. Returns result."""
        self.steps.append(FormulaStep(
            label=label,
            expression=expression,
            result=result,
            unit=unit,
        ))
        if key:
            self.values[key] = result
        return result

    def record(self, key: str, value: float) -> float:
        """Record a named value without emitting a step."""
        self.values[key] = value
        return value

    def build(self, summary: str) -> FormulaBreakdown:
        return FormulaBreakdown(steps=list(self.steps), summary=summary, values=dict(self.values))


class BaseCalculator(ABC):
    """All product calculators inherit from this."""

    # Pydantic input record, set by each subclass
    input_model = None

    # True when the product is bought by the running meter (curtains)
    produces_linear_meters = False

    # Measurements are reported to 2 decimals
    DECIMALS = 2

    @abstractmethod
    def validate(self, data) -> None:
        """Raise InvalidInputError for any unusable measurement."""

    @abstractmethod
    def calculate(self, data):
        """
        Takes an input record or fields dict.
        Returns the product's result record, breakdown included.
        """

    # --- Helper methods for all calculators ---

    def parse_input(self, data):
        """Accept either the input record itself or a dict of fields."""
        if isinstance(data, self.input_model):
            return data
        return self.input_model.model_validate(data)

    def prepare(self, data):
        """parse_input + validate. Every calculate() starts here."""
        record = self.parse_input(data)
        self.validate(record)
        logger.debug("%s input: %s", type(self).__name__, record.model_dump())
        return record

    def round(self, value: float) -> float:
        return round_to(value, self.DECIMALS)

    def pricing_dimensions(self, record, result):
        """
        (width_cm, drop_cm) used for grid lookups and drop bands.
        Default is the raw rail width and drop. Hems are manufacturing
        allowances, not a bigger product size.
        """
        return record.rail_width_cm, record.drop_cm

    def billable_quantities(self, result) -> dict:
        """Linear meters and/or square meters this result can be priced by."""
        return {
            "linear_meters": getattr(result, "linear_meters", None),
            "sqm": getattr(result, "sqm", None),
        }
