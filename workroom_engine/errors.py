"""
Exception types raised by the calculation engine.

Two kinds of failure exist:
- CalculationError: the product cannot be priced the way it is configured
  (e.g. a per-sqm option attached to a curtain).
- InvalidInputError: a measurement or parameter is zero, negative, NaN or
  non-finite where the formula needs a usable number.

Unresolvable lookups (unpriced drop band, grid miss) are NOT errors. Those
return 0 / None so one unpriced line never aborts a whole quote.
"""


class CalculationError(ValueError):
    """A calculation could not be carried out with the given configuration."""


class InvalidInputError(CalculationError):
    """A numeric input failed validation. Message names the offending field."""

    def __init__(self, field: str, value, requirement: str):
        self.field = field
        self.value = value
        self.requirement = requirement
        super().__init__(
            "%s must be %s (got %r)" % (field, requirement, value)
        )
