"""Calculator error taxonomy.

Every calculator failure is a ``CalculatorError`` (itself a ``ValueError``) so
callers can catch the whole family at once; the ``code`` attribute is the
stable token exposed at the HTTP edge.
"""

from __future__ import annotations


class CalculatorError(ValueError):
    """Base class for all calculator failures."""

    code = "calculator_error"


class InvalidInputError(CalculatorError):
    """Caller input is malformed or out of range."""

    code = "invalid_input"


class InvalidDateError(InvalidInputError):
    """A calendar date could not be parsed."""

    code = "invalid_date"


class MissingRegionError(CalculatorError):
    """No region calendar was supplied for a planting-window lookup."""

    code = "missing_region"


class MissingMeasurementError(CalculatorError):
    """A soil measurement is absent or not numeric."""

    code = "missing_measurement"

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "soil measurement is missing or non-numeric for: " + ", ".join(self.missing)
        )


class EmptyVarietyError(CalculatorError):
    """A variety has no growth stages, so no timeline can be produced."""

    code = "empty_variety"
