"""Custom exceptions for the contract calculators.

Kept in one module so the core, the validation layer and the API can
share them without circular imports.
"""

from decimal import Decimal


class CalculatorError(Exception):
    """Base exception for all calculator errors."""


class ValidationError(CalculatorError):
    """Raised when one or more input fields are missing or out of range.

    Attributes:
        errors: Mapping of field name to a human-readable message. Every
            violated field is present, not just the first one found.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid input for: {fields}")


class InvalidAddPriceError(CalculatorError):
    """Raised when a martingale add step would be placed at a price <= 0.

    The run loop treats this as a partial result: steps accepted before
    ``step`` are kept, no later step is produced.
    """

    def __init__(self, step: int, add_price: Decimal) -> None:
        self.step = step
        self.add_price = add_price
        super().__init__(
            f"Add price for step {step} is not positive ({add_price}); "
            "no further adds can be placed"
        )
