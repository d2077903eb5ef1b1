"""Pricing errors."""


class PricingError(Exception):
    """Base class for pricing failures."""


class ValidationError(PricingError):
    """Raised when calculator input or charge configuration is malformed."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")
