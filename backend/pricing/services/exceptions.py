class PricingError(Exception):
    """Base exception for pricing engine errors"""
    pass


class ConfigurationError(PricingError):
    """Raised when the markup rules file cannot be loaded or parsed"""
    pass


class ValidationError(PricingError):
    """Raised when markup rules are present but inconsistent"""
    pass


class InvalidParkIdError(PricingError, ValueError):
    """Raised when a park-scoped selector is handed a malformed park id"""
    pass
