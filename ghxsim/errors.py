class ConfigurationError(ValueError):
    """Invalid or inconsistent exchanger configuration. Fatal."""


class GHELookupError(LookupError):
    """An exchanger instance could not be resolved by name or index. Fatal."""
