"""Address verification: LLM parsing, USPS standardization and HERE geocoding."""

__version__ = "0.1.0"
