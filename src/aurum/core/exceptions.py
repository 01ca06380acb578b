"""
Aurum exception hierarchy.

All aurum exceptions inherit from AurumError, so callers can catch
application-level failures while still distinguishing specific ones.
"""


class AurumError(Exception):
    """Base exception class for all aurum errors."""


class ConfigurationError(AurumError):
    """Raised for configuration errors (missing keys, invalid values)."""


class APIError(AurumError):
    """Raised for API communication errors."""


class LLMError(APIError):
    """Raised for LLM API errors."""


class ExtractionError(LLMError):
    """Raised when the holdings-extraction call itself fails."""


class AnalysisError(LLMError):
    """Raised when the wealth-analysis call fails or returns an unusable result."""


class OperationInProgressError(AurumError):
    """Raised when an operation is started while the same kind is still in flight."""


class PortfolioDataError(AurumError):
    """Raised for persisted portfolio data that cannot be decoded."""
