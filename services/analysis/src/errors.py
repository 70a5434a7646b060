"""Error taxonomy for the analysis pipeline.

Every failure that can end an analysis request is an ``AnalysisError``.
Each class states whether resubmitting the same request may help
(``retryable``) and which HTTP status the API layer reports for it.
"""


class AnalysisError(Exception):
    """Base exception for analysis request failures."""

    retryable: bool = True
    status_code: int = 500

    def __init__(self, message: str, symbol: str | None = None):
        self.message = message
        self.symbol = symbol
        super().__init__(message)

    @property
    def error_type(self) -> str:
        """Stable name for API payloads."""
        return type(self).__name__

    def to_dict(self) -> dict[str, str | bool]:
        return {
            "error": self.error_type,
            "message": self.message,
            "retryable": self.retryable,
        }


class ProfileNotFound(AnalysisError):
    """No baseline profile exists for the symbol."""

    retryable = False
    status_code = 404

    def __init__(self, symbol: str):
        super().__init__(f'Stock analysis profile for "{symbol}" not found.', symbol=symbol)


class LiveDataError(AnalysisError):
    """Base class for live financial data provider failures."""

    status_code = 502


class ApiUnavailable(LiveDataError):
    """Transport failure, non-2xx status or unreadable body."""


class ProviderError(LiveDataError):
    """The provider answered with an ``Error Message`` payload."""

    def __init__(self, provider_message: str, symbol: str | None = None):
        self.provider_message = provider_message
        super().__init__(provider_message, symbol=symbol)


class RateLimited(LiveDataError):
    """The provider answered with a rate-limit ``Note``."""

    status_code = 429


class RecommendationError(AnalysisError):
    """Base class for recommendation provider failures."""

    status_code = 502


class AuthenticationFailed(RecommendationError):
    """Credentials for the recommendation provider are missing or rejected."""

    retryable = False
    status_code = 503


class RecommendationUnavailable(RecommendationError):
    """Transport or provider failure while requesting a recommendation."""


class MalformedRecommendation(RecommendationUnavailable):
    """The provider answered, but not with a valid structured recommendation."""
