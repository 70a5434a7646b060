"""External service clients for Analysis Service."""

from .alpha_vantage_client import AlphaVantageClient, to_provider_symbol

__all__ = ["AlphaVantageClient", "to_provider_symbol"]
