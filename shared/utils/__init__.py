"""
Shared utilities for P-Tool Analyst services

Contents:
- JSONFormatter: Structured JSON log formatter
- setup_logger: Root logger configuration for a service
"""

from .logging import JSONFormatter, setup_logger

__all__ = [
    "JSONFormatter",
    "setup_logger",
]
