"""Shared AI clients.

Key clients:
- ClaudeClient: Claude API client returning schema-shaped tool input
"""

from .claude_client import ClaudeClient, ClaudeNotConfiguredError, StructuredOutputError

__all__ = [
    "ClaudeClient",
    "ClaudeNotConfiguredError",
    "StructuredOutputError",
]
