"""
Shared prompt management utilities.

This module provides:
- YAML-based prompt loading with caching and key validation (loader.py)
- Template filling and schema/tool extraction (base.py)

Usage:
    from shared.prompts import PromptLoader, format_prompt

    loader = PromptLoader(Path(__file__).parent)
    config = loader.load("recommendation")
    system_prompt, user_prompt = format_prompt(config, {"symbol": "TCS.NS"})
"""

from .base import format_prompt, get_model_parameters, get_response_schema, get_tool_definition
from .loader import PromptLoader

__all__ = [
    # Loader
    "PromptLoader",
    # Base utilities
    "format_prompt",
    "get_response_schema",
    "get_model_parameters",
    "get_tool_definition",
]
