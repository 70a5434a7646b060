"""Prompt templates and formatting for Analysis Service."""

from .formatter import (
    format_recommendation_prompt,
    get_recommendation_model_parameters,
    get_recommendation_tool,
    load_prompt,
)

__all__ = [
    "format_recommendation_prompt",
    "get_recommendation_model_parameters",
    "get_recommendation_tool",
    "load_prompt",
]
