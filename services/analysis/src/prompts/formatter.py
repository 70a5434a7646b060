"""
Prompt formatting utilities for the recommendation agent.

Renders a merged analysis into the recommendation prompt and exposes the
tool definition and model parameters declared in the YAML template.
"""

from pathlib import Path
from typing import Any

from shared.prompts import PromptLoader, format_prompt, get_model_parameters, get_tool_definition

from ..models import MergedAnalysis

RECOMMENDATION_PROMPT = "recommendation"

# Create a loader for this service's prompts directory
_loader = PromptLoader(Path(__file__).parent)


def load_prompt(name: str) -> dict[str, Any]:
    """Load a prompt configuration from YAML."""
    return _loader.load(name, required=("user_prompt_template", "response_schema"))


def format_number(value: float | int) -> str:
    """Render a number without a trailing ``.0`` for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_signed(value: float | int) -> str:
    """Like format_number, with an explicit ``+`` for positive values."""
    text = format_number(value)
    return f"+{text}" if value > 0 else text


def recommendation_variables(merged: MergedAnalysis) -> dict[str, str]:
    """Template variables for the recommendation prompt, in section order."""
    stock = merged.stock
    fundamental = merged.fundamental
    technical = merged.technical
    forensic = merged.forensic
    sentiment = merged.sentiment
    peer = merged.peer
    macro = merged.macro

    return {
        # Identity
        "symbol": stock.symbol,
        "name": stock.name,
        "sector": stock.sector,
        # P-Tool
        "ptool_score": format_number(merged.p_tool.score),
        "ptool_rating": merged.p_tool.rating,
        # Fundamental
        "revenue_growth": format_number(fundamental.revenue_growth),
        "profit_margin": format_number(fundamental.profit_margin),
        "roe": format_number(fundamental.roe),
        "debt_equity": format_number(fundamental.debt_equity),
        "is_sustainable": fundamental.is_sustainable,
        # Technical
        "rsi": format_number(technical.rsi),
        "macd_signal": technical.macd_signal,
        "trend": technical.trend,
        "technical_signal": technical.technical_signal,
        # Forensic
        "risk_level": forensic.risk_level,
        "red_flags_count": str(forensic.red_flags_count),
        "issues": ", ".join(forensic.issues_list),
        # Sentiment
        "sentiment": sentiment.sentiment,
        "news_count": str(sentiment.news_count),
        "fraud_alerts": str(sentiment.fraud_alerts),
        # Peer
        "peer_growth_diff": format_signed(peer.peer_growth_diff),
        "valuation_premium": format_number(peer.valuation_premium),
        "growth_real": peer.growth_real,
        # Macro
        "macro_outlook": macro.macro_outlook,
        "sector_trend": macro.sector_outlook.trend,
        "sector_drivers": ", ".join(macro.sector_outlook.drivers),
    }


def format_recommendation_prompt(merged: MergedAnalysis) -> tuple[str, str]:
    """
    Format the recommendation prompt for a merged analysis.

    The output is deterministic: the same record always yields the same text.

    Args:
        merged: Merged analysis record

    Returns:
        Tuple of (system_prompt, user_prompt)
    """
    config = load_prompt(RECOMMENDATION_PROMPT)
    return format_prompt(config, recommendation_variables(merged))


def get_recommendation_tool() -> dict[str, Any]:
    """Tool definition whose input schema is the recommendation schema."""
    return get_tool_definition(load_prompt(RECOMMENDATION_PROMPT))


def get_recommendation_model_parameters() -> dict[str, Any]:
    """Model id, max_tokens and temperature for the recommendation call."""
    return get_model_parameters(load_prompt(RECOMMENDATION_PROMPT))
