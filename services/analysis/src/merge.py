"""Merge Engine.

Overlays live Alpha Vantage fields onto a baseline analysis profile. The merge
is pure and total: any live value that is absent, a "no data" sentinel,
non-finite or unparseable falls back to the baseline value unchanged.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .models import AnalysisProfile, MergedAnalysis, OverviewFields, QuoteFields

# Alpha Vantage placeholders for "no data"
NO_DATA_SENTINELS = frozenset({"None", "-", ""})

_TWO_PLACES = Decimal("0.01")

# OVERVIEW key -> (fundamental field, scale). Fractions become percentages.
_FUNDAMENTAL_FIELDS: tuple[tuple[str, str, int], ...] = (
    ("QuarterlyRevenueGrowthYOY", "revenue_growth", 100),
    ("ProfitMargin", "profit_margin", 100),
    ("ReturnOnEquityTTM", "roe", 100),
    ("DebtToEquity", "debt_equity", 1),
)


def _parse_decimal(raw: Any) -> Decimal | None:
    """Parse a provider value, or None when it carries no usable number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if raw in NO_DATA_SENTINELS:
            return None
    elif not isinstance(raw, (int, float)):
        return None

    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _parse_text(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    return None if text in NO_DATA_SENTINELS else text


def round_half_up(value: Decimal) -> float:
    """Round to exactly two decimals, half away from zero."""
    return float(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def _live_number(raw: Any, scale: int = 1) -> float | None:
    value = _parse_decimal(raw)
    if value is None:
        return None
    result = round_half_up(value * scale)
    return result if math.isfinite(result) else None


def merge(
    baseline: AnalysisProfile,
    overview: OverviewFields,
    quote: QuoteFields,
) -> MergedAnalysis:
    """Merge live provider fields into the baseline profile.

    Only stock identity (name, sector, market cap, price) and four fundamental
    metrics are touched; every other sub-record is carried over as-is.

    Args:
        baseline: Baseline profile for the symbol
        overview: Raw OVERVIEW payload (may be empty)
        quote: Raw GLOBAL_QUOTE payload (may be empty)

    Returns:
        Merged analysis with ``live_fields`` naming the fields taken live.
    """
    overview = overview if isinstance(overview, dict) else {}
    global_quote = quote.get("Global Quote") if isinstance(quote, dict) else None
    if not isinstance(global_quote, dict):
        global_quote = {}

    live_fields: list[str] = []
    stock_updates: dict[str, Any] = {}
    fundamental_updates: dict[str, Any] = {}

    live_values = (
        ("name", _parse_text(overview.get("Name"))),
        ("sector", _parse_text(overview.get("Sector"))),
        ("market_cap", _live_number(overview.get("MarketCapitalization"))),
        ("current_price", _live_number(global_quote.get("05. price"))),
    )
    for field, value in live_values:
        if value is not None:
            stock_updates[field] = value
            live_fields.append(f"stock.{field}")

    for key, field, scale in _FUNDAMENTAL_FIELDS:
        value = _live_number(overview.get(key), scale)
        if value is not None:
            fundamental_updates[field] = value
            live_fields.append(f"fundamental.{field}")

    return MergedAnalysis(
        stock=baseline.stock.model_copy(update=stock_updates),
        p_tool=baseline.p_tool,
        fundamental=baseline.fundamental.model_copy(update=fundamental_updates),
        technical=baseline.technical,
        forensic=baseline.forensic,
        sentiment=baseline.sentiment,
        peer=baseline.peer,
        macro=baseline.macro,
        live_fields=tuple(live_fields),
    )
