"""Pydantic models for Analysis Service.

Baseline profiles, merged analyses and AI recommendations. Every enumerated
value is a closed StrEnum so invalid states cannot be constructed.
"""

from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

# Raw provider payloads. Values are untrusted until the merge parses them.
OverviewFields: TypeAlias = dict[str, Any]
QuoteFields: TypeAlias = dict[str, Any]


class PToolRating(StrEnum):
    """Rating band of the proprietary P-Tool score."""

    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    AVERAGE = "AVERAGE"
    POOR = "POOR"


class Sustainability(StrEnum):
    YES = "Yes"
    NO = "No"
    PARTIAL = "Partial"


class YesNo(StrEnum):
    YES = "Yes"
    NO = "No"


class MacdSignal(StrEnum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


class PriceTrend(StrEnum):
    UPTREND = "Uptrend"
    DOWNTREND = "Downtrend"
    SIDEWAYS = "Sideways"


class TechnicalSignal(StrEnum):
    STRONG_BUY = "STRONG BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    STRONG_SELL = "STRONG SELL"


class RiskLevel(StrEnum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Sentiment(StrEnum):
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"


class Outlook(StrEnum):
    """Directional outlook; also used for indicator impact."""

    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"


class IndicatorTrend(StrEnum):
    IMPROVING = "IMPROVING"
    DECLINING = "DECLINING"
    STABLE = "STABLE"


class MarketTrend(StrEnum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class Volatility(StrEnum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"


class RiskAppetite(StrEnum):
    RISK_ON = "RISK-ON"
    RISK_OFF = "RISK-OFF"
    NEUTRAL = "NEUTRAL"


class SectorTrend(StrEnum):
    STRONG = "STRONG"
    MODERATE = "MODERATE"
    STABLE = "STABLE"
    RECOVERY = "RECOVERY"
    TRANSITION = "TRANSITION"
    BOOMING = "BOOMING"


class SectorOutlookRating(StrEnum):
    VERY_POSITIVE = "VERY POSITIVE"
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"


class Recommendation(StrEnum):
    """Final recommendation label, declared from most to least bullish."""

    STRONG_BUY = "STRONG BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    REJECT = "REJECT"

    @property
    def bullishness(self) -> int:
        """4 for STRONG BUY down to 0 for REJECT."""
        members = list(type(self))
        return len(members) - 1 - members.index(self)


class InvestmentHorizon(StrEnum):
    SHORT_TERM = "Short Term (3-6mo)"
    MEDIUM_TERM = "Medium Term (6-12mo)"
    LONG_TERM = "Long Term (12+ mo)"


class PositionSize(StrEnum):
    CONSERVATIVE = "Conservative (1-3%)"
    MODERATE = "Moderate (3-5%)"
    AGGRESSIVE = "Aggressive (5-10%)"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class StockIdentity(_Record):
    """Identity and headline market data for a stock."""

    symbol: str = Field(description="Exchange-suffixed symbol, e.g. TCS.NS")
    name: str = Field(description="Company name")
    sector: str = Field(description="Sector classification")
    market_cap: float = Field(description="Market capitalization")
    current_price: float = Field(description="Current share price")


class PToolScore(_Record):
    """Proprietary composite score. Sourced from baseline only."""

    score: float = Field(ge=0, le=100, description="P-Tool score (0-100)")
    rating: PToolRating


class FundamentalMetrics(_Record):
    revenue_growth: float = Field(description="Revenue growth (%)")
    profit_margin: float = Field(description="Profit margin (%)")
    roe: float = Field(description="Return on equity (%)")
    debt_equity: float = Field(description="Debt to equity ratio")
    is_sustainable: Sustainability


class TechnicalMetrics(_Record):
    rsi: float = Field(ge=0, le=100, description="14-day RSI")
    macd_signal: MacdSignal
    trend: PriceTrend
    technical_signal: TechnicalSignal


class ForensicMetrics(_Record):
    risk_level: RiskLevel
    red_flags_count: int = Field(ge=0)
    issues_list: list[str]


class SentimentMetrics(_Record):
    sentiment: Sentiment
    news_count: int = Field(ge=0, description="Recent news articles")
    fraud_alerts: int = Field(ge=0)


class PeerMetrics(_Record):
    peer_growth_diff: float = Field(description="Revenue growth vs peers (percentage points)")
    valuation_premium: float = Field(description="Valuation premium vs peers (%)")
    growth_real: YesNo


class EconomicIndicator(_Record):
    value: str | float
    trend: IndicatorTrend
    impact: Outlook


class EconomicIndicators(_Record):
    gdp_growth: EconomicIndicator
    inflation_rate: EconomicIndicator
    manufacturing_pmi: EconomicIndicator


class MarketConditions(_Record):
    trend: MarketTrend
    volatility: Volatility
    sentiment: RiskAppetite


class SectorOutlook(_Record):
    trend: SectorTrend
    outlook: SectorOutlookRating
    drivers: list[str]


class MacroAnalysis(_Record):
    macro_outlook: Outlook
    economic_indicators: EconomicIndicators
    market_conditions: MarketConditions
    sector_outlook: SectorOutlook


class AnalysisProfile(_Record):
    """Baseline analysis record for one symbol."""

    stock: StockIdentity
    p_tool: PToolScore
    fundamental: FundamentalMetrics
    technical: TechnicalMetrics
    forensic: ForensicMetrics
    sentiment: SentimentMetrics
    peer: PeerMetrics
    macro: MacroAnalysis


class MergedAnalysis(AnalysisProfile):
    """Baseline profile with live provider fields overlaid."""

    live_fields: tuple[str, ...] = Field(
        default=(), description="Merged fields whose value came from the live provider"
    )


class RecommendationResult(BaseModel):
    """Structured investment recommendation from the AI model.

    Validated strictly: no type coercion, every field required.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    recommendation: Recommendation
    confidence_score: float = Field(ge=0, le=100)
    key_reasoning: list[str] = Field(min_length=1)
    strengths: list[str] = Field(min_length=1)
    risks: list[str] = Field(min_length=1)
    target_price: str
    stop_loss: str
    investment_horizon: InvestmentHorizon
    position_size: PositionSize
