"""AI agents for Analysis Service."""

from .recommendation_agent import RecommendationAgent

__all__ = ["RecommendationAgent"]
