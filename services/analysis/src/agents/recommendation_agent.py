"""Recommendation agent using Claude.

Turns a merged analysis into a strictly validated investment recommendation.
A failed request raises; there is never a synthetic default recommendation.
"""

import json
import logging

import anthropic
from pydantic import ValidationError

from shared.ai_clients import ClaudeClient, ClaudeNotConfiguredError, StructuredOutputError

from ..errors import AuthenticationFailed, MalformedRecommendation, RecommendationUnavailable
from ..models import MergedAnalysis, RecommendationResult
from ..prompts import (
    format_recommendation_prompt,
    get_recommendation_model_parameters,
    get_recommendation_tool,
)

logger = logging.getLogger(__name__)


class RecommendationAgent:
    """Claude-based final recommendation."""

    def __init__(self, claude_client: ClaudeClient):
        """Initialize Recommendation agent.

        Args:
            claude_client: Claude client instance
        """
        self.claude = claude_client

    async def recommend(self, merged: MergedAnalysis) -> RecommendationResult:
        """Request a recommendation for a merged analysis.

        Args:
            merged: Merged analysis record

        Returns:
            Validated recommendation

        Raises:
            AuthenticationFailed: Credentials missing or rejected
            RecommendationUnavailable: API or transport failure
            MalformedRecommendation: No tool call, or tool input fails validation
        """
        symbol = merged.stock.symbol
        system_prompt, user_prompt = format_recommendation_prompt(merged)
        tool = get_recommendation_tool()
        model_params = get_recommendation_model_parameters()

        logger.info(f"Requesting recommendation for {symbol}")

        try:
            payload = await self.claude.analyze_structured(
                prompt=user_prompt,
                tool=tool,
                model=model_params.get("model"),
                max_tokens=model_params.get("max_tokens"),
                temperature=model_params.get("temperature"),
                system_prompt=system_prompt,
            )
        except ClaudeNotConfiguredError as e:
            raise AuthenticationFailed(
                "The AI engine API key is not configured.", symbol=symbol
            ) from e
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise AuthenticationFailed(
                "The provided API key is invalid. Please check your configuration.",
                symbol=symbol,
            ) from e
        except anthropic.APIError as e:
            raise RecommendationUnavailable(
                "Failed to get a valid recommendation from the AI engine. "
                "Please try again later.",
                symbol=symbol,
            ) from e
        except StructuredOutputError as e:
            raise MalformedRecommendation(
                f"AI engine returned no structured recommendation: {e}", symbol=symbol
            ) from e

        try:
            # JSON-mode strict validation: enum values arrive as strings, nothing is coerced
            result = RecommendationResult.model_validate_json(json.dumps(payload))
        except ValidationError as e:
            logger.warning(f"Recommendation for {symbol} failed validation: {e.error_count()} errors")
            raise MalformedRecommendation(
                f"AI engine returned a malformed recommendation ({e.error_count()} invalid fields).",
                symbol=symbol,
            ) from e

        logger.info(
            f"Recommendation for {symbol}: {result.recommendation} "
            f"(confidence={result.confidence_score})"
        )
        return result
