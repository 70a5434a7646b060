"""Claude API client for structured analysis tasks.

Structured output is obtained by declaring a single tool whose input schema is
the expected response shape and forcing the model to call it. The tool input
is returned as a plain dict; validating it against a domain model is the
caller's job.

Note: This is a generic client. Business logic (prompts, schemas, result
models) lives in service-specific agents, not here.
"""

import logging
from typing import Any

from anthropic import AsyncAnthropic
from anthropic.types import MessageParam, ToolUseBlock

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class ClaudeNotConfiguredError(ValueError):
    """Raised when a call is attempted without an API key."""


class StructuredOutputError(ValueError):
    """Raised when the response carries no usable tool call."""


class ClaudeClient:
    """Client for Claude API integration."""

    def __init__(self, api_key: str | None = None, timeout: float = 120.0):
        """Initialize Claude client.

        Args:
            api_key: Anthropic API key. Without one the client stays
                     unconfigured and every call raises ClaudeNotConfiguredError.
            timeout: Request timeout in seconds
        """
        self.api_key = api_key

        if not self.api_key:
            logger.warning("Claude API key not configured")
            self.client = None
        else:
            self.client = AsyncAnthropic(api_key=self.api_key, timeout=timeout)

        self.default_model = DEFAULT_MODEL
        self.max_tokens = 4096

    @property
    def is_configured(self) -> bool:
        """Whether an API key was supplied."""
        return self.client is not None

    async def analyze_structured(
        self,
        prompt: str,
        tool: dict[str, Any],
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        system_prompt: str | None = None,
    ) -> dict[str, Any]:
        """Ask Claude for output matching a tool's input schema.

        Args:
            prompt: User prompt
            tool: Tool definition with ``name``, ``description`` and ``input_schema``
            model: Claude model to use (defaults to DEFAULT_MODEL)
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature; provider default when None
            system_prompt: Optional system prompt for context

        Returns:
            The tool input emitted by the model.

        Raises:
            ClaudeNotConfiguredError: If API key not configured
            StructuredOutputError: If the response has no matching tool call
            anthropic.APIError: If the API request fails
        """
        if not self.client:
            raise ClaudeNotConfiguredError("Claude API key not configured")

        model = model or self.default_model
        messages: list[MessageParam] = [{"role": "user", "content": prompt}]

        request: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens or self.max_tokens,
            "system": system_prompt or "You are a financial analysis expert.",
            "messages": messages,
            "tools": [tool],
            "tool_choice": {"type": "tool", "name": tool["name"]},
        }
        if temperature is not None:
            request["temperature"] = temperature

        logger.info(
            f"Calling Claude API: model={model}, tool={tool['name']}, "
            f"prompt_length={len(prompt)}"
        )

        try:
            response = await self.client.messages.create(**request)
        except Exception as e:
            logger.error(f"Claude API error: {e}")
            raise

        for block in response.content:
            if isinstance(block, ToolUseBlock) and block.name == tool["name"]:
                if not isinstance(block.input, dict):
                    raise StructuredOutputError(
                        f"Tool input is {type(block.input).__name__}, expected object"
                    )
                logger.info("Claude API call successful")
                return dict(block.input)

        raise StructuredOutputError(f"No '{tool['name']}' tool call in response")
