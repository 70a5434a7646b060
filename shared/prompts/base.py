"""
Helpers for turning a loaded prompt configuration into model inputs.

A prompt YAML may carry these top-level keys:

- ``system_prompt``: static instructions
- ``user_prompt_template``: ``str.format`` template filled per request
- ``response_schema``: JSON schema the model output must satisfy
- ``tool``: name/description of the tool used to force structured output
- ``model_parameters``: model id, max_tokens, temperature
"""

from typing import Any


def format_prompt(
    config: dict[str, Any],
    variables: dict[str, Any],
) -> tuple[str, str]:
    """
    Fill a prompt template.

    Args:
        config: Loaded prompt configuration.
        variables: Template variables.

    Returns:
        Tuple of (system_prompt, user_prompt), both stripped.

    Raises:
        KeyError: If the template references a variable nobody supplied.
    """
    system_prompt = config.get("system_prompt", "")
    user_template = config.get("user_prompt_template", "")
    try:
        user_prompt = user_template.format(**variables)
    except KeyError as e:
        raise KeyError(
            f"Missing variable {e} in prompt template. "
            f"Available: {sorted(variables)}"
        ) from e

    return system_prompt.strip(), user_prompt.strip()


def get_response_schema(config: dict[str, Any]) -> dict[str, Any]:
    """JSON schema for structured output, or an empty dict."""
    return config.get("response_schema", {})


def get_model_parameters(config: dict[str, Any]) -> dict[str, Any]:
    """Model generation parameters (model, max_tokens, temperature...)."""
    return config.get("model_parameters", {})


def get_tool_definition(config: dict[str, Any]) -> dict[str, Any]:
    """
    Build a tool definition whose input schema is the response schema.

    Forcing the model to call this tool is how structured output is requested
    from providers that take a tool list.

    Raises:
        ValueError: If the config declares no response schema.
    """
    schema = get_response_schema(config)
    if not schema:
        raise ValueError("Prompt config declares no response_schema")

    tool = config.get("tool", {})
    return {
        "name": tool.get("name", "submit_result"),
        "description": tool.get("description", "Submit the structured result."),
        "input_schema": schema,
    }
