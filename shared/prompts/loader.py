"""
Prompt loader for YAML-based prompt management.

Each service keeps its prompts as ``<name>.yaml`` files next to its formatter
module. The loader parses them once and keeps them in a process-wide cache.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Union

import yaml

logger = logging.getLogger(__name__)

# Key: "{prompts_dir}:{name}" -> parsed YAML mapping
_cache: dict[str, dict[str, Any]] = {}


class PromptLoader:
    """
    Loads, validates and caches prompt configurations from YAML files.

    Example:
        loader = PromptLoader(Path(__file__).parent)
        config = loader.load("recommendation", required=("user_prompt_template",))
        template = config["user_prompt_template"]
    """

    def __init__(self, prompts_dir: Union[Path, str]) -> None:
        self.prompts_dir = Path(prompts_dir)

    def load(
        self,
        name: str,
        use_cache: bool = True,
        required: Iterable[str] = (),
    ) -> dict[str, Any]:
        """
        Load a prompt configuration from YAML.

        Args:
            name: Prompt file name without extension.
            use_cache: Whether to reuse a previously parsed copy.
            required: Top-level keys that must be present.

        Returns:
            Parsed YAML content as dictionary.

        Raises:
            FileNotFoundError: If the prompt file doesn't exist.
            ValueError: If the file is not a mapping or lacks a required key.
            yaml.YAMLError: If YAML parsing fails.
        """
        cache_key = f"{self.prompts_dir}:{name}"

        if use_cache and cache_key in _cache:
            content = _cache[cache_key]
        else:
            content = self._read(name)
            if use_cache:
                _cache[cache_key] = content

        missing = [key for key in required if key not in content]
        if missing:
            raise ValueError(f"Prompt '{name}' is missing required keys: {', '.join(missing)}")

        return content

    def _read(self, name: str) -> dict[str, Any]:
        prompt_file = self.prompts_dir / f"{name}.yaml"

        if not prompt_file.exists():
            raise FileNotFoundError(f"Prompt file not found: {prompt_file}")

        logger.debug(f"Loading prompt from: {prompt_file}")

        with open(prompt_file, encoding="utf-8") as f:
            content = yaml.safe_load(f)

        if not isinstance(content, dict):
            raise ValueError(f"Prompt file {prompt_file} must contain a mapping")

        return content

