"""Analysis Profile Store.

Read-only table of baseline analysis profiles keyed by canonical symbol.
Profiles are loaded from YAML and validated once; lookups never mutate.
"""

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import ValidationError

from .errors import ProfileNotFound
from .models import AnalysisProfile

logger = logging.getLogger(__name__)


def canonical_symbol(symbol: str) -> str:
    """Normalize user input to the table key format (``TCS.NS``)."""
    return symbol.strip().upper()


class ProfileStore:
    """In-memory baseline profiles."""

    def __init__(self, profiles: Iterable[AnalysisProfile]):
        self._profiles: dict[str, AnalysisProfile] = {}
        for profile in profiles:
            key = canonical_symbol(profile.stock.symbol)
            if key in self._profiles:
                raise ValueError(f"Duplicate profile for {key}")
            self._profiles[key] = profile

    @classmethod
    def from_yaml(cls, path: Path | str) -> "ProfileStore":
        """Load profiles from a YAML file with a top-level ``profiles`` mapping.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the file is malformed or a profile fails validation.
        """
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            content: Any = yaml.safe_load(f)

        if not isinstance(content, dict) or not isinstance(content.get("profiles"), dict):
            raise ValueError(f"{path} must contain a 'profiles' mapping")

        profiles = []
        for key, raw in content["profiles"].items():
            try:
                profile = AnalysisProfile.model_validate(raw)
            except ValidationError as e:
                raise ValueError(f"Invalid profile {key} in {path}: {e}") from e
            if canonical_symbol(key) != canonical_symbol(profile.stock.symbol):
                raise ValueError(f"Profile key {key} does not match symbol {profile.stock.symbol}")
            profiles.append(profile)

        logger.info(f"Loaded {len(profiles)} analysis profiles from {path.name}")
        return cls(profiles)

    def lookup(self, symbol: str) -> AnalysisProfile:
        """Return the baseline profile for a symbol.

        Raises:
            ProfileNotFound: If no profile exists. Not retryable.
        """
        key = canonical_symbol(symbol)
        profile = self._profiles.get(key)
        if profile is None:
            raise ProfileNotFound(key)
        return profile

    def symbols(self) -> list[str]:
        return list(self._profiles)

    def profiles(self) -> list[AnalysisProfile]:
        return list(self._profiles.values())

    def __contains__(self, symbol: str) -> bool:
        return canonical_symbol(symbol) in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)
