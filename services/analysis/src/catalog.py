"""Dashboard catalog: available stocks, curated top picks and headline stats."""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .models import Recommendation, StockIdentity
from .profile_store import ProfileStore

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 85.0


class TopPick(StockIdentity):
    """Stock identity with its P-Tool score and curated recommendation."""

    ptool_score: float = Field(ge=0, le=100)
    recommendation: Recommendation


class DashboardStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    stocks_analyzed: int = Field(ge=0)
    buy_signals: int = Field(ge=0)
    avg_ptool_score: float = Field(ge=0, le=100)
    red_flags: int = Field(ge=0)


class Catalog:
    """Read-only views over the profile store and dashboard data."""

    def __init__(self, store: ProfileStore, top_picks: list[TopPick], stats: DashboardStats):
        self.store = store
        self._top_picks = top_picks
        self._stats = stats

    @classmethod
    def from_yaml(cls, store: ProfileStore, path: Path | str) -> "Catalog":
        """Load dashboard data; pick identities are resolved from the store.

        Raises:
            ProfileNotFound: If a top pick has no profile.
        """
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)

        if not isinstance(content, dict):
            raise ValueError(f"{path} must contain a mapping")

        picks = []
        for raw in content.get("top_picks", []):
            identity = store.lookup(raw["symbol"]).stock
            picks.append(
                TopPick(
                    **identity.model_dump(),
                    ptool_score=raw["ptool_score"],
                    recommendation=raw["recommendation"],
                )
            )

        stats = DashboardStats.model_validate(content["stats"])
        logger.info(f"Loaded dashboard catalog: {len(picks)} top picks")
        return cls(store, picks, stats)

    def available_stocks(self) -> list[StockIdentity]:
        return [profile.stock for profile in self.store.profiles()]

    def top_picks(
        self,
        min_score: float = DEFAULT_MIN_SCORE,
        sector: str | None = None,
        recommendation: Recommendation | None = None,
    ) -> list[TopPick]:
        """Filter curated picks, highest P-Tool score first.

        Args:
            min_score: Minimum P-Tool score (inclusive)
            sector: Exact sector match, or None for all sectors
            recommendation: Exact recommendation match, or None for all
        """
        picks = [
            pick
            for pick in self._top_picks
            if pick.ptool_score >= min_score
            and (sector is None or pick.sector == sector)
            and (recommendation is None or pick.recommendation == recommendation)
        ]
        return sorted(picks, key=lambda pick: pick.ptool_score, reverse=True)

    def dashboard_stats(self) -> DashboardStats:
        return self._stats

    def sectors(self) -> list[str]:
        """Distinct sectors in profile order."""
        return list(dict.fromkeys(profile.stock.sector for profile in self.store.profiles()))
