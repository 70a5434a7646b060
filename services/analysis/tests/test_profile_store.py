"""Tests for the analysis profile store."""

import pytest

from src.errors import ProfileNotFound
from src.models import RiskAppetite, SectorOutlookRating
from src.profile_store import ProfileStore


class TestLookup:
    """Tests for ProfileStore.lookup."""

    def test_lookup_known_symbol(self, profile_store):
        profile = profile_store.lookup("TCS.NS")

        assert profile.stock.name == "Tata Consultancy Services"
        assert profile.p_tool.score == 89.3
        assert profile.fundamental.revenue_growth == 12.5

    def test_lookup_is_case_insensitive_and_trimmed(self, profile_store):
        assert profile_store.lookup("  reliance.ns ") == profile_store.lookup("RELIANCE.NS")

    def test_unknown_symbol_raises(self, profile_store):
        with pytest.raises(ProfileNotFound) as exc_info:
            profile_store.lookup("WIPRO.NS")

        assert exc_info.value.retryable is False
        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == 'Stock analysis profile for "WIPRO.NS" not found.'

    def test_contains(self, profile_store):
        assert "infy.ns" in profile_store
        assert "WIPRO.NS" not in profile_store


class TestBaselineTable:
    """Tests for the shipped baseline data."""

    def test_six_profiles(self, profile_store):
        assert len(profile_store) == 6
        assert profile_store.symbols() == [
            "RELIANCE.NS",
            "TCS.NS",
            "INFY.NS",
            "HDFCBANK.NS",
            "ICICIBANK.NS",
            "BAJFINANCE.NS",
        ]

    def test_sector_macro_blocks_are_shared(self, profile_store):
        tcs = profile_store.lookup("TCS.NS")
        infy = profile_store.lookup("INFY.NS")

        assert tcs.macro == infy.macro
        assert tcs.macro.sector_outlook.drivers == ["Digital transformation", "Cloud adoption", "AI/ML demand"]

    def test_macro_enums_parsed(self, profile_store):
        banking = profile_store.lookup("HDFCBANK.NS").macro

        assert banking.market_conditions.sentiment is RiskAppetite.RISK_ON
        assert banking.sector_outlook.outlook is SectorOutlookRating.VERY_POSITIVE
        assert banking.economic_indicators.manufacturing_pmi.value == 57.2
        assert banking.economic_indicators.gdp_growth.value == "6.8%"

    def test_forensic_issues(self, profile_store):
        bajaj = profile_store.lookup("BAJFINANCE.NS")

        assert bajaj.forensic.red_flags_count == 2
        assert bajaj.forensic.issues_list == ["High debt levels", "Aggressive loan provisioning"]


class TestFromYaml:
    """Tests for loading profiles from YAML."""

    def test_missing_profiles_mapping(self, tmp_path):
        path = tmp_path / "profiles.yaml"
        path.write_text("stocks: []\n")

        with pytest.raises(ValueError, match="'profiles' mapping"):
            ProfileStore.from_yaml(path)

    def test_invalid_profile_rejected(self, tmp_path):
        path = tmp_path / "profiles.yaml"
        path.write_text("profiles:\n  ABC.NS:\n    stock: {symbol: ABC.NS}\n")

        with pytest.raises(ValueError, match="Invalid profile ABC.NS"):
            ProfileStore.from_yaml(path)

    def test_duplicate_symbols_rejected(self, tcs_profile):
        with pytest.raises(ValueError, match="Duplicate profile"):
            ProfileStore([tcs_profile, tcs_profile])
