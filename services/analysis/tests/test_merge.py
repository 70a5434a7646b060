"""Tests for the merge engine."""

from decimal import Decimal

import pytest

from src.merge import merge, round_half_up


class TestLiveOverlay:
    """Tests for fields taken from the live provider."""

    def test_tcs_revenue_growth_fraction_to_percent(self, tcs_profile):
        merged = merge(tcs_profile, {"QuarterlyRevenueGrowthYOY": "0.131"}, {})

        assert merged.fundamental.revenue_growth == 13.1
        assert merged.live_fields == ("fundamental.revenue_growth",)

    def test_profit_margin_conversion(self, tcs_profile):
        merged = merge(tcs_profile, {"ProfitMargin": "0.158"}, {})

        assert merged.fundamental.profit_margin == 15.8

    def test_roe_and_debt_equity(self, tcs_profile):
        merged = merge(tcs_profile, {"ReturnOnEquityTTM": "0.5123", "DebtToEquity": "0.087"}, {})

        assert merged.fundamental.roe == 51.23
        assert merged.fundamental.debt_equity == 0.09

    def test_price_parsed_and_rounded(self, tcs_profile):
        merged = merge(tcs_profile, {}, {"Global Quote": {"05. price": "3912.4550"}})

        assert merged.stock.current_price == 3912.46

    def test_identity_fields(self, tcs_profile):
        merged = merge(
            tcs_profile,
            {"Name": "TATA CONSULTANCY", "Sector": "TECHNOLOGY", "MarketCapitalization": "14500000"},
            {},
        )

        assert merged.stock.name == "TATA CONSULTANCY"
        assert merged.stock.sector == "TECHNOLOGY"
        assert merged.stock.market_cap == 14500000
        assert merged.stock.symbol == "TCS.NS"
        assert set(merged.live_fields) == {"stock.name", "stock.sector", "stock.market_cap"}


class TestFallback:
    """Tests for baseline fallback."""

    def test_reliance_without_market_cap(self, reliance_profile):
        merged = merge(reliance_profile, {"MarketCapitalization": "None"}, {})

        assert merged.stock.market_cap == 1925000

    def test_empty_payloads_return_baseline(self, tcs_profile):
        merged = merge(tcs_profile, {}, {})

        assert merged.stock == tcs_profile.stock
        assert merged.fundamental == tcs_profile.fundamental
        assert merged.live_fields == ()

    def test_information_payload_returns_baseline(self, tcs_profile):
        info = {"Information": "demo key"}
        merged = merge(tcs_profile, info, info)

        assert merged.stock == tcs_profile.stock

    @pytest.mark.parametrize("raw", [None, "None", "-", "", "  ", "abc", "NaN", "Infinity", "-inf", [], True])
    def test_unusable_values_fall_back(self, tcs_profile, raw):
        merged = merge(
            tcs_profile,
            {"ProfitMargin": raw, "MarketCapitalization": raw},
            {"Global Quote": {"05. price": raw}},
        )

        assert merged.fundamental.profit_margin == tcs_profile.fundamental.profit_margin
        assert merged.stock.market_cap == tcs_profile.stock.market_cap
        assert merged.stock.current_price == tcs_profile.stock.current_price

    def test_non_string_name_falls_back(self, tcs_profile):
        merged = merge(tcs_profile, {"Name": 42, "Sector": "None"}, {})

        assert merged.stock.name == tcs_profile.stock.name
        assert merged.stock.sector == tcs_profile.stock.sector

    def test_malformed_global_quote(self, tcs_profile):
        merged = merge(tcs_profile, {}, {"Global Quote": "unexpected"})

        assert merged.stock.current_price == tcs_profile.stock.current_price

    def test_baseline_values_are_not_rounded(self, profile_store):
        infy = profile_store.lookup("INFY.NS")
        merged = merge(infy, {}, {})

        assert merged.fundamental.debt_equity == 0.08
        assert merged.p_tool.score == 87.1

    def test_untouched_sub_records_carried_over(self, tcs_profile):
        merged = merge(tcs_profile, {"ProfitMargin": "0.2"}, {"Global Quote": {"05. price": "1"}})

        assert merged.p_tool == tcs_profile.p_tool
        assert merged.technical == tcs_profile.technical
        assert merged.forensic == tcs_profile.forensic
        assert merged.sentiment == tcs_profile.sentiment
        assert merged.peer == tcs_profile.peer
        assert merged.macro == tcs_profile.macro
        assert merged.fundamental.is_sustainable == tcs_profile.fundamental.is_sustainable

    def test_baseline_is_not_mutated(self, tcs_profile):
        before = tcs_profile.model_copy(deep=True)
        merge(tcs_profile, {"ProfitMargin": "0.5"}, {})

        assert tcs_profile == before


class TestRoundHalfUp:
    """Tests for two-decimal half-up rounding."""

    @pytest.mark.parametrize(
        "value, expected",
        [("1.005", 1.01), ("2.675", 2.68), ("-1.005", -1.01), ("13.1", 13.1), ("0", 0.0)],
    )
    def test_rounding(self, value, expected):
        assert round_half_up(Decimal(value)) == expected

    def test_numeric_payload_values(self, tcs_profile):
        """Providers occasionally send numbers instead of strings."""
        merged = merge(tcs_profile, {"ProfitMargin": 0.241, "MarketCapitalization": 1400000}, {})

        assert merged.fundamental.profit_margin == 24.1
        assert merged.stock.market_cap == 1400000
