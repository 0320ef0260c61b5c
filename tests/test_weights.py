"""Tests for target weight calculation."""

import math
from unittest.mock import AsyncMock

import pytest

from exchange_connector_base import DataSourceError
from rebalance_calculator import WeightCalculator
from helpers import StaticMarketCapSource


class TestTargetWeights:

    @pytest.mark.asyncio
    async def test_market_cap_scenario(self, market_cap_source):
        """A=300, B=700 with 20% base weight gives [0.24, 0.56, 0.2]."""
        calculator = WeightCalculator(market_cap_source)

        weights = await calculator.get_target_weights(["A", "B"], 0.2)

        assert weights == pytest.approx([0.24, 0.56, 0.2])
        assert math.isclose(sum(weights), 1.0, abs_tol=1e-9)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("base_weight", [0.0, 0.2, 0.5, 0.999])
    async def test_length_and_last_element(self, base_weight):
        """Output has one slot per target plus the base weight, exactly."""
        source = StaticMarketCapSource({"BTC": 1.2e12, "ETH": 4.1e11, "SOL": 7.5e10})
        calculator = WeightCalculator(source)

        weights = await calculator.get_target_weights(["BTC", "ETH", "SOL"], base_weight)

        assert len(weights) == 4
        assert weights[-1] == base_weight
        assert math.isclose(sum(weights), 1.0, abs_tol=1e-9)

    @pytest.mark.asyncio
    async def test_queries_in_target_order(self, market_cap_source):
        calculator = WeightCalculator(market_cap_source)

        await calculator.get_target_weights(["B", "A"], 0.0)

        assert market_cap_source.queried == ["B", "A"]

    @pytest.mark.asyncio
    async def test_first_failure_aborts(self):
        """A failed query stops the computation without querying the rest."""
        source = AsyncMock()
        source.query_market_cap_usd.side_effect = [100.0, DataSourceError("rate limited"), 300.0]
        calculator = WeightCalculator(source)

        with pytest.raises(DataSourceError, match="rate limited"):
            await calculator.get_target_weights(["A", "B", "C"], 0.1)

        assert source.query_market_cap_usd.await_count == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self):
        source = AsyncMock()
        source.query_market_cap_usd.side_effect = RuntimeError("socket closed")
        calculator = WeightCalculator(source)

        with pytest.raises(DataSourceError, match="market cap of A"):
            await calculator.get_target_weights(["A"], 0.0)

    @pytest.mark.asyncio
    async def test_zero_market_caps_fail(self):
        """Market caps summing to zero fail the cycle instead of producing weights."""
        calculator = WeightCalculator(StaticMarketCapSource({"A": 0.0, "B": 0.0}))

        with pytest.raises(DataSourceError, match="sum to zero"):
            await calculator.get_target_weights(["A", "B"], 0.2)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_value", [-1.0, float("nan"), float("inf")])
    async def test_invalid_market_cap_fails(self, bad_value):
        calculator = WeightCalculator(StaticMarketCapSource({"A": 10.0, "B": bad_value}))

        with pytest.raises(DataSourceError, match="Invalid market cap for B"):
            await calculator.get_target_weights(["A", "B"], 0.0)
