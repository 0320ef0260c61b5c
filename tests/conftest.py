"""Shared fixtures for rebalancer tests."""

import pytest

from strategy_config import MarketCapConfig
from helpers import StaticMarketCapSource, make_paper_exchange


@pytest.fixture
def market_cap_source():
    """Market caps of the A/B scenario: A=300, B=700."""
    return StaticMarketCapSource({"A": 300.0, "B": 700.0})


@pytest.fixture
def strategy_config():
    """Two targets against USD, 20% reserved for USD, 5% dead band."""
    return MarketCapConfig(
        base_currency="USD",
        base_weight=0.2,
        target_currencies=["A", "B"],
        threshold=0.05,
    )


@pytest.fixture
def paper_exchange():
    """Paper exchange whose orders fill immediately."""
    return make_paper_exchange()


@pytest.fixture
def paper_exchange_no_fill():
    """Paper exchange whose orders stay open until cancelled."""
    return make_paper_exchange(auto_fill=False)
