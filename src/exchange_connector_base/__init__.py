from .base_client import ExchangeClient, MarketCapSource
from .base_strategy import BaseStrategy
from .models import (
    # Market data models
    Ticker,
    Balance,
    KLine,
    Subscription,
    # Order models
    OrderSide,
    OrderType,
    OrderStatus,
    SubmitOrder,
    CreatedOrder,
    OrderUpdate,
    # Rebalancing result models
    RebalanceResult,
)
from .exceptions import (
    RebalancerError,
    ConfigurationError,
    DataSourceError,
    OrderSinkError,
)

__version__ = "1.0.0"

__all__ = [
    "ExchangeClient",
    "MarketCapSource",
    "BaseStrategy",
    "Ticker",
    "Balance",
    "KLine",
    "Subscription",
    "OrderSide",
    "OrderType",
    "OrderStatus",
    "SubmitOrder",
    "CreatedOrder",
    "OrderUpdate",
    "RebalanceResult",
    "RebalancerError",
    "ConfigurationError",
    "DataSourceError",
    "OrderSinkError",
    "__version__",
]
