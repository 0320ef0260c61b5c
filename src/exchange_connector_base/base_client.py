from abc import ABC, abstractmethod
from typing import Callable, Dict, List
from .models import Balance, CreatedOrder, OrderUpdate, SubmitOrder, Subscription, Ticker, KLine

class MarketCapSource(ABC):
    """Abstract source of market capitalization figures"""

    @abstractmethod
    async def query_market_cap_usd(self, currency: str) -> float:
        """Get the current market cap of a currency in USD"""
        pass

class ExchangeClient(ABC):
    """Abstract base class for exchange API clients"""

    @abstractmethod
    async def connect(self) -> bool:
        """Establish connection to exchange"""
        pass

    @abstractmethod
    async def disconnect(self):
        """Close connection to exchange"""
        pass

    @abstractmethod
    async def query_ticker(self, symbol: str) -> Ticker:
        """Get the latest ticker for a symbol pair"""
        pass

    @abstractmethod
    async def get_balances(self) -> Dict[str, Balance]:
        """Get account balances keyed by currency"""
        pass

    @abstractmethod
    async def submit_orders(self, orders: List[SubmitOrder]) -> List[CreatedOrder]:
        """Submit a batch of orders"""
        pass

    @abstractmethod
    async def cancel_orders(self, orders: List[CreatedOrder]):
        """Cancel a batch of open orders"""
        pass

    @abstractmethod
    async def subscribe(self, subscriptions: List[Subscription]):
        """Subscribe to market data channels"""
        pass

    @abstractmethod
    def on_kline_closed(self, callback: Callable[[KLine], None]):
        """Register a callback for closed klines"""
        pass

    @abstractmethod
    def on_order_update(self, callback: Callable[[OrderUpdate], None]):
        """Register a callback for order updates"""
        pass
