from abc import ABC, abstractmethod
from typing import List, Optional
import logging
from .base_client import ExchangeClient
from .models import RebalanceResult, Subscription

class BaseStrategy(ABC):
    """Base strategy class with common functionality"""

    def __init__(self, exchange: ExchangeClient, logger: Optional[logging.Logger] = None):
        self.exchange = exchange
        self.logger = logger or logging.getLogger(__name__)

    @property
    @abstractmethod
    def id(self) -> str:
        """Strategy identifier used by the registry"""
        pass

    @abstractmethod
    def validate(self):
        """Check configuration invariants before the strategy starts"""
        pass

    def bind(self):
        """Attach to exchange streams before the first cycle"""
        pass

    @abstractmethod
    def subscriptions(self) -> List[Subscription]:
        """Market data subscriptions the strategy needs"""
        pass

    @abstractmethod
    async def rebalance(self) -> RebalanceResult:
        """Execute one rebalance cycle"""
        pass
