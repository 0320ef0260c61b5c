from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"

class OrderType(str, Enum):
    LIMIT = "LIMIT"
    MARKET = "MARKET"

class OrderStatus:
    """Normalized order statuses across exchanges"""
    NEW = "NEW"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    FILLED = "FILLED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"

# Market data models
class Ticker(BaseModel):
    """Standardized ticker data"""
    symbol: str
    last: float
    bid: Optional[float] = None
    ask: Optional[float] = None

class Balance(BaseModel):
    """Balance of a single currency"""
    currency: str
    available: float = 0.0
    total: float = 0.0

class KLine(BaseModel):
    """Closed candle emitted by the market data stream"""
    symbol: str
    interval: str
    start_time: datetime
    end_time: datetime
    close: Optional[float] = None
    closed: bool = True

class Subscription(BaseModel):
    """Market data subscription request"""
    channel: str = "kline"
    symbol: str
    interval: str

# Order models
class SubmitOrder(BaseModel):
    """Order instruction generated by a strategy"""
    symbol: str
    side: OrderSide
    type: OrderType = OrderType.LIMIT
    quantity: float = Field(ge=0)
    price: float

    def __str__(self) -> str:
        return f"SubmitOrder {self.symbol} {self.side.value} {self.type.value} {self.quantity} @ {self.price}"

class CreatedOrder(BaseModel):
    """Order accepted by the exchange"""
    order_id: str
    symbol: str
    side: OrderSide
    type: OrderType = OrderType.LIMIT
    quantity: float
    price: float
    status: str = OrderStatus.NEW

class OrderUpdate(BaseModel):
    """Order status change pushed by the user data stream"""
    order_id: str
    symbol: str
    status: str
    executed_quantity: float = 0.0

# Rebalancing result models
class RebalanceResult(BaseModel):
    """Result of one rebalance cycle"""
    orders: List[SubmitOrder]
    created_orders: List[CreatedOrder] = Field(default_factory=list)
    cancelled_orders: List[CreatedOrder] = Field(default_factory=list)
    target_weights: List[float] = Field(default_factory=list)
    current_weights: List[float] = Field(default_factory=list)
    total_value: float = 0.0
    dry_run: bool = False
