"""In-memory exchange for paper trading and dry runs"""

import uuid
import logging
from typing import Callable, Dict, List, Optional

from exchange_connector_base import (
    ExchangeClient,
    Balance,
    Ticker,
    KLine,
    Subscription,
    SubmitOrder,
    CreatedOrder,
    OrderUpdate,
    OrderSide,
    OrderStatus,
    DataSourceError,
    OrderSinkError,
)


class PaperExchangeClient(ExchangeClient):
    """
    Exchange client backed by static prices and in-memory balances.

    With auto_fill enabled every submitted order fills immediately at its
    limit price. Otherwise orders stay open with their funds locked until
    they are cancelled.
    """

    def __init__(self, prices: Optional[Dict[str, float]] = None, balances: Optional[Dict[str, float]] = None,
                 auto_fill: bool = True, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.prices: Dict[str, float] = dict(prices or {})
        self.auto_fill = auto_fill
        self._available: Dict[str, float] = dict(balances or {})
        self._locked: Dict[str, float] = {}
        self._open_orders: Dict[str, CreatedOrder] = {}
        self._markets: Dict[str, tuple] = {}
        self._kline_callbacks: List[Callable[[KLine], None]] = []
        self._order_callbacks: List[Callable[[OrderUpdate], None]] = []
        self.subscriptions: List[Subscription] = []
        self.connected = False

    async def connect(self) -> bool:
        self.connected = True
        return True

    async def disconnect(self):
        self.connected = False

    def add_market(self, symbol: str, base: str, quote: str):
        """Register how a symbol splits into its base and quote currencies"""
        self._markets[symbol] = (base, quote)

    def set_price(self, symbol: str, price: float):
        self.prices[symbol] = price

    async def query_ticker(self, symbol: str) -> Ticker:
        price = self.prices.get(symbol)
        if price is None:
            raise DataSourceError(f"No price for symbol {symbol}")
        return Ticker(symbol=symbol, last=price, bid=price, ask=price)

    async def get_balances(self) -> Dict[str, Balance]:
        currencies = set(self._available) | set(self._locked)
        return {
            currency: Balance(
                currency=currency,
                available=self._available.get(currency, 0.0),
                total=self._available.get(currency, 0.0) + self._locked.get(currency, 0.0)
            )
            for currency in currencies
        }

    async def submit_orders(self, orders: List[SubmitOrder]) -> List[CreatedOrder]:
        # Reject the whole batch before any funds are locked
        for order in orders:
            if order.symbol not in self._markets:
                raise OrderSinkError(f"Unknown market {order.symbol}")

        created_orders = []
        for order in orders:
            created = CreatedOrder(
                order_id=str(uuid.uuid4()),
                symbol=order.symbol,
                side=order.side,
                type=order.type,
                quantity=order.quantity,
                price=order.price,
                status=OrderStatus.NEW
            )

            currency, amount = self._funding(created)
            if self._available.get(currency, 0.0) < amount:
                self.logger.warning(f"Rejected {order}: insufficient {currency}")
                created = created.model_copy(update={'status': OrderStatus.REJECTED})
                created_orders.append(created)
                self._emit_order_update(created)
                continue

            self._available[currency] = self._available.get(currency, 0.0) - amount
            self._locked[currency] = self._locked.get(currency, 0.0) + amount
            self._open_orders[created.order_id] = created
            created_orders.append(created)
            self.logger.info(f"Paper order {created.order_id} accepted: {order}")

        if self.auto_fill:
            created_orders = [
                self.fill_order(created.order_id) if created.order_id in self._open_orders else created
                for created in created_orders
            ]

        return created_orders

    async def cancel_orders(self, orders: List[CreatedOrder]):
        for order in orders:
            open_order = self._open_orders.pop(order.order_id, None)
            if open_order is None:
                raise OrderSinkError(f"Order {order.order_id} is not open")

            currency, amount = self._funding(open_order)
            self._locked[currency] -= amount
            self._available[currency] = self._available.get(currency, 0.0) + amount
            self._emit_order_update(open_order.model_copy(update={'status': OrderStatus.CANCELLED}))

    def fill_order(self, order_id: str) -> CreatedOrder:
        """Fill an open order at its limit price"""
        order = self._open_orders.pop(order_id)
        base, quote = self._markets[order.symbol]
        currency, amount = self._funding(order)
        self._locked[currency] -= amount

        if order.side == OrderSide.BUY:
            self._available[base] = self._available.get(base, 0.0) + order.quantity
        else:
            self._available[quote] = self._available.get(quote, 0.0) + order.quantity * order.price

        filled = order.model_copy(update={'status': OrderStatus.FILLED})
        self._emit_order_update(filled)
        return filled

    def open_orders(self) -> List[CreatedOrder]:
        return list(self._open_orders.values())

    async def subscribe(self, subscriptions: List[Subscription]):
        self.subscriptions.extend(subscriptions)

    def on_kline_closed(self, callback: Callable[[KLine], None]):
        self._kline_callbacks.append(callback)

    def on_order_update(self, callback: Callable[[OrderUpdate], None]):
        self._order_callbacks.append(callback)

    def emit_kline_closed(self, kline: KLine):
        for callback in self._kline_callbacks:
            callback(kline)

    def _funding(self, order: CreatedOrder) -> tuple:
        """Currency and amount an order holds while open"""
        base, quote = self._markets[order.symbol]
        if order.side == OrderSide.BUY:
            return quote, order.quantity * order.price
        return base, order.quantity

    def _emit_order_update(self, order: CreatedOrder):
        update = OrderUpdate(
            order_id=order.order_id,
            symbol=order.symbol,
            status=order.status,
            executed_quantity=order.quantity if order.status == OrderStatus.FILLED else 0.0
        )
        for callback in self._order_callbacks:
            callback(update)
