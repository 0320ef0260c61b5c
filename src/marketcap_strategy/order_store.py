"""In-memory store of the orders a strategy has open on the exchange"""

from typing import Dict, List, Optional
import logging
from exchange_connector_base import ExchangeClient, CreatedOrder, OrderUpdate, OrderStatus

class OrderStore:
    """Track created orders and drop them once the exchange reports them closed"""

    def __init__(self, remove_cancelled: bool = True, remove_filled: bool = True,
                 logger: Optional[logging.Logger] = None):
        self.remove_cancelled = remove_cancelled
        self.remove_filled = remove_filled
        self.logger = logger or logging.getLogger(__name__)
        self._orders: Dict[str, CreatedOrder] = {}

    def bind(self, exchange: ExchangeClient):
        """Follow order updates from the exchange user data stream"""
        exchange.on_order_update(self.handle_order_update)

    def add(self, *orders: CreatedOrder):
        for order in orders:
            self._orders[order.order_id] = order

    def remove(self, order_id: str) -> bool:
        return self._orders.pop(order_id, None) is not None

    def exists(self, order_id: str) -> bool:
        return order_id in self._orders

    def orders(self) -> List[CreatedOrder]:
        return list(self._orders.values())

    def __len__(self) -> int:
        return len(self._orders)

    def handle_order_update(self, update: OrderUpdate):
        order = self._orders.get(update.order_id)
        if order is None:
            return

        status = update.status.upper()
        if status == OrderStatus.CANCELLED:
            if self.remove_cancelled:
                self.remove(update.order_id)
                self.logger.debug(f"Order {update.order_id} ({update.symbol}) cancelled, removed from store")
            else:
                self._orders[update.order_id] = order.model_copy(update={'status': status})
        elif status == OrderStatus.FILLED and self.remove_filled:
            self.remove(update.order_id)
            self.logger.debug(f"Order {update.order_id} ({update.symbol}) filled, removed from store")
        elif status in (OrderStatus.REJECTED, OrderStatus.EXPIRED):
            self.remove(update.order_id)
            self.logger.debug(f"Order {update.order_id} ({update.symbol}) {status.lower()}, removed from store")
        else:
            self._orders[update.order_id] = order.model_copy(update={'status': status})
