"""Order generation by proportional rebalancing toward target weights"""

from typing import List, Optional, Sequence
import logging
import math
from exchange_connector_base import SubmitOrder, OrderSide, OrderType
from .models import OrderCalculationResult
from .vectors import normalize, vector_sum


def adjust_quantity_by_max_amount(quantity: float, price: float, max_amount: float) -> float:
    """Reduce quantity so that quantity * price does not exceed max_amount"""
    if quantity * price <= max_amount:
        return quantity

    quantity = max_amount / price
    while quantity > 0 and quantity * price > max_amount:
        quantity = math.nextafter(quantity, 0.0)
    return quantity


class OrderCalculator:
    """Calculate the orders needed to move current weights toward target weights"""

    def __init__(self, threshold: float = 0.0, max_amount: float = 0.0, verbose: bool = False,
                 logger: Optional[logging.Logger] = None):
        self.threshold = threshold
        self.max_amount = max_amount
        self.detail_level = logging.INFO if verbose else logging.DEBUG
        self.logger = logger or logging.getLogger(__name__)

    def generate_orders(self, target_currencies: Sequence[str], base_currency: str,
                        prices: Sequence[float], market_values: Sequence[float],
                        target_weights: Sequence[float]) -> OrderCalculationResult:
        """
        Emit one limit order per target currency whose weight is off by at least the threshold.

        All vectors hold len(target_currencies) + 1 entries with the base
        currency last. The base currency never gets an order.
        """
        expected = len(target_currencies) + 1
        for name, vector in (("prices", prices), ("market values", market_values),
                             ("target weights", target_weights)):
            if len(vector) != expected:
                raise ValueError(f"Expected {expected} {name}, got {len(vector)}")

        total_value = vector_sum(market_values)
        if total_value == 0:
            self.logger.warning("Portfolio market value is zero, no orders can be generated")
            return OrderCalculationResult(orders=[], current_weights=[], total_value=0.0)

        current_weights = normalize(market_values)
        orders = []

        for i, currency in enumerate(target_currencies):
            symbol = currency + base_currency
            current_weight = current_weights[i]
            current_price = prices[i]
            target_weight = target_weights[i]

            self.logger.log(
                self.detail_level,
                f"{symbol} price: {current_price}, current weight: {current_weight:.4f}, "
                f"target weight: {target_weight:.4f}"
            )

            # Dead band: skip assets already close enough to target
            weight_difference = target_weight - current_weight
            if abs(weight_difference) < self.threshold:
                self.logger.info(
                    f"{symbol} weight distance |{target_weight:.4f} - {current_weight:.4f}| = "
                    f"{abs(weight_difference):.4f} less than the threshold: {self.threshold}"
                )
                continue

            quantity = (weight_difference * total_value) / current_price
            if quantity == 0:
                self.logger.debug(f"{symbol} needs no trade")
                continue

            side = OrderSide.BUY
            if quantity < 0:
                side = OrderSide.SELL
                quantity = abs(quantity)

            if self.max_amount > 0:
                quantity = adjust_quantity_by_max_amount(quantity, current_price, self.max_amount)
                self.logger.info(
                    f"adjust the quantity {quantity} ({symbol} {side.value} @ {current_price}) "
                    f"by max amount {self.max_amount}"
                )

            if quantity <= 0:
                self.logger.debug(f"{symbol} quantity reduced to zero, skipping")
                continue

            orders.append(SubmitOrder(
                symbol=symbol,
                side=side,
                type=OrderType.LIMIT,
                quantity=quantity,
                price=current_price
            ))

        return OrderCalculationResult(orders=orders, current_weights=current_weights, total_value=total_value)
