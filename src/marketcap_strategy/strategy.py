"""Market cap weighted rebalancing strategy"""

from typing import List, Optional
import logging

from exchange_connector_base import (
    BaseStrategy,
    ExchangeClient,
    MarketCapSource,
    RebalanceResult,
    Subscription,
    SubmitOrder,
    CreatedOrder,
    DataSourceError,
    OrderSinkError,
    OrderStatus,
)
from strategy_config import MarketCapConfig, validate_strategy_config
from rebalance_calculator import OrderCalculator, WeightCalculator, SnapshotBuilder, PortfolioSnapshot, normalize
from .order_store import OrderStore

ID = "marketcap"

OPEN_STATUSES = (OrderStatus.NEW, OrderStatus.PARTIALLY_FILLED)


class MarketCapStrategy(BaseStrategy):
    """Rebalance a portfolio toward market cap weights on every interval close"""

    def __init__(self, config: MarketCapConfig, exchange: ExchangeClient, market_cap_source: MarketCapSource,
                 logger: Optional[logging.Logger] = None):
        super().__init__(exchange, logging.LoggerAdapter(logger or logging.getLogger(__name__), {'strategy': ID}))
        self.config = config
        self.market_cap_source = market_cap_source
        self.order_store = OrderStore(remove_cancelled=True, logger=self.logger)
        self.weight_calculator = WeightCalculator(market_cap_source, logger=self.logger)
        self.snapshot_builder = SnapshotBuilder(exchange, logger=self.logger)
        self.order_calculator = OrderCalculator(
            threshold=config.threshold,
            max_amount=config.max_amount,
            verbose=config.verbose,
            logger=self.logger
        )
        self._detail_level = logging.INFO if config.verbose else logging.DEBUG

    @property
    def id(self) -> str:
        return ID

    def validate(self):
        validate_strategy_config(
            self.config.target_currencies,
            self.config.base_currency,
            self.config.threshold,
            self.config.max_amount,
        )

    def subscriptions(self) -> List[Subscription]:
        return [
            Subscription(symbol=symbol, interval=self.config.interval.value)
            for symbol in self.config.symbols()
        ]

    def bind(self):
        """Start following order updates for the orders this strategy creates"""
        self.order_store.bind(self.exchange)

    async def rebalance(self) -> RebalanceResult:
        """
        Execute one rebalance cycle.

        Open orders from the previous cycle are cancelled first. Any failure
        aborts the cycle before a single new order is submitted.

        Raises:
            OrderSinkError: If cancelling or submitting orders fails
            DataSourceError: If market cap, price or balance queries fail
        """
        cancelled_orders = await self._cancel_open_orders()

        target_weights = await self.weight_calculator.get_target_weights(
            self.config.target_currencies,
            self.config.base_weight
        )

        try:
            balances = await self.exchange.get_balances()
        except DataSourceError:
            raise
        except Exception as e:
            raise DataSourceError(f"Failed to query balances: {e}") from e

        snapshot = await self.snapshot_builder.build(
            self.config.target_currencies,
            self.config.base_currency,
            balances,
            self.config.ignore_locked
        )

        self._log_assets(snapshot)

        result = self.order_calculator.generate_orders(
            self.config.target_currencies,
            self.config.base_currency,
            snapshot.prices,
            snapshot.market_values,
            target_weights
        )
        orders = result.orders
        for order in orders:
            self.logger.info(f"generated submit order: {order}")

        rebalance_result = RebalanceResult(
            orders=orders,
            cancelled_orders=cancelled_orders,
            target_weights=target_weights,
            current_weights=result.current_weights,
            total_value=result.total_value,
            dry_run=self.config.dry_run
        )

        if self.config.dry_run:
            self.logger.info(f"Dry run, skipping submission of {len(orders)} orders")
            return rebalance_result

        if orders:
            created_orders = await self._submit_orders(orders)
            self.order_store.add(*[o for o in created_orders if o.status in OPEN_STATUSES])
            rebalance_result.created_orders = created_orders

        return rebalance_result

    async def _cancel_open_orders(self) -> List[CreatedOrder]:
        """Cancel every order still open from previous cycles"""
        open_orders = self.order_store.orders()
        if not open_orders:
            return []

        self.logger.info(f"Cancelling {len(open_orders)} open orders")
        try:
            await self.exchange.cancel_orders(open_orders)
        except OrderSinkError:
            raise
        except Exception as e:
            raise OrderSinkError(f"Failed to cancel open orders: {e}") from e

        for order in open_orders:
            self.order_store.remove(order.order_id)
        return open_orders

    async def _submit_orders(self, orders: List[SubmitOrder]) -> List[CreatedOrder]:
        try:
            created_orders = await self.exchange.submit_orders(orders)
        except OrderSinkError:
            raise
        except Exception as e:
            raise OrderSinkError(f"Failed to submit orders: {e}") from e

        self.logger.info(f"Submitted {len(created_orders)} orders")
        return created_orders

    def _log_assets(self, snapshot: PortfolioSnapshot):
        """Log current weight and quantity of every tracked currency"""
        if len(snapshot.market_values) - 1 != len(self.config.target_currencies):
            raise ValueError(
                f"Snapshot has {len(snapshot.market_values)} market values "
                f"for {len(self.config.target_currencies)} target currencies"
            )

        try:
            weights = normalize(snapshot.market_values)
        except ValueError:
            self.logger.warning("Portfolio holds no value in any tracked currency")
            return

        for i, asset in enumerate(self.config.target_currencies):
            self.logger.log(
                self._detail_level,
                f"asset: {asset}, weight: {weights[i] * 100:.2f}%, qty: {snapshot.quantities[i]}"
            )

        self.logger.log(
            self._detail_level,
            f"base currency: {self.config.base_currency}, weight: {weights[-1] * 100:.2f}%, "
            f"qty: {snapshot.quantities[-1]}"
        )
