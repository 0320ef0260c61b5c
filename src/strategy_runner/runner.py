"""Runs strategy rebalance cycles on interval-close events"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional

from exchange_connector_base import (
    BaseStrategy,
    ExchangeClient,
    MarketCapSource,
    KLine,
    RebalanceResult,
    RebalancerError,
)
from strategy_config import AppConfig
from .registry import StrategyRegistry


def build_strategies(registry: StrategyRegistry, app_config: AppConfig, exchange: ExchangeClient,
                     market_cap_source: MarketCapSource) -> List[BaseStrategy]:
    """Instantiate every configured strategy through the registry"""
    return [
        registry.create(
            entry.id,
            config=entry.config,
            exchange=exchange,
            market_cap_source=market_cap_source
        )
        for entry in app_config.strategies
    ]


class StrategyRunner:
    """
    Binds strategies to the exchange market data stream.

    Each strategy runs at most one cycle per closed interval, and cycles of
    the same strategy never overlap. A failed cycle is logged and the
    strategy waits for the next interval close.
    """

    def __init__(self, strategies: List[BaseStrategy], exchange: ExchangeClient,
                 logger: Optional[logging.Logger] = None):
        self.strategies = strategies
        self.exchange = exchange
        self.logger = logger or logging.getLogger(__name__)
        self.running = False
        self._locks: Dict[int, asyncio.Lock] = {}
        self._last_triggered: Dict[int, datetime] = {}
        self._tasks = set()

    async def start(self):
        """
        Validate, bind and subscribe every strategy.

        Raises:
            ConfigurationError: If any strategy fails validation
        """
        for strategy in self.strategies:
            strategy.validate()

        await self.exchange.connect()

        for strategy in self.strategies:
            strategy.bind()
            await self.exchange.subscribe(strategy.subscriptions())
            self.logger.info(
                f"Strategy {strategy.id} subscribed to "
                f"{', '.join(s.symbol for s in strategy.subscriptions())}"
            )

        self.exchange.on_kline_closed(self._on_kline_closed)
        self.running = True
        self.logger.info(f"Runner started with {len(self.strategies)} strategies")

    async def stop(self):
        if not self.running:
            return

        self.running = False
        for task in list(self._tasks):
            if not task.done():
                task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        await self.exchange.disconnect()
        self.logger.info("Runner stopped")

    def _on_kline_closed(self, kline: KLine):
        """Exchange stream callback, hands the event to the event loop"""
        task = asyncio.get_running_loop().create_task(self.handle_kline_closed(kline))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def handle_kline_closed(self, kline: KLine) -> List[RebalanceResult]:
        """Run one cycle for every strategy whose interval just closed"""
        if not kline.closed:
            return []

        results = []
        for index, strategy in enumerate(self.strategies):
            subscriptions = strategy.subscriptions()
            if not any(s.symbol == kline.symbol and s.interval == kline.interval for s in subscriptions):
                continue

            last = self._last_triggered.get(index)
            if last is not None and kline.end_time <= last:
                self.logger.debug(f"Strategy {strategy.id} already rebalanced for interval ending {kline.end_time}")
                continue
            self._last_triggered[index] = kline.end_time

            result = await self.run_cycle(index)
            if result is not None:
                results.append(result)

        return results

    async def run_cycle(self, index: int) -> Optional[RebalanceResult]:
        """Run a single rebalance cycle, logging instead of raising on failure"""
        strategy = self.strategies[index]
        lock = self._locks.setdefault(index, asyncio.Lock())

        async with lock:
            start_time = datetime.now()
            self.logger.info(f"Starting rebalance cycle for strategy {strategy.id}")
            try:
                result = await strategy.rebalance()
            except RebalancerError as e:
                self.logger.error(f"Rebalance cycle of strategy {strategy.id} failed: {e}")
                return None
            except Exception:
                self.logger.exception(f"Unexpected error in rebalance cycle of strategy {strategy.id}")
                return None

            execution_time = (datetime.now() - start_time).total_seconds()
            self.logger.info(
                f"Rebalance cycle of strategy {strategy.id} completed in {execution_time:.1f}s: "
                f"{len(result.orders)} orders{' (dry run)' if result.dry_run else ''}"
            )
            return result

    async def run_once(self) -> List[Optional[RebalanceResult]]:
        """Run one cycle of every strategy immediately"""
        return [await self.run_cycle(index) for index in range(len(self.strategies))]
