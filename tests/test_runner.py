"""Tests for the strategy runner and its interval clock."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from exchange_connector_base import (
    BaseStrategy,
    KLine,
    RebalanceResult,
    Subscription,
    ConfigurationError,
    DataSourceError,
)
from strategy_config import Interval
from marketcap_strategy import MarketCapStrategy
from strategy_runner import StrategyRunner, IntervalScheduler, interval_bounds

HOUR_END = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def kline(symbol: str = "AUSD", interval: str = "1h", end_time: datetime = HOUR_END, closed: bool = True) -> KLine:
    return KLine(
        symbol=symbol,
        interval=interval,
        start_time=end_time - timedelta(hours=1),
        end_time=end_time,
        closed=closed
    )


class StubStrategy(BaseStrategy):
    """Strategy counting cycles, optionally failing each one."""

    def __init__(self, exchange, error: Exception = None, valid: bool = True):
        super().__init__(exchange)
        self.error = error
        self.valid = valid
        self.cycles = 0
        self.bound = False

    @property
    def id(self) -> str:
        return "stub"

    def validate(self):
        if not self.valid:
            raise ConfigurationError("stub is misconfigured")

    def bind(self):
        self.bound = True

    def subscriptions(self) -> List[Subscription]:
        return [Subscription(symbol="AUSD", interval="1h"), Subscription(symbol="BUSD", interval="1h")]

    async def rebalance(self) -> RebalanceResult:
        self.cycles += 1
        if self.error:
            raise self.error
        return RebalanceResult(orders=[])


class TestRunnerStart:

    @pytest.mark.asyncio
    async def test_start_binds_and_subscribes(self, paper_exchange):
        strategy = StubStrategy(paper_exchange)
        runner = StrategyRunner([strategy], paper_exchange)

        await runner.start()

        assert runner.running
        assert paper_exchange.connected
        assert strategy.bound
        assert [s.symbol for s in paper_exchange.subscriptions] == ["AUSD", "BUSD"]

    @pytest.mark.asyncio
    async def test_invalid_strategy_stops_start(self, paper_exchange):
        runner = StrategyRunner([StubStrategy(paper_exchange), StubStrategy(paper_exchange, valid=False)],
                                paper_exchange)

        with pytest.raises(ConfigurationError):
            await runner.start()

        assert not runner.running
        assert paper_exchange.subscriptions == []

    @pytest.mark.asyncio
    async def test_stop_disconnects(self, paper_exchange):
        runner = StrategyRunner([StubStrategy(paper_exchange)], paper_exchange)
        await runner.start()

        await runner.stop()

        assert not runner.running
        assert not paper_exchange.connected


class TestKLineHandling:

    @pytest.mark.asyncio
    async def test_one_cycle_per_interval_close(self, paper_exchange):
        """Closes of every subscribed symbol for the same interval trigger a single cycle."""
        strategy = StubStrategy(paper_exchange)
        runner = StrategyRunner([strategy], paper_exchange)

        await runner.handle_kline_closed(kline("AUSD"))
        await runner.handle_kline_closed(kline("BUSD"))

        assert strategy.cycles == 1

    @pytest.mark.asyncio
    async def test_next_interval_triggers_again(self, paper_exchange):
        strategy = StubStrategy(paper_exchange)
        runner = StrategyRunner([strategy], paper_exchange)

        await runner.handle_kline_closed(kline())
        results = await runner.handle_kline_closed(kline(end_time=HOUR_END + timedelta(hours=1)))

        assert strategy.cycles == 2
        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_stale_interval_ignored(self, paper_exchange):
        strategy = StubStrategy(paper_exchange)
        runner = StrategyRunner([strategy], paper_exchange)

        await runner.handle_kline_closed(kline())
        await runner.handle_kline_closed(kline(end_time=HOUR_END - timedelta(hours=1)))

        assert strategy.cycles == 1

    @pytest.mark.asyncio
    async def test_unrelated_klines_ignored(self, paper_exchange):
        strategy = StubStrategy(paper_exchange)
        runner = StrategyRunner([strategy], paper_exchange)

        await runner.handle_kline_closed(kline(interval="5m"))
        await runner.handle_kline_closed(kline(symbol="CUSD"))
        await runner.handle_kline_closed(kline(closed=False))

        assert strategy.cycles == 0

    @pytest.mark.asyncio
    async def test_failed_cycle_logged_not_raised(self, paper_exchange, caplog):
        strategy = StubStrategy(paper_exchange, error=DataSourceError("market caps unavailable"))
        runner = StrategyRunner([strategy], paper_exchange)

        with caplog.at_level(logging.ERROR):
            results = await runner.handle_kline_closed(kline())

        assert results == []
        assert "market caps unavailable" in caplog.text

        # The next interval still runs
        await runner.handle_kline_closed(kline(end_time=HOUR_END + timedelta(hours=1)))
        assert strategy.cycles == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_logged_with_traceback(self, paper_exchange, caplog):
        runner = StrategyRunner([StubStrategy(paper_exchange, error=KeyError("boom"))], paper_exchange)

        with caplog.at_level(logging.ERROR):
            result = await runner.run_cycle(0)

        assert result is None
        assert any(r.exc_info for r in caplog.records)

    @pytest.mark.asyncio
    async def test_stream_callback_runs_cycle(self, strategy_config, paper_exchange, market_cap_source):
        strategy = MarketCapStrategy(strategy_config, paper_exchange, market_cap_source)
        runner = StrategyRunner([strategy], paper_exchange)
        await runner.start()

        paper_exchange.emit_kline_closed(kline())
        await asyncio.gather(*runner._tasks)

        balances = await paper_exchange.get_balances()
        assert balances["B"].total == pytest.approx(3.36)


class TestRunOnce:

    @pytest.mark.asyncio
    async def test_runs_every_strategy(self, paper_exchange):
        ok = StubStrategy(paper_exchange)
        failing = StubStrategy(paper_exchange, error=DataSourceError("down"))
        runner = StrategyRunner([ok, failing], paper_exchange)

        results = await runner.run_once()

        assert results[0] is not None
        assert results[1] is None
        assert ok.cycles == failing.cycles == 1


class TestIntervalScheduler:

    def test_interval_bounds_aligned(self):
        now = datetime(2026, 3, 1, 12, 34, 56, tzinfo=timezone.utc)

        start, end = interval_bounds(Interval.ONE_HOUR, now)

        assert end == datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        assert start == datetime(2026, 3, 1, 11, 0, tzinfo=timezone.utc)

    def test_interval_bounds_on_boundary(self):
        now = datetime(2026, 3, 1, 0, 0, tzinfo=timezone.utc)

        start, end = interval_bounds(Interval.ONE_DAY, now)

        assert end == now
        assert end - start == timedelta(days=1)

    def test_weekly_interval_closes_on_monday(self):
        now = datetime(2026, 3, 4, 15, 30, tzinfo=timezone.utc)  # Wednesday

        start, end = interval_bounds(Interval.ONE_WEEK, now)

        assert end == datetime(2026, 3, 2, 0, 0, tzinfo=timezone.utc)
        assert end.weekday() == 0
        assert start == datetime(2026, 2, 23, 0, 0, tzinfo=timezone.utc)

    def test_weekly_interval_on_monday_boundary(self):
        now = datetime(2026, 3, 9, 0, 0, tzinfo=timezone.utc)

        _, end = interval_bounds(Interval.ONE_WEEK, now)

        assert end == now

    @pytest.mark.asyncio
    async def test_emit_interval_close_triggers_cycle(self, paper_exchange):
        strategy = StubStrategy(paper_exchange)
        runner = StrategyRunner([strategy], paper_exchange)
        scheduler = IntervalScheduler(runner)

        await scheduler._emit_interval_close("AUSD", Interval.ONE_HOUR)
        await scheduler._emit_interval_close("AUSD", Interval.ONE_HOUR)

        assert strategy.cycles == 1

    @pytest.mark.asyncio
    async def test_start_schedules_job_per_strategy(self, paper_exchange):
        runner = StrategyRunner([StubStrategy(paper_exchange), StubStrategy(paper_exchange)], paper_exchange)
        scheduler = IntervalScheduler(runner)

        scheduler.start()
        try:
            job_ids = sorted(job.id for job in scheduler.scheduler.get_jobs())
        finally:
            scheduler.stop()

        assert job_ids == ["0-stub-AUSD-1h", "1-stub-AUSD-1h"]
        assert not scheduler.running
