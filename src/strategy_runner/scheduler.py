"""Clock that emits interval-close events for hosts without a kline stream"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from exchange_connector_base import KLine
from strategy_config import Interval
from .runner import StrategyRunner


# 1970-01-01 was a Thursday; exchange weeks start on Monday 00:00 UTC
WEEK_OFFSET_SECONDS = 4 * 86400


def interval_bounds(interval: Interval, now: datetime):
    """
    Start and end of the most recently closed interval.

    Intervals are aligned to the Unix epoch, except weekly intervals which
    close on Monday 00:00 UTC. 3d intervals have no calendar anchor and stay
    epoch aligned.
    """
    seconds = interval.seconds
    offset = WEEK_OFFSET_SECONDS if interval == Interval.ONE_WEEK else 0
    end_ts = (int(now.timestamp()) - offset) // seconds * seconds + offset
    end_time = datetime.fromtimestamp(end_ts, tz=timezone.utc)
    return end_time - timedelta(seconds=seconds), end_time


class IntervalScheduler:
    """
    Fires a synthetic closed kline for every strategy interval.

    Jobs start at the next interval boundary and repeat every interval. The
    runner de-duplicates events, so a real kline stream may run alongside.
    """

    def __init__(self, runner: StrategyRunner, logger: Optional[logging.Logger] = None):
        self.runner = runner
        self.logger = logger or logging.getLogger(__name__)
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.running = False

    def start(self):
        """Start the scheduler."""
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        now = datetime.now(timezone.utc)

        for index, strategy in enumerate(self.runner.strategies):
            subscriptions = strategy.subscriptions()
            if not subscriptions:
                continue

            symbol = subscriptions[0].symbol
            interval = Interval(subscriptions[0].interval)
            _, last_close = interval_bounds(interval, now)
            next_close = last_close + timedelta(seconds=interval.seconds)

            self.scheduler.add_job(
                self._emit_interval_close,
                IntervalTrigger(seconds=interval.seconds, start_date=next_close, timezone=timezone.utc),
                args=[symbol, interval],
                id=f"{index}-{strategy.id}-{symbol}-{interval.value}",
                name=f"{strategy.id} {interval.value} close",
                replace_existing=True,
                coalesce=True,
                max_instances=1
            )
            self.logger.info(f"Scheduled {strategy.id} every {interval.value}, next close at {next_close.isoformat()}")

        self.scheduler.start()
        self.running = True

    def stop(self):
        """Stop the scheduler gracefully."""
        if self.scheduler and self.running:
            self.scheduler.shutdown(wait=False)
            self.running = False
            self.logger.info("Scheduler stopped")

    async def _emit_interval_close(self, symbol: str, interval: Interval):
        start_time, end_time = interval_bounds(interval, datetime.now(timezone.utc))
        kline = KLine(
            symbol=symbol,
            interval=interval.value,
            start_time=start_time,
            end_time=end_time,
            closed=True
        )
        await self.runner.handle_kline_closed(kline)
