"""
Marketcap rebalancer entry point.

Loads the YAML configuration, wires the services and either runs one
rebalance cycle per strategy or keeps rebalancing on every interval close.
"""
import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

from exchange_connector_base import ConfigurationError
from strategy_config import AppConfig, load_config
from .container import ServiceContainer
from .logger import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="marketcap-rebalancer",
        description="Rebalance a portfolio toward market cap weights"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run the configured strategies")
    run_parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    run_parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    run_parser.add_argument("--dry-run", action="store_true", help="Log orders without submitting them")

    return parser.parse_args(argv)


def apply_dry_run(app_config: AppConfig) -> AppConfig:
    """Force dry run on every configured strategy"""
    strategies = [
        entry.model_copy(update={'config': entry.config.model_copy(update={'dry_run': True})})
        for entry in app_config.strategies
    ]
    return app_config.model_copy(update={'strategies': strategies})


async def run(app_config: AppConfig, once: bool = False) -> int:
    container = ServiceContainer(config=app_config)
    runner = container.runner()

    await runner.start()

    if once:
        results = await runner.run_once()
        await runner.stop()
        return 0 if all(r is not None for r in results) else 1

    scheduler = container.scheduler()
    scheduler.start()

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    logger.info("Rebalancer running, waiting for interval closes")
    await stop_event.wait()

    logger.info("Shutdown requested")
    scheduler.stop()
    await runner.stop()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)

    # Basic logging until the configured format is known
    configure_logging()

    try:
        app_config = load_config(args.config)
    except (FileNotFoundError, ConfigurationError) as e:
        logger.error(f"Failed to load configuration: {e}")
        return 1

    configure_logging(app_config.logging.level, app_config.logging.format)

    if not app_config.strategies:
        logger.error("No strategies configured")
        return 1

    if args.dry_run:
        app_config = apply_dry_run(app_config)

    try:
        return asyncio.run(run(app_config, once=args.once))
    except ConfigurationError as e:
        logger.error(f"Strategy setup failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Application terminated by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
