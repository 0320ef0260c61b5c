"""Pydantic models for rebalancer configuration with validation."""

from enum import Enum
from typing import Dict, List, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .validation import validate_strategy_config


class Interval(str, Enum):
    """Kline intervals supported as rebalance triggers."""

    ONE_MINUTE = "1m"
    THREE_MINUTES = "3m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    TWO_HOURS = "2h"
    FOUR_HOURS = "4h"
    SIX_HOURS = "6h"
    TWELVE_HOURS = "12h"
    ONE_DAY = "1d"
    THREE_DAYS = "3d"
    ONE_WEEK = "1w"

    @property
    def seconds(self) -> int:
        unit = self.value[-1]
        amount = int(self.value[:-1])
        return amount * {"m": 60, "h": 3600, "d": 86400, "w": 604800}[unit]


class MarketCapConfig(BaseModel):
    """Immutable configuration of the marketcap rebalancing strategy."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    interval: Interval = Field(
        default=Interval.ONE_HOUR,
        description="Kline interval whose close triggers a rebalance"
    )
    base_currency: str = Field(
        default="USDT",
        description="Quote currency holding the residual weight"
    )
    base_weight: float = Field(
        default=0.0,
        ge=0.0,
        lt=1.0,
        description="Fraction of the portfolio reserved for the base currency"
    )
    target_currencies: List[str] = Field(
        description="Ordered list of currencies weighted by market cap"
    )
    threshold: float = Field(
        default=0.0,
        description="Skip an asset while |target - current| weight is below this"
    )
    ignore_locked: bool = Field(
        default=False,
        description="Use total balances instead of available balances"
    )
    verbose: bool = Field(
        default=False,
        description="Log per-asset weight tables at INFO instead of DEBUG"
    )
    dry_run: bool = Field(
        default=False,
        description="Compute and log orders without submitting them"
    )
    max_amount: float = Field(
        default=0.0,
        description="Max notional to buy or sell per order, 0 disables the cap"
    )

    @field_validator("base_currency")
    @classmethod
    def normalize_base_currency(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("target_currencies")
    @classmethod
    def normalize_target_currencies(cls, v: List[str]) -> List[str]:
        return [c.strip().upper() for c in v]

    @model_validator(mode="after")
    def check_invariants(self) -> "MarketCapConfig":
        validate_strategy_config(
            self.target_currencies,
            self.base_currency,
            self.threshold,
            self.max_amount,
        )
        return self

    def symbols(self) -> List[str]:
        """Exchange symbols traded by the strategy, in target order."""
        return [currency + self.base_currency for currency in self.target_currencies]


class StrategyEntry(BaseModel):
    """A strategy instance to run, looked up in the registry by id."""

    id: str = Field(
        default="marketcap",
        description="Registry identifier of the strategy"
    )
    config: MarketCapConfig


class GlassnodeConfig(BaseModel):
    """Glassnode market cap API settings."""

    base_url: str = Field(
        default="https://api.glassnode.com",
        description="Glassnode API base URL"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=120.0,
        description="Timeout for market cap requests"
    )
    metric_interval: Literal["1h", "24h", "1w", "1month"] = Field(
        default="24h",
        description="Resolution of the market cap series"
    )
    lookback_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="How far back the market cap series is requested"
    )


class PaperExchangeConfig(BaseModel):
    """Static market state for the in-memory paper exchange."""

    prices: Dict[str, float] = Field(
        default_factory=dict,
        description="Last price per exchange symbol"
    )
    balances: Dict[str, float] = Field(
        default_factory=dict,
        description="Starting balance per currency"
    )


class ExchangeConfig(BaseModel):
    """Exchange connection settings."""

    name: Literal["paper"] = Field(
        default="paper",
        description="Exchange client implementation"
    )
    paper: PaperExchangeConfig = Field(
        default_factory=PaperExchangeConfig,
        description="Paper exchange market state"
    )


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Log line format"
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class AppConfig(BaseModel):
    """Root application configuration."""

    strategies: List[StrategyEntry] = Field(
        default_factory=list,
        description="Strategies run by the host"
    )
    glassnode: GlassnodeConfig = Field(
        default_factory=GlassnodeConfig,
        description="Glassnode settings"
    )
    exchange: ExchangeConfig = Field(
        default_factory=ExchangeConfig,
        description="Exchange settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings"
    )
