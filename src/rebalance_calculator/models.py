from typing import List
from pydantic import BaseModel, Field
from exchange_connector_base import SubmitOrder

class PortfolioSnapshot(BaseModel):
    """Parallel per-asset vectors, base currency last"""
    currencies: List[str]
    prices: List[float]
    quantities: List[float]
    market_values: List[float]

class OrderCalculationResult(BaseModel):
    """Orders generated for one cycle with the weights they were derived from"""
    orders: List[SubmitOrder] = Field(default_factory=list)
    current_weights: List[float] = Field(default_factory=list)
    total_value: float = 0.0
