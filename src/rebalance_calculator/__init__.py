from .calculator import OrderCalculator, adjust_quantity_by_max_amount
from .weights import WeightCalculator
from .snapshot import SnapshotBuilder
from .models import PortfolioSnapshot, OrderCalculationResult
from .vectors import vector_sum, normalize, scale, elementwise_multiply

__version__ = "1.0.0"

__all__ = [
    "OrderCalculator",
    "adjust_quantity_by_max_amount",
    "WeightCalculator",
    "SnapshotBuilder",
    "PortfolioSnapshot",
    "OrderCalculationResult",
    "vector_sum",
    "normalize",
    "scale",
    "elementwise_multiply",
    "__version__",
]
