from .strategy import MarketCapStrategy, ID
from .order_store import OrderStore
from .glassnode import GlassnodeClient
from .paper import PaperExchangeClient

__version__ = "1.0.0"

__all__ = [
    "MarketCapStrategy",
    "ID",
    "OrderStore",
    "GlassnodeClient",
    "PaperExchangeClient",
    "__version__",
]
