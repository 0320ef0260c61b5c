class RebalancerError(Exception):
    """Base class for all rebalancer failures"""
    pass

class ConfigurationError(RebalancerError, ValueError):
    """Raised when strategy configuration is invalid"""
    pass

class DataSourceError(RebalancerError):
    """Raised when a market-cap or price query fails"""
    pass

class OrderSinkError(RebalancerError):
    """Raised when submitting or cancelling orders fails"""
    pass
