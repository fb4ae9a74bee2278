"""eco-router - best-price swap routing across DEX platforms."""

from ecorouter.aggregator import Aggregator, create_default_aggregator, get_default_aggregator

__version__ = "0.1.0"
__all__ = ["Aggregator", "create_default_aggregator", "get_default_aggregator", "__version__"]
