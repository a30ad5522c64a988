from rebalancer.domain import Amount, Currency, Group, MarketValue, Portfolio, Position, Rates
from rebalancer.services.balancing import BalancingEngine, ChangeRequest, PositionChange

__version__ = "1.0.0"

__all__ = [
    "Amount",
    "BalancingEngine",
    "ChangeRequest",
    "Currency",
    "Group",
    "MarketValue",
    "Portfolio",
    "Position",
    "PositionChange",
    "Rates",
    "__version__",
]
