from __future__ import annotations

from .amount import Amount
from .currency import Currency
from .portfolio import MarketValue, Portfolio
from .position import UNRESOLVED, Group, Position, Resolved, Unresolved
from .rates import Rates

__all__ = [
    "UNRESOLVED",
    "Amount",
    "Currency",
    "Group",
    "MarketValue",
    "Portfolio",
    "Position",
    "Rates",
    "Resolved",
    "Unresolved",
]
