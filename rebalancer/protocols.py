"""Protocol definitions for collaborators the balancing engine depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from rebalancer.domain.currency import Currency
    from rebalancer.domain.portfolio import MarketValue


class RateProvider(Protocol):
    """Protocol for currency conversion tables."""

    def convert(self, from_currency: Currency, to_currency: Currency, value: float) -> float:
        """Convert ``value`` expressed in ``from_currency`` into ``to_currency``."""
        ...


class MarketDataProvider(Protocol):
    """Protocol for brokerage market-data clients."""

    def get_position_market_values(self) -> list[MarketValue]:
        """Get current market value of every open position."""
        ...
