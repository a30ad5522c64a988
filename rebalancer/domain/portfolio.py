from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pandas as pd
import structlog

from rebalancer.domain.amount import Amount
from rebalancer.domain.currency import Currency
from rebalancer.domain.position import Group, Position
from rebalancer.domain.rates import Rates
from rebalancer.exceptions import AllocationError, UnresolvedAmountError

if TYPE_CHECKING:
    from rebalancer.protocols import MarketDataProvider
    from rebalancer.services.balancing.dataclasses import ChangeRequest

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MarketValue:
    """Current market value of one holding as reported by a broker."""

    ticker: str
    currency: Currency
    value: float


@dataclass
class Portfolio:
    """Aggregate root holding positions, their groups and the rate table."""

    positions: list[Position] = field(default_factory=list)
    rates: Rates = field(default_factory=Rates)
    groups: list[Group] = field(default_factory=list)

    def __iter__(self) -> Iterator[Position]:
        return iter(self.positions)

    def __len__(self) -> int:
        return len(self.positions)

    def __str__(self) -> str:
        if all(p.is_resolved for p in self.positions):
            total = str(self.total_value(Currency.NATIVE))
        else:
            total = "unresolved"
        lines = [f"Total value: {total}", "Positions:"]
        if self.positions:
            lines.append(self.summary().to_string(index=False))
        return "\n".join(lines)

    def group_for(self, position: Position) -> Group | None:
        for group in self.groups:
            if group.id == position.group_id:
                return group
        return None

    def resolved_positions(self) -> list[Position]:
        """Return the positions, failing if any amount is still unresolved."""

        unresolved = [p.name for p in self.positions if not p.is_resolved]
        if unresolved:
            logger.error("unresolved_positions", positions=unresolved)
            raise UnresolvedAmountError(
                f"Positions without a resolved amount: {', '.join(unresolved)}"
            )
        return list(self.positions)

    def total_value(self, currency: Currency) -> Amount:
        """Total value of all positions expressed in ``currency``."""

        total = Amount.zero(currency)
        for position in self.resolved_positions():
            total = total.add(position.amount, self.rates)
        return total

    def current_shares(self, currency: Currency) -> list[float]:
        """Current share of each position in position order; all zero for an empty portfolio."""

        total = self.total_value(currency)
        if total.value == 0:
            return [0.0 for _ in self.positions]
        return [p.amount.div(total, self.rates) for p in self.positions]

    def target_sum(self) -> float:
        return sum(p.target for p in self.positions)

    def validate_targets(self, tolerance: float = 0.01) -> None:
        """Check target shares add up to 1 within ``tolerance``.

        Raises:
            AllocationError: If the targets do not sum to 1
        """
        target_sum = self.target_sum()
        if abs(target_sum - 1.0) > tolerance:
            raise AllocationError(f"Target shares sum to {target_sum:.4f}, expected 1.0")

    def target_deltas(self, investment: Amount) -> list[Amount]:
        """Change each position needs to land exactly on target.

        Closed-form and unbounded: a position above its target gets a
        negative delta. Deltas are in each position's own currency and in
        position order.
        """
        total = self.total_value(investment.currency)
        grand_total = total.value + investment.value

        deltas: list[Amount] = []
        for position in self.positions:
            current = position.amount.convert(investment.currency, self.rates)
            needed = Amount(investment.currency, position.target * grand_total - current.value)
            deltas.append(needed.convert(position.currency, self.rates))
        return deltas

    def with_market_values(self, values: Iterable[MarketValue]) -> Portfolio:
        """Return a copy with amounts resolved from broker market values.

        Values sharing a ticker are summed, since a broker may report one
        holding as several open trades. Positions without a matching ticker
        keep their current state.
        """
        by_ticker: dict[str, Amount] = {}
        for market_value in values:
            amount = Amount(market_value.currency, market_value.value)
            if market_value.ticker in by_ticker:
                amount = by_ticker[market_value.ticker].add(amount, self.rates)
            by_ticker[market_value.ticker] = amount

        positions = []
        for position in self.positions:
            amount = by_ticker.pop(position.ticker, None)
            if amount is None:
                logger.warning(
                    "no_market_value_for_position", name=position.name, ticker=position.ticker
                )
                positions.append(position)
            else:
                positions.append(position.resolve(amount))

        if by_ticker:
            logger.info("untracked_market_values", tickers=sorted(by_ticker))

        return Portfolio(positions=positions, rates=self.rates, groups=list(self.groups))

    def refresh(self, provider: MarketDataProvider) -> Portfolio:
        """Resolve amounts from a market-data provider."""

        return self.with_market_values(provider.get_position_market_values())

    def summary(self) -> pd.DataFrame:
        """Tabular view of the positions for display."""

        rows = []
        for position in self.positions:
            resolved = position.is_resolved
            rows.append(
                {
                    "name": position.name,
                    "ticker": position.ticker,
                    "group": position.group_id,
                    "currency": position.currency.code if resolved else None,
                    "value": position.amount.value if resolved else None,
                    "target": position.target,
                }
            )
        return pd.DataFrame(
            rows, columns=["name", "ticker", "group", "currency", "value", "target"]
        )

    def balance(self, investment: Amount) -> ChangeRequest:
        """Distribute ``investment`` across the positions."""

        from rebalancer.services.balancing import BalancingEngine

        return BalancingEngine(self).generate_change_request(investment)
