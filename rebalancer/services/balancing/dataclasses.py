"""Data structures for balancing results."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from config import settings
from rebalancer.domain import Amount, Currency, Position
from rebalancer.protocols import RateProvider


@dataclass(frozen=True)
class PositionChange:
    """Cash to add to (or remove from) a single position.

    Attributes:
        position: The position receiving the change
        delta: Change in the position's own currency
        pre_drift: Share minus target before the investment
        post_drift: Share minus target after the investment
    """

    position: Position
    delta: Amount
    pre_drift: float = 0.0
    post_drift: float = 0.0

    @property
    def name(self) -> str:
        return self.position.name

    @property
    def group_id(self) -> str:
        return self.position.group_id


@dataclass(frozen=True)
class ChangeRequest:
    """Complete outcome of one balancing call.

    Per-group, total and drift views are derived from ``changes`` on demand.

    Attributes:
        investment: The amount that was distributed
        rates: Rate table used for every conversion
        changes: One change per position, in input order
        optimization_status: Status reported by the solver
        generated_at: When this request was calculated
    """

    investment: Amount
    rates: RateProvider
    changes: list[PositionChange] = field(default_factory=list)
    optimization_status: str = ""
    generated_at: datetime = field(default_factory=datetime.now)

    def __iter__(self) -> Iterator[PositionChange]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def change_for(self, name: str) -> Amount | None:
        for change in self.changes:
            if change.name == name:
                return change.delta
        return None

    def change_per_group(self) -> dict[str, Amount]:
        """Sum of changes per group id.

        Values are added as-is under the currency of the first change seen
        for each group. Changes in other currencies are not converted, so a
        group mixing currencies gets a meaningless total.
        """
        if not self.changes:
            return {}

        df = self.to_dataframe()
        grouped = df.groupby("group_id", sort=False).agg(
            currency=("currency", "first"), value=("delta", "sum")
        )
        return {
            str(group_id): Amount(Currency(row["currency"]), float(row["value"]))
            for group_id, row in grouped.iterrows()
        }

    def total_change(self, currency: Currency | None = None) -> Amount:
        """Sum of every change converted into ``currency``.

        Defaults to REBALANCER_REPORTING_CURRENCY.
        """
        if currency is None:
            currency = Currency.parse(settings.REPORTING_CURRENCY)

        total = Amount.zero(currency)
        for change in self.changes:
            total = total.add(change.delta, self.rates)
        return total

    @property
    def pre_drift(self) -> list[float]:
        return [change.pre_drift for change in self.changes]

    @property
    def post_drift(self) -> list[float]:
        return [change.post_drift for change in self.changes]

    @property
    def max_drift_improvement(self) -> float:
        """Largest absolute drift before minus largest absolute drift after."""
        if not self.changes:
            return 0.0
        pre_max = max(abs(d) for d in self.pre_drift)
        post_max = max(abs(d) for d in self.post_drift)
        return pre_max - post_max

    def to_dataframe(self) -> pd.DataFrame:
        """Flat table of changes with drift columns for reporting."""

        rows = [
            {
                "name": change.name,
                "ticker": change.position.ticker,
                "group_id": change.group_id,
                "currency": change.delta.currency.value,
                "delta": change.delta.value,
                "pre_drift": change.pre_drift,
                "post_drift": change.post_drift,
            }
            for change in self.changes
        ]
        return pd.DataFrame(
            rows,
            columns=["name", "ticker", "group_id", "currency", "delta", "pre_drift", "post_drift"],
        )
