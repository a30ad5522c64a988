from __future__ import annotations

from dataclasses import dataclass, replace

from rebalancer.domain.amount import Amount
from rebalancer.domain.currency import Currency
from rebalancer.exceptions import UnresolvedAmountError


@dataclass(frozen=True)
class Unresolved:
    """Amount not yet supplied by the market-data collaborator."""


@dataclass(frozen=True)
class Resolved:
    amount: Amount


UNRESOLVED = Unresolved()

type AmountState = Unresolved | Resolved


@dataclass(frozen=True)
class Group:
    """Reporting label for positions. Plays no part in the optimisation."""

    id: str
    currency: Currency


@dataclass(frozen=True)
class Position:
    """A single holding with its target share of the portfolio.

    Attributes:
        name: Display name of the holding
        ticker: Broker symbol used to match market values
        group_id: Id of the reporting group this position belongs to
        target: Target share of the portfolio, between 0 and 1
        state: Either ``Unresolved`` or ``Resolved(amount)``
    """

    name: str
    ticker: str
    group_id: str
    target: float
    state: AmountState = UNRESOLVED

    def __post_init__(self) -> None:
        """Validate position data."""
        if not 0.0 <= self.target <= 1.0:
            raise ValueError(f"Target share must be between 0 and 1, got {self.target}")

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.state, Resolved)

    @property
    def amount(self) -> Amount:
        """Current amount of the position.

        Raises:
            UnresolvedAmountError: If market data never filled the amount in
        """
        match self.state:
            case Resolved(amount=amount):
                return amount
            case _:
                raise UnresolvedAmountError(f"Amount of position {self.name!r} was never resolved")

    @property
    def currency(self) -> Currency:
        return self.amount.currency

    def resolve(self, amount: Amount) -> Position:
        """Return a copy of this position holding ``amount``."""

        return replace(self, state=Resolved(amount))
