from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rebalancer.domain.currency import Currency
from rebalancer.exceptions import CurrencyMismatchError, UnknownCurrencyError

if TYPE_CHECKING:
    from rebalancer.protocols import RateProvider

# One cent (or sub-unit) is the display precision of every supported currency.
AMOUNT_TOLERANCE = 0.01


def amounts_close(a: float, b: float) -> bool:
    return abs(a - b) < AMOUNT_TOLERANCE


def _require_known(*currencies: Currency) -> None:
    for currency in currencies:
        if not currency.is_known:
            raise UnknownCurrencyError("Cannot operate on an amount in an unknown currency")


@dataclass(frozen=True, eq=False)
class Amount:
    """Value object pairing a monetary value with its currency.

    Equality compares currencies exactly and values within one cent, which
    also makes amounts unhashable. Arithmetic between two amounts requires
    a shared currency; use ``add``/``convert``/``div`` with a rate table to
    cross currencies explicitly.
    """

    currency: Currency
    value: float

    def __post_init__(self) -> None:
        """Validate amount data."""
        if not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be a Currency, got {self.currency!r}")
        if not math.isfinite(self.value):
            raise ValueError(f"Amount value must be finite, got {self.value}")

    @classmethod
    def zero(cls, currency: Currency) -> Amount:
        return cls(currency, 0.0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return self.currency == other.currency and amounts_close(self.value, other.value)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Amount({self.currency.code}, {self.value:.2f})"

    def __str__(self) -> str:
        return f"{self.value:,.2f} {self.currency.code}"

    def _check_same_currency(self, other: Amount, operation: str) -> None:
        _require_known(self.currency, other.currency)
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"Cannot {operation} amounts with different currencies: "
                f"{self.currency} != {other.currency}"
            )

    def __add__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        self._check_same_currency(other, "add")
        return Amount(self.currency, self.value + other.value)

    def __sub__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        self._check_same_currency(other, "subtract")
        return Amount(self.currency, self.value - other.value)

    def __neg__(self) -> Amount:
        return Amount(self.currency, -self.value)

    def __mul__(self, factor: float) -> Amount:
        if isinstance(factor, Amount):
            return NotImplemented
        return Amount(self.currency, self.value * factor)

    __rmul__ = __mul__

    def convert(self, target: Currency, rates: RateProvider) -> Amount:
        """Return this amount expressed in ``target`` currency."""

        _require_known(self.currency, target)
        if target == self.currency:
            return self
        return Amount(target, rates.convert(self.currency, target, self.value))

    def add(self, other: Amount, rates: RateProvider) -> Amount:
        """Add ``other`` after converting it into this amount's currency."""

        return self + other.convert(self.currency, rates)

    def div(self, other: Amount, rates: RateProvider) -> float:
        """Ratio of this amount to ``other``, converting the divisor first.

        Raises:
            ZeroDivisionError: If ``other`` converts to zero
        """

        divisor = other.convert(self.currency, rates)
        return self.value / divisor.value
