from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

import structlog

from rebalancer.domain.currency import Currency
from rebalancer.exceptions import MissingRateError, RateError, UnknownCurrencyError

logger = structlog.get_logger(__name__)


class Rates:
    """In-memory rate table pivoting on ``Currency.NATIVE``.

    Each currency maps to its value expressed in the native currency, so
    ``convert(a, b, v) == v * rate[a] / rate[b]``. The native currency is
    the pivot and always maps to exactly 1.0.
    """

    def __init__(self, rates: Mapping[Currency, float] | None = None) -> None:
        table = dict(rates or {})

        native = table.setdefault(Currency.NATIVE, 1.0)
        if native != 1.0:
            raise RateError(f"Native currency rate must be 1.0, got {native}")

        if Currency.UNKNOWN in table:
            raise UnknownCurrencyError("Rate table cannot contain the unknown currency")

        for currency, rate in table.items():
            if not math.isfinite(rate) or rate <= 0:
                raise RateError(f"Invalid rate for {currency}: {rate}")

        self._rates: dict[Currency, float] = table

    def __repr__(self) -> str:
        entries = ", ".join(f"{c.code}={r}" for c, r in self._rates.items())
        return f"Rates({entries})"

    def __contains__(self, currency: object) -> bool:
        return currency in self._rates

    @property
    def currencies(self) -> list[Currency]:
        return list(self._rates)

    def rate(self, currency: Currency) -> float:
        """Return the native-currency value of one unit of ``currency``.

        Raises:
            UnknownCurrencyError: If ``currency`` is UNKNOWN
            MissingRateError: If the table has no entry for ``currency``
        """
        if not currency.is_known:
            raise UnknownCurrencyError("Cannot convert from or to an unknown currency")
        try:
            return self._rates[currency]
        except KeyError:
            logger.error("missing_rate", currency=currency.code)
            raise MissingRateError(f"No rate available for {currency}") from None

    def require(self, currencies: Iterable[Currency]) -> None:
        """Check every currency is covered, raising on the first gap."""

        for currency in currencies:
            self.rate(currency)

    def convert(self, from_currency: Currency, to_currency: Currency, value: float) -> float:
        return value * self.rate(from_currency) / self.rate(to_currency)

    def to_native(self, currency: Currency, value: float) -> float:
        return self.convert(currency, Currency.NATIVE, value)
