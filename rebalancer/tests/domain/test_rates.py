"""
Tests for the in-memory rate table.

Tests: rebalancer/domain/rates.py
"""

import pytest

from rebalancer.domain import Currency, Rates
from rebalancer.exceptions import MissingRateError, RateError, UnknownCurrencyError


@pytest.mark.domain
@pytest.mark.unit
class TestRates:
    """Tests for rate lookups and conversions."""

    @pytest.fixture
    def pln_rates(self) -> Rates:
        return Rates(
            {
                Currency.USD: 4.02,
                Currency.EUR: 4.34,
                Currency.GBP: 1.3,
                Currency.CHF: 1.4,
                Currency.PLN: 1.0,
            }
        )

    @pytest.mark.parametrize(
        ("from_currency", "to_currency", "expected"),
        [
            (Currency.USD, Currency.USD, 100.0),
            (Currency.USD, Currency.PLN, 402.0),
            (Currency.EUR, Currency.PLN, 434.0),
            (Currency.EUR, Currency.USD, 107.96),
        ],
    )
    def test_convert(
        self, pln_rates: Rates, from_currency: Currency, to_currency: Currency, expected: float
    ) -> None:
        assert pln_rates.convert(from_currency, to_currency, 100.0) == pytest.approx(
            expected, abs=0.01
        )

    def test_native_defaults_to_one(self, pln_rates: Rates) -> None:
        assert pln_rates.rate(Currency.NATIVE) == 1.0
        assert pln_rates.to_native(Currency.USD, 10.0) == pytest.approx(40.2)

    def test_native_must_be_one(self) -> None:
        with pytest.raises(RateError, match="Native currency rate must be 1.0"):
            Rates({Currency.NATIVE: 2.0})

    @pytest.mark.parametrize("rate", [0.0, -1.0, float("nan"), float("inf")])
    def test_invalid_rate_raises(self, rate: float) -> None:
        with pytest.raises(RateError, match="Invalid rate"):
            Rates({Currency.USD: rate})

    def test_unknown_currency_entry_rejected(self) -> None:
        with pytest.raises(UnknownCurrencyError):
            Rates({Currency.UNKNOWN: 1.0})

    def test_missing_rate_is_never_defaulted(self) -> None:
        rates = Rates({Currency.USD: 1.0})
        with pytest.raises(MissingRateError, match="EUR"):
            rates.convert(Currency.EUR, Currency.USD, 10.0)

    def test_unknown_currency_conversion_raises(self, pln_rates: Rates) -> None:
        with pytest.raises(UnknownCurrencyError):
            pln_rates.convert(Currency.UNKNOWN, Currency.USD, 10.0)

    def test_require(self, pln_rates: Rates) -> None:
        pln_rates.require([Currency.USD, Currency.EUR, Currency.NATIVE])
        assert Currency.GBP in pln_rates
        assert Currency.UNKNOWN not in pln_rates
        with pytest.raises(MissingRateError):
            Rates({Currency.USD: 1.0}).require([Currency.USD, Currency.CHF])

    def test_currencies(self) -> None:
        rates = Rates({Currency.USD: 1.0})
        assert set(rates.currencies) == {Currency.USD, Currency.NATIVE}
