"""
Tests for the currency enumeration.

Tests: rebalancer/domain/currency.py
"""

import pytest

from rebalancer.domain import Currency


@pytest.mark.domain
@pytest.mark.unit
class TestCurrency:
    """Tests for Currency parsing and flags."""

    @pytest.mark.parametrize("code", ["USD", "usd", " Eur ", "gbp", "CHF", "PLN"])
    def test_parse_known_codes(self, code: str) -> None:
        currency = Currency.parse(code)
        assert currency.is_known
        assert currency.code == code.strip().upper()

    @pytest.mark.parametrize("code", ["XYZ", "", None, "dollar"])
    def test_parse_unrecognised_falls_back_to_unknown(self, code: str | None) -> None:
        assert Currency.parse(code) is Currency.UNKNOWN

    def test_parse_passes_currency_through(self) -> None:
        assert Currency.parse(Currency.EUR) is Currency.EUR

    def test_unknown_is_not_known(self) -> None:
        assert not Currency.UNKNOWN.is_known
        assert Currency.NATIVE.is_known

    def test_str_is_code(self) -> None:
        assert str(Currency.USD) == "USD"
