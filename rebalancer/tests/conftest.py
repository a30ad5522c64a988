"""
Root-level pytest fixtures for rebalancer test suite.
"""

from collections.abc import Callable

import pytest

from rebalancer.domain import Amount, Currency, Group, Portfolio, Position, Rates


@pytest.fixture
def rates() -> Rates:
    """Rate table used across the suite, pivoting on USD/PLN at 1.0."""
    return Rates(
        {
            Currency.USD: 1.0,
            Currency.EUR: 1.2,
            Currency.GBP: 1.3,
            Currency.CHF: 1.4,
            Currency.PLN: 1.0,
        }
    )


@pytest.fixture
def make_position() -> Callable[..., Position]:
    """
    Factory for resolved positions.

    Usage:
        position = make_position("Test 1", Currency.USD, 100.0, 0.5)
    """

    def _make(
        name: str,
        currency: Currency,
        value: float,
        target: float,
        group_id: str = "default",
        ticker: str | None = None,
    ) -> Position:
        return Position(
            name=name,
            ticker=ticker or name.upper().replace(" ", ""),
            group_id=group_id,
            target=target,
        ).resolve(Amount(currency, value))

    return _make


@pytest.fixture
def make_portfolio(rates: Rates) -> Callable[..., Portfolio]:
    """Factory for portfolios using the shared ``rates`` fixture."""

    def _make(positions: list[Position], groups: list[Group] | None = None) -> Portfolio:
        return Portfolio(positions=positions, rates=rates, groups=groups or [])

    return _make
