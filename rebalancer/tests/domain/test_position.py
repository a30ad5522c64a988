"""
Tests for positions and their resolution state.

Tests: rebalancer/domain/position.py
"""

import pytest

from rebalancer.domain import UNRESOLVED, Amount, Currency, Position, Resolved
from rebalancer.exceptions import UnresolvedAmountError


@pytest.mark.domain
@pytest.mark.unit
class TestPosition:
    def test_new_position_is_unresolved(self) -> None:
        position = Position(name="World", ticker="IWDA", group_id="equities", target=0.6)
        assert position.state is UNRESOLVED
        assert not position.is_resolved

    def test_unresolved_amount_raises(self) -> None:
        position = Position(name="World", ticker="IWDA", group_id="equities", target=0.6)
        with pytest.raises(UnresolvedAmountError, match="World"):
            _ = position.amount

    def test_resolve_returns_new_position(self) -> None:
        position = Position(name="World", ticker="IWDA", group_id="equities", target=0.6)
        resolved = position.resolve(Amount(Currency.EUR, 150.0))

        assert resolved.is_resolved
        assert resolved.state == Resolved(Amount(Currency.EUR, 150.0))
        assert resolved.amount == Amount(Currency.EUR, 150.0)
        assert resolved.currency is Currency.EUR
        assert not position.is_resolved

    @pytest.mark.parametrize("target", [-0.1, 1.01])
    def test_target_out_of_range_raises(self, target: float) -> None:
        with pytest.raises(ValueError, match="Target share must be between 0 and 1"):
            Position(name="Bad", ticker="BAD", group_id="x", target=target)

    @pytest.mark.parametrize("target", [0.0, 1.0])
    def test_target_bounds_are_inclusive(self, target: float) -> None:
        assert Position(name="Edge", ticker="EDGE", group_id="x", target=target).target == target
