"""Balancing engine for distributing new cash across a portfolio.

This module turns a portfolio's positions, their target shares and an
investment amount into a per-position ChangeRequest, using a cvxpy linear
program.

Usage:
    from rebalancer.services.balancing import BalancingEngine

    engine = BalancingEngine(portfolio)
    request = engine.generate_change_request(Amount(Currency.USD, 6000.0))

    for change in request.changes:
        print(f"{change.name}: {change.delta}")
"""

from rebalancer.services.balancing.calculator import BalancingCalculator
from rebalancer.services.balancing.dataclasses import ChangeRequest, PositionChange
from rebalancer.services.balancing.engine import BalancingEngine

__all__ = ["BalancingCalculator", "BalancingEngine", "ChangeRequest", "PositionChange"]
