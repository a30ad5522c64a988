"""High-level orchestration for balancing calculations."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import structlog

from config import settings
from rebalancer.domain import Amount
from rebalancer.exceptions import AllocationError
from rebalancer.services.balancing.calculator import BalancingCalculator
from rebalancer.services.balancing.dataclasses import ChangeRequest, PositionChange

if TYPE_CHECKING:
    from rebalancer.domain import Portfolio, Position

logger = structlog.get_logger(__name__)


class BalancingEngine:
    """Orchestrates change request generation for a portfolio."""

    def __init__(
        self,
        portfolio: Portfolio,
        solver: str | None = None,
        strict_targets: bool | None = None,
        target_tolerance: float | None = None,
    ) -> None:
        """Initialize engine for given portfolio.

        Args:
            portfolio: The portfolio to balance, borrowed read-only
            solver: Preferred cvxpy solver (defaults to REBALANCER_SOLVER)
            strict_targets: Reject targets that do not sum to 1 (defaults to
                REBALANCER_STRICT_TARGETS)
            target_tolerance: Allowed deviation of the target sum from 1
        """
        self.portfolio = portfolio
        self.strict_targets = (
            settings.STRICT_TARGETS if strict_targets is None else strict_targets
        )
        self.target_tolerance = (
            settings.TARGET_TOLERANCE if target_tolerance is None else target_tolerance
        )
        self.calculator = BalancingCalculator(
            portfolio.rates, solver=solver if solver is not None else settings.SOLVER
        )

    def generate_change_request(self, investment: Amount) -> ChangeRequest:
        """Distribute ``investment`` across the portfolio's positions.

        Returns:
            ChangeRequest with one change per position, in input order

        Raises:
            UnresolvedAmountError: If any position has no amount
            MissingRateError: If a currency in use has no rate
            UnknownCurrencyError: If a currency in use is UNKNOWN
            AllocationError: If strict targets are enabled and violated
            OptimizationError: If the solver fails
        """
        rates = self.portfolio.rates
        positions = self.portfolio.resolved_positions()

        logger.info(
            "balancing_started",
            positions=len(positions),
            investment=investment.value,
            currency=investment.currency.code,
        )

        rates.require([investment.currency, *(p.currency for p in positions)])
        self._check_targets()

        allocations, values, status = self.calculator.calculate_allocations(positions, investment)
        pre_drift = self._calculate_drift(positions, values)
        post_drift = self._calculate_drift(positions, values + allocations)

        changes = [
            PositionChange(
                position=position,
                delta=Amount(investment.currency, float(allocation)).convert(
                    position.currency, rates
                ),
                pre_drift=pre,
                post_drift=post,
            )
            for position, allocation, pre, post in zip(
                positions, allocations, pre_drift, post_drift, strict=True
            )
        ]

        logger.info(
            "balancing_finished",
            positions=len(changes),
            status=status,
            allocated=float(allocations.sum()),
        )

        return ChangeRequest(
            investment=investment,
            rates=rates,
            changes=changes,
            optimization_status=status,
            generated_at=datetime.now(),
        )

    def _check_targets(self) -> None:
        target_sum = self.portfolio.target_sum()
        if abs(target_sum - 1.0) <= self.target_tolerance:
            return

        logger.warning(
            "targets_do_not_sum_to_one",
            target_sum=target_sum,
            tolerance=self.target_tolerance,
            strict=self.strict_targets,
        )
        if self.strict_targets:
            raise AllocationError(f"Target shares sum to {target_sum:.4f}, expected 1.0")

    @staticmethod
    def _calculate_drift(positions: list[Position], values: np.ndarray) -> list[float]:
        """Share minus target per position, in input order.

        An empty portfolio is fully underweight.
        """
        total = values.sum()
        if total == 0:
            return [-p.target for p in positions]
        return [
            float(value / total - p.target) for p, value in zip(positions, values, strict=True)
        ]
