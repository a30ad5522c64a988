"""Core balancing calculation logic using cvxpy optimization."""

from __future__ import annotations

from typing import TYPE_CHECKING

import cvxpy as cp
import numpy as np
import pandas as pd
import structlog

from rebalancer.exceptions import OptimizationError

if TYPE_CHECKING:
    from rebalancer.domain import Amount, Currency, Position
    from rebalancer.protocols import RateProvider

logger = structlog.get_logger(__name__)

ACCEPTED_STATUSES = (cp.OPTIMAL, cp.OPTIMAL_INACCURATE)


class BalancingCalculator:
    """Splits an investment across positions so each moves toward its target.

    Solves a linear program with cvxpy. For each position the post-investment
    imbalance ``(v + x) / (V + I) - target`` is oriented so that it is
    non-negative in the direction the position has to travel: positions
    below target have the term negated. The solver minimises the sum of the
    oriented terms, which equals the total absolute imbalance.

    Constraints:
    - All of the investment is allocated (sum of allocations == I)
    - Each allocation lies between 0 and I (I and 0 for a withdrawal)
    - Each oriented imbalance is non-negative
    """

    def __init__(self, rates: RateProvider, solver: str | None = None) -> None:
        """Initialize calculator.

        Args:
            rates: Rate table used to express every position in the
                investment currency
            solver: Preferred cvxpy solver name, None for cvxpy's default
        """
        self.rates = rates
        self.solver = solver or None

    def calculate_allocations(
        self,
        positions: list[Position],
        investment: Amount,
    ) -> tuple[np.ndarray, np.ndarray, str]:
        """Calculate how much of the investment each position receives.

        Args:
            positions: Resolved positions, in output order
            investment: Amount to distribute

        Returns:
            Tuple of (allocations, current values, optimization_status), the
            first two in investment currency and in input order

        Raises:
            OptimizationError: If the solver cannot produce an allocation
        """
        df = self._prepare_positions_data(positions, investment.currency)
        values = df["value"].to_numpy(dtype=float)

        if df.empty:
            if investment.value != 0:
                raise OptimizationError("Cannot allocate an investment across zero positions")
            return np.zeros(0), values, "no_positions"

        if investment.value == 0:
            logger.debug("zero_investment", positions=len(df))
            return np.zeros(len(df)), values, "zero_investment"

        allocations, status = self._optimize_allocations(df, investment.value)
        return allocations, values, status

    def _prepare_positions_data(
        self,
        positions: list[Position],
        currency: Currency,
    ) -> pd.DataFrame:
        """Prepare position data as DataFrame for calculations.

        Returns:
            DataFrame with columns: name, currency, value, target
            where value is expressed in ``currency``
        """
        data = []
        for position in positions:
            amount = position.amount
            data.append(
                {
                    "name": position.name,
                    "currency": amount.currency,
                    "value": amount.convert(currency, self.rates).value,
                    "target": float(position.target),
                }
            )
        return pd.DataFrame(data, columns=["name", "currency", "value", "target"])

    @staticmethod
    def allocation_bounds(investment_value: float) -> tuple[float, float]:
        """Per-position bounds; a withdrawal flips them to ``[I, 0]``."""
        return min(0.0, investment_value), max(0.0, investment_value)

    @staticmethod
    def orientation(values: np.ndarray, targets: np.ndarray) -> np.ndarray:
        """Sign applied to each imbalance term.

        -1 for positions whose current share is below target (every position
        of an empty portfolio counts as below), +1 otherwise.
        """
        total = values.sum()
        if total == 0:
            return -np.ones(len(values))
        shares = values / total
        return np.where(shares < targets, -1.0, 1.0)

    def _optimize_allocations(
        self, df: pd.DataFrame, investment_value: float
    ) -> tuple[np.ndarray, str]:
        """Build and solve the linear program over the prepared frame."""
        values = df["value"].to_numpy(dtype=float)
        targets = df["target"].to_numpy(dtype=float)
        total_value = values.sum()
        final_total = total_value + investment_value

        if final_total <= 0:
            raise OptimizationError(
                f"Portfolio value after the investment would be {final_total:.2f}"
            )

        signs = self.orientation(values, targets)
        lower, upper = self.allocation_bounds(investment_value)

        allocations = cp.Variable(len(df))
        imbalance = (allocations + values) / final_total - targets
        oriented = cp.multiply(signs, imbalance)

        objective = cp.Minimize(cp.sum(oriented))
        constraints = [
            cp.sum(allocations) == investment_value,
            allocations >= lower,
            allocations <= upper,
            oriented >= 0,
        ]

        logger.debug(
            "balancing_problem_built",
            positions=len(df),
            below_target=int((signs < 0).sum()),
            total_value=float(total_value),
            investment=investment_value,
        )

        problem = cp.Problem(objective, constraints)
        self._solve(problem)

        if problem.status not in ACCEPTED_STATUSES:
            logger.error("optimization_failed", status=problem.status)
            raise OptimizationError(f"Optimization failed with status: {problem.status}")

        solution = allocations.value
        if solution is None:
            raise OptimizationError("Solver returned no solution")

        logger.debug("balancing_problem_solved", status=problem.status, objective=problem.value)

        return np.clip(np.asarray(solution, dtype=float), lower, upper), str(problem.status)

    def _solve(self, problem: cp.Problem) -> None:
        solver = self.solver
        if solver is not None and solver not in cp.installed_solvers():
            logger.warning("solver_unavailable", solver=solver, fallback="default")
            solver = None

        try:
            if solver is None:
                problem.solve()
            else:
                problem.solve(solver=solver)
        except cp.error.SolverError as e:
            logger.error("solver_error", solver=solver or "default", error=str(e))
            raise OptimizationError(f"Solver failed: {e}") from e
