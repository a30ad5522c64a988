class RebalancerError(Exception):
    """Base exception for all rebalancer related errors."""

    pass


class CurrencyMismatchError(RebalancerError):
    """Raised when same-currency arithmetic is attempted across currencies."""

    pass


class RateError(RebalancerError):
    """Raised when there is an issue with the rate table (e.g., invalid rate)."""

    pass


class MissingRateError(RateError):
    """Raised when a currency has no entry in the rate table."""

    pass


class UnknownCurrencyError(RateError):
    """Raised when the UNKNOWN currency is used in arithmetic or conversion."""

    pass


class UnresolvedAmountError(RebalancerError):
    """Raised when a position's amount is read before it was resolved."""

    pass


class AllocationError(RebalancerError):
    """Raised when allocation validation fails (e.g., targets sum != 1)."""

    pass


class OptimizationError(RebalancerError):
    """Raised when the solver cannot produce an allocation."""

    pass
