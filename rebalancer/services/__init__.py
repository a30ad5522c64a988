from .balancing import BalancingEngine, ChangeRequest, PositionChange

__all__ = [
    "BalancingEngine",
    "ChangeRequest",
    "PositionChange",
]
