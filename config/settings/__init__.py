"""
Settings for the rebalancer.

Values come from environment variables, optionally loaded from a .env file.

Usage:
    from config import settings

    settings.SOLVER            # preferred cvxpy solver, None for the default
    settings.STRICT_TARGETS    # reject targets that do not sum to 1
"""

import os

from dotenv import load_dotenv

from rebalancer.domain.currency import Currency

load_dotenv()


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got: {raw!r}") from None


DEBUG = _env_bool("DEBUG")

SOLVER = os.getenv("REBALANCER_SOLVER", "").strip().upper() or None

STRICT_TARGETS = _env_bool("REBALANCER_STRICT_TARGETS")

TARGET_TOLERANCE = _env_float("REBALANCER_TARGET_TOLERANCE", "0.01")
if TARGET_TOLERANCE < 0:
    raise ValueError(f"REBALANCER_TARGET_TOLERANCE must be non-negative, got: {TARGET_TOLERANCE}")

REPORTING_CURRENCY = os.getenv("REBALANCER_REPORTING_CURRENCY", "NATIVE").strip().upper()
if not Currency.parse(REPORTING_CURRENCY).is_known:
    raise ValueError(
        "REBALANCER_REPORTING_CURRENCY must be a supported currency code, "
        f"got: {REPORTING_CURRENCY!r}"
    )

LOG_LEVEL = os.getenv("REBALANCER_LOG_LEVEL", "INFO").strip().upper()
