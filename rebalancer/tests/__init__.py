"""
Rebalancer Test Suite Organization

Mirroring production structure with 1:1 mapping between code and tests.

## Test Categories

### Domain (rebalancer/domain/ -> rebalancer/tests/domain/)
- test_currency.py: Currency enumeration and parsing
- test_amount.py: Amount value object and arithmetic
- test_rates.py: Rate table conversions
- test_position.py: Position resolution states
- test_portfolio.py: Portfolio aggregate root

### Services (rebalancer/services/ -> rebalancer/tests/services/)
- balancing/test_calculator.py: Linear program construction and solving
- balancing/test_engine.py: End-to-end balancing scenarios
- balancing/test_dataclasses.py: ChangeRequest aggregation views

### Configuration (config/ -> rebalancer/tests/test_config.py)

## Fixtures & Helpers

### Pytest Fixtures (conftest.py)
- rates: Rate table with USD=1.0, EUR=1.2, GBP=1.3, CHF=1.4, PLN=1.0
- make_position: Factory for resolved positions
- make_portfolio: Factory for portfolios sharing the ``rates`` fixture

## Running Tests

# All tests
pytest

# Specific directory
pytest rebalancer/tests/services/
"""
