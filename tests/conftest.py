"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from loanmath.config import get_settings


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings around each test so env overrides do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mortgage():
    """$100K loan at 0.5% per month for 360 months."""
    return {"principal": 100000.0, "periodic_rate": 0.005, "periods": 360}


class CountingPayment:
    """Payment function test double that records every evaluation."""

    def __init__(self, func):
        self.func = func
        self.calls = 0

    def __call__(self, principal, periodic_rate, periods):
        self.calls += 1
        return self.func(principal, periodic_rate, periods)


@pytest.fixture
def counting_payment():
    from loanmath.calculations.amortization import payment

    return CountingPayment(payment)
