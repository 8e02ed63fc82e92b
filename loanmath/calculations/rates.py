"""
Rate and term unit conversions.

The engine works in periodic units; these helpers convert the annual figures
callers usually collect.
"""

from typing import Optional

from loanmath.calculations.validation import (
    require_non_negative,
    require_periods,
)
from loanmath.config import get_settings
from loanmath.exceptions import InvalidTermError


def _periods_per_year(periods_per_year: Optional[int]) -> int:
    if periods_per_year is None:
        periods_per_year = get_settings().periods_per_year
    return require_periods(periods_per_year, "periods_per_year")


def annual_to_periodic_rate(
    annual_rate: float, periods_per_year: Optional[int] = None
) -> float:
    """Convert a nominal annual rate to a periodic rate (e.g. 0.06 -> 0.005)."""
    annual_rate = require_non_negative("annual_rate", annual_rate)
    return annual_rate / _periods_per_year(periods_per_year)


def periodic_to_annual_rate(
    periodic_rate: float, periods_per_year: Optional[int] = None
) -> float:
    """Convert a periodic rate to its nominal annual rate (APR)."""
    periodic_rate = require_non_negative("periodic_rate", periodic_rate)
    return periodic_rate * _periods_per_year(periods_per_year)


def effective_annual_rate(
    periodic_rate: float, periods_per_year: Optional[int] = None
) -> float:
    """Convert a periodic rate to an effective annual rate with compounding."""
    periodic_rate = require_non_negative("periodic_rate", periodic_rate)
    return ((1 + periodic_rate) ** _periods_per_year(periods_per_year)) - 1


def years_to_periods(years: float, periods_per_year: Optional[int] = None) -> int:
    """Convert a term in years to a whole number of payment periods."""
    periods = require_non_negative("years", years) * _periods_per_year(periods_per_year)
    if not float(periods).is_integer():
        raise InvalidTermError(years, "years")
    return require_periods(periods)
