"""
Shared precondition checks for the calculation modules.

The checks raise on violation and never correct the value they are given.
"""

import math
from numbers import Integral, Real
from typing import Any

from loanmath.exceptions import InvalidInputError, InvalidTermError


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def require_finite(field: str, value: Any) -> float:
    """Return value as a float, rejecting non-numbers, NaN and infinities."""
    if not _is_number(value):
        raise InvalidInputError(field, value, "must be a number")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInputError(field, value, "must be finite")
    return value


def require_non_negative(field: str, value: Any) -> float:
    value = require_finite(field, value)
    if value < 0:
        raise InvalidInputError(field, value, "must not be negative")
    return value


def require_positive(field: str, value: Any) -> float:
    value = require_finite(field, value)
    if value <= 0:
        raise InvalidInputError(field, value, "must be greater than zero")
    return value


def require_integer(field: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidInputError(field, value, "must be an integer")
    return int(value)


def require_periods(value: Any, field: str = "periods") -> int:
    """
    Validate a loan term expressed in payment periods.

    Integral floats such as 360.0 are accepted since callers commonly derive
    the term from ``years * 12``; fractional terms are rejected.

    Raises:
        InvalidTermError: If the term is not a positive whole number
    """
    if isinstance(value, bool):
        raise InvalidTermError(value, field)
    if isinstance(value, Integral):
        periods = int(value)
    elif isinstance(value, Real) and math.isfinite(value) and float(value).is_integer():
        periods = int(value)
    else:
        raise InvalidTermError(value, field)

    if periods <= 0:
        raise InvalidTermError(value, field)
    return periods
