"""
Cash Flow Rate Calculations

Net present value of a periodic cash-flow stream and the periodic rate that
zeroes it, used to express lease payments as an equivalent loan rate.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from loanmath.calculations.rate_solver import RateSolveResult, validate_search
from loanmath.calculations.validation import (
    require_finite,
    require_non_negative,
    require_periods,
    require_positive,
)
from loanmath.config import get_settings
from loanmath.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


def _as_array(cash_flows: Sequence[float]) -> np.ndarray:
    flows = np.asarray(
        [require_finite("cash_flows", cf) for cf in cash_flows], dtype=float
    )
    if flows.size < 2:
        raise InvalidInputError("cash_flows", flows.tolist(), "at least 2 cash flows required")
    return flows


def _npv(flows: np.ndarray, rate: float) -> float:
    periods = np.arange(flows.size)
    return float(np.sum(flows / (1 + rate) ** periods))


def net_present_value(cash_flows: Sequence[float], periodic_rate: float) -> float:
    """
    Calculate NPV of periodic cash flows.

    Args:
        cash_flows: Cash flows, first one at period 0 (negative = outflow)
        periodic_rate: Discount rate per period

    Returns:
        NPV value
    """
    periodic_rate = require_non_negative("periodic_rate", periodic_rate)
    return _npv(_as_array(cash_flows), periodic_rate)


def solve_cash_flow_rate(
    cash_flows: Sequence[float],
    lower_bound: Optional[float] = None,
    upper_bound: Optional[float] = None,
    max_iterations: Optional[int] = None,
    tolerance: Optional[float] = None,
) -> RateSolveResult:
    """
    Find the periodic rate at which the cash flows have zero NPV.

    Expects a conventional stream: an outflow at period 0 followed by inflows,
    so NPV falls as the rate rises. Each NPV evaluation counts against
    ``max_iterations``.

    Raises:
        InvalidInputError: If the stream is too short or not conventional
    """
    flows = _as_array(cash_flows)
    if flows[0] >= 0:
        raise InvalidInputError("cash_flows", float(flows[0]), "first cash flow must be an outflow")
    if not np.any(flows[1:] > 0):
        raise InvalidInputError("cash_flows", flows.tolist(), "no inflows after period 0")

    settings = get_settings()
    low, high, max_iterations, tolerance = validate_search(
        settings.rate_lower_bound if lower_bound is None else lower_bound,
        settings.rate_upper_bound if upper_bound is None else upper_bound,
        settings.max_iterations if max_iterations is None else max_iterations,
        settings.tolerance if tolerance is None else tolerance,
    )

    # NPV residual band, relative to the initial outlay
    band = tolerance * abs(flows[0])

    evaluations = 1
    floor_npv = _npv(flows, low)
    if abs(floor_npv) <= band:
        return RateSolveResult(periodic_rate=low, iterations_used=evaluations, converged=True)
    if floor_npv < 0:
        logger.debug(f"Inflows never recover the outlay; NPV {floor_npv} at rate {low}")
        return RateSolveResult(periodic_rate=low, iterations_used=evaluations, converged=False)

    evaluations += 1
    ceiling_npv = _npv(flows, high)
    if ceiling_npv > band:
        logger.debug(f"NPV {ceiling_npv} still positive at rate ceiling {high}")
        return RateSolveResult(periodic_rate=high, iterations_used=evaluations, converged=False)
    if abs(ceiling_npv) <= band:
        return RateSolveResult(periodic_rate=high, iterations_used=evaluations, converged=True)

    while evaluations < max_iterations:
        mid = (low + high) / 2
        evaluations += 1
        npv = _npv(flows, mid)

        if abs(npv) <= band:
            return RateSolveResult(periodic_rate=mid, iterations_used=evaluations, converged=True)

        if npv > 0:
            low = mid
        else:
            high = mid

        if high - low < tolerance:
            return RateSolveResult(
                periodic_rate=(low + high) / 2,
                iterations_used=evaluations,
                converged=True,
            )

    rate = (low + high) / 2
    logger.debug(f"Cash flow rate search exhausted {max_iterations} evaluations at {rate}")
    return RateSolveResult(periodic_rate=rate, iterations_used=evaluations, converged=False)


def lease_cash_flows(
    price: float,
    periodic_payment: float,
    periods: int,
    upfront_fees: float = 0.0,
    buyout: float = 0.0,
) -> List[float]:
    """
    Build the lessor's cash flows for a lease.

    Period 0 carries the asset price net of up-front fees; each period then
    receives the lease payment, and the buyout lands with the final payment.
    """
    price = require_positive("price", price)
    periodic_payment = require_positive("periodic_payment", periodic_payment)
    periods = require_periods(periods)
    upfront_fees = require_non_negative("upfront_fees", upfront_fees)
    buyout = require_non_negative("buyout", buyout)
    if upfront_fees >= price:
        raise InvalidInputError("upfront_fees", upfront_fees, "must be less than price")

    flows = [-(price - upfront_fees)] + [periodic_payment] * periods
    flows[-1] += buyout
    return flows


def lease_equivalent_rate(
    price: float,
    periodic_payment: float,
    periods: int,
    upfront_fees: float = 0.0,
    buyout: float = 0.0,
) -> RateSolveResult:
    """Calculate the periodic loan rate equivalent to a lease."""
    flows = lease_cash_flows(price, periodic_payment, periods, upfront_fees, buyout)
    return solve_cash_flow_rate(flows)
