"""
Implied Rate Calculations

Recovers the periodic interest rate implied by a known fixed payment, by
bisection on the payment formula. Payment is strictly increasing in the rate
for a fixed principal and term, so a bracket that contains the target payment
always contains exactly one solution.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from loanmath.calculations.amortization import payment
from loanmath.calculations.validation import (
    require_finite,
    require_integer,
    require_non_negative,
    require_periods,
    require_positive,
)
from loanmath.config import get_settings
from loanmath.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

PaymentFunction = Callable[[float, float, int], float]


def _default_lower_bound() -> float:
    return get_settings().rate_lower_bound


def _default_upper_bound() -> float:
    return get_settings().rate_upper_bound


def _default_max_iterations() -> int:
    return get_settings().max_iterations


def _default_tolerance() -> float:
    return get_settings().tolerance


@dataclass(frozen=True)
class RateSolveRequest:
    """A rate search problem: which rate makes this loan cost this payment."""

    principal: float
    known_payment: float
    periods: int
    lower_bound: float = field(default_factory=_default_lower_bound)
    upper_bound: float = field(default_factory=_default_upper_bound)
    max_iterations: int = field(default_factory=_default_max_iterations)
    tolerance: float = field(default_factory=_default_tolerance)


@dataclass(frozen=True)
class RateSolveResult:
    """Outcome of a rate search.

    ``converged`` is False when the target is infeasible within the bracket or
    the iteration budget ran out; ``periodic_rate`` is then the best estimate.
    """

    periodic_rate: float
    iterations_used: int
    converged: bool


@dataclass(frozen=True)
class FeeAprResult:
    """Payment at the nominal rate and the fee-inclusive periodic rate."""

    periodic_payment: float
    nominal_rate: float
    periodic_rate: float
    iterations_used: int
    converged: bool


def validate_search(
    lower_bound: float,
    upper_bound: float,
    max_iterations: int,
    tolerance: float,
) -> Tuple[float, float, int, float]:
    """Check bisection controls shared by every solver."""
    lower_bound = require_non_negative("lower_bound", lower_bound)
    upper_bound = require_finite("upper_bound", upper_bound)
    if upper_bound <= lower_bound:
        raise InvalidInputError(
            "upper_bound", upper_bound, "must be greater than lower_bound"
        )
    max_iterations = require_integer("max_iterations", max_iterations)
    if max_iterations < 2:
        raise InvalidInputError("max_iterations", max_iterations, "must be at least 2")
    tolerance = require_positive("tolerance", tolerance)
    return lower_bound, upper_bound, max_iterations, tolerance


def solve_rate(
    request: RateSolveRequest,
    payment_fn: PaymentFunction = payment,
) -> RateSolveResult:
    """
    Find the periodic rate at which ``payment_fn`` reproduces the known payment.

    Every call to ``payment_fn``, including the two bracket checks, counts
    against ``request.max_iterations``.

    Args:
        request: Search problem and bisection controls
        payment_fn: Payment formula to invert (defaults to the amortization
            payment; replaceable for instrumentation)

    Returns:
        RateSolveResult with the estimated rate and convergence flag

    Raises:
        InvalidInputError: If the request violates a precondition
    """
    principal = require_positive("principal", request.principal)
    target = require_positive("known_payment", request.known_payment)
    periods = require_periods(request.periods)
    low, high, max_iterations, tolerance = validate_search(
        request.lower_bound,
        request.upper_bound,
        request.max_iterations,
        request.tolerance,
    )

    # Payment residual band, relative to the target
    band = tolerance * target

    evaluations = 1
    floor_payment = payment_fn(principal, low, periods)
    if floor_payment - target > band:
        logger.debug(
            f"Payment {target} below minimum {floor_payment} at rate {low}; "
            f"loan cannot amortize"
        )
        return RateSolveResult(periodic_rate=low, iterations_used=evaluations, converged=False)
    if abs(floor_payment - target) <= band:
        return RateSolveResult(periodic_rate=low, iterations_used=evaluations, converged=True)

    evaluations += 1
    ceiling_payment = payment_fn(principal, high, periods)
    if target - ceiling_payment > band:
        logger.debug(
            f"Payment {target} above {ceiling_payment} at rate ceiling {high}"
        )
        return RateSolveResult(periodic_rate=high, iterations_used=evaluations, converged=False)
    if abs(ceiling_payment - target) <= band:
        return RateSolveResult(periodic_rate=high, iterations_used=evaluations, converged=True)

    while evaluations < max_iterations:
        mid = (low + high) / 2
        evaluations += 1
        candidate = payment_fn(principal, mid, periods)

        if abs(candidate - target) <= band:
            logger.debug(f"Rate {mid} matched payment after {evaluations} evaluations")
            return RateSolveResult(periodic_rate=mid, iterations_used=evaluations, converged=True)

        if candidate > target:
            high = mid
        else:
            low = mid

        if high - low < tolerance:
            rate = (low + high) / 2
            logger.debug(f"Rate {rate} bracketed after {evaluations} evaluations")
            return RateSolveResult(periodic_rate=rate, iterations_used=evaluations, converged=True)

    rate = (low + high) / 2
    logger.debug(
        f"Rate search exhausted {max_iterations} evaluations; "
        f"best estimate {rate} (bracket width {high - low})"
    )
    return RateSolveResult(periodic_rate=rate, iterations_used=evaluations, converged=False)


def solve_rate_for(
    principal: float,
    known_payment: float,
    periods: int,
    bounds: Optional[Tuple[float, float]] = None,
    max_iterations: Optional[int] = None,
    tolerance: Optional[float] = None,
) -> RateSolveResult:
    """
    Solve for the periodic rate from plain arguments.

    Omitted controls fall back to the configured defaults.
    """
    settings = get_settings()
    lower_bound, upper_bound = bounds or (
        settings.rate_lower_bound,
        settings.rate_upper_bound,
    )
    request = RateSolveRequest(
        principal=principal,
        known_payment=known_payment,
        periods=periods,
        lower_bound=lower_bound,
        upper_bound=upper_bound,
        max_iterations=settings.max_iterations if max_iterations is None else max_iterations,
        tolerance=settings.tolerance if tolerance is None else tolerance,
    )
    return solve_rate(request)


def solve_apr_with_fees(
    principal: float,
    nominal_rate: float,
    periods: int,
    fees: float,
) -> FeeAprResult:
    """
    Calculate the fee-inclusive periodic rate of a loan.

    The borrower repays the payment computed on the full principal at the
    nominal rate but only receives ``principal - fees``; the rate that equates
    the two is the periodic APR. Multiply by the periods per year to annualize.

    Args:
        principal: Loan principal amount
        nominal_rate: Stated periodic interest rate
        periods: Number of payment periods
        fees: Up-front fees deducted from the amount financed

    Returns:
        FeeAprResult with the payment and the fee-inclusive periodic rate
    """
    principal = require_positive("principal", principal)
    fees = require_non_negative("fees", fees)
    if fees >= principal:
        raise InvalidInputError("fees", fees, "must be less than principal")

    periodic_payment = payment(principal, nominal_rate, periods)
    nominal_rate = float(nominal_rate)

    if fees == 0:
        return FeeAprResult(
            periodic_payment=periodic_payment,
            nominal_rate=nominal_rate,
            periodic_rate=nominal_rate,
            iterations_used=0,
            converged=True,
        )

    amount_financed = principal - fees
    result = solve_rate_for(amount_financed, periodic_payment, periods)
    if not result.converged:
        logger.debug(
            f"Fee APR did not converge for amount financed {amount_financed}"
        )

    return FeeAprResult(
        periodic_payment=periodic_payment,
        nominal_rate=nominal_rate,
        periodic_rate=result.periodic_rate,
        iterations_used=result.iterations_used,
        converged=result.converged,
    )


def is_payment_sufficient(principal: float, known_payment: float, periods: int) -> bool:
    """Whether a payment can retire the principal at some non-negative rate."""
    principal = require_positive("principal", principal)
    known_payment = require_positive("known_payment", known_payment)
    periods = require_periods(periods)
    return known_payment >= principal / periods or math.isclose(
        known_payment, principal / periods
    )
