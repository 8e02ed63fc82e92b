"""
Loan Amortization Calculations

Implements fixed-payment amortization: the periodic payment, the totals paid
over the term, outstanding balances and a period-by-period schedule.
All rates are periodic (e.g. an annual rate divided by 12 for monthly loans).
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from loanmath.calculations.validation import (
    require_integer,
    require_non_negative,
    require_periods,
)
from loanmath.exceptions import InvalidInputError

# Above this exponent (1+r)^n overflows a float; the payment has converged
# to pure interest by then.
MAX_GROWTH_EXPONENT = 700.0


@dataclass(frozen=True)
class LoanTerms:
    """One amortizing obligation."""

    principal: float
    periodic_rate: float
    periods: int

    def payment(self) -> float:
        return payment(self.principal, self.periodic_rate, self.periods)

    def totals(self) -> "AmortizationResult":
        return totals(self.principal, self.periodic_rate, self.periods)


@dataclass(frozen=True)
class AmortizationResult:
    """Payment and lifetime totals for a fixed-rate loan."""

    periodic_payment: float
    total_paid: float
    total_interest: float


@dataclass(frozen=True)
class AmortizationRow:
    """A single period of an amortization schedule."""

    period: int
    date: Optional[date]
    beginning_balance: float
    payment: float
    interest: float
    principal: float
    ending_balance: float


def _payment(principal: float, periodic_rate: float, periods: int) -> float:
    """Payment formula on already-validated inputs."""
    if periodic_rate == 0:
        return principal / periods

    growth = periods * math.log1p(periodic_rate)
    if growth > MAX_GROWTH_EXPONENT:
        return principal * periodic_rate

    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    return principal * periodic_rate * math.exp(growth) / math.expm1(growth)


def payment(principal: float, periodic_rate: float, periods: int) -> float:
    """
    Calculate the fixed periodic loan payment.

    Matches Excel's PMT() function (sign flipped to a positive amount).

    Args:
        principal: Loan principal amount
        periodic_rate: Interest rate per payment period (e.g., 0.005 for 0.5%)
        periods: Number of payment periods

    Returns:
        Periodic payment amount (non-negative)

    Raises:
        InvalidInputError: If principal or periodic_rate is negative or not finite
        InvalidTermError: If periods is not a positive whole number
    """
    principal = require_non_negative("principal", principal)
    periodic_rate = require_non_negative("periodic_rate", periodic_rate)
    periods = require_periods(periods)
    return _payment(principal, periodic_rate, periods)


def totals(principal: float, periodic_rate: float, periods: int) -> AmortizationResult:
    """Calculate the payment together with total paid and total interest."""
    periodic_payment = payment(principal, periodic_rate, periods)
    total_paid = periodic_payment * int(periods)
    return AmortizationResult(
        periodic_payment=periodic_payment,
        total_paid=total_paid,
        total_interest=total_paid - float(principal),
    )


def remaining_balance(
    principal: float,
    periodic_rate: float,
    periods: int,
    payments_made: int,
) -> float:
    """Calculate remaining loan balance after N scheduled payments."""
    principal = require_non_negative("principal", principal)
    periodic_rate = require_non_negative("periodic_rate", periodic_rate)
    periods = require_periods(periods)
    payments_made = require_integer("payments_made", payments_made)
    if payments_made < 0 or payments_made > periods:
        raise InvalidInputError(
            "payments_made", payments_made, f"must be between 0 and {periods}"
        )

    if payments_made == periods:
        return 0.0

    pmt = _payment(principal, periodic_rate, periods)

    if periodic_rate == 0:
        return max(0.0, principal - pmt * payments_made)

    growth = payments_made * math.log1p(periodic_rate)
    balance = principal * math.exp(growth) - pmt * (math.expm1(growth) / periodic_rate)

    return max(0.0, balance)


def balloon_payment(
    principal: float,
    periodic_rate: float,
    amortization_periods: int,
    balloon_period: int,
) -> float:
    """
    Calculate the lump sum due when a loan is called before it amortizes.

    Payments are sized as if the loan ran for ``amortization_periods``; the
    balance still outstanding after ``balloon_period`` payments is due at once.
    """
    amortization_periods = require_periods(amortization_periods, "amortization_periods")
    balloon_period = require_periods(balloon_period, "balloon_period")
    if balloon_period > amortization_periods:
        raise InvalidInputError(
            "balloon_period",
            balloon_period,
            "must not exceed the amortization period",
        )
    return remaining_balance(
        principal, periodic_rate, amortization_periods, balloon_period
    )


def amortization_schedule(
    principal: float,
    periodic_rate: float,
    periods: int,
    extra_payment: float = 0.0,
    start_date: Optional[date] = None,
) -> List[AmortizationRow]:
    """
    Generate a full amortization schedule.

    Args:
        principal: Loan principal amount
        periodic_rate: Interest rate per period
        periods: Number of scheduled payments
        extra_payment: Additional principal paid every period
        start_date: Date of first payment; rows are undated when omitted

    Returns:
        List of amortization rows, shorter than ``periods`` when extra
        payments retire the loan early
    """
    principal = require_non_negative("principal", principal)
    periodic_rate = require_non_negative("periodic_rate", periodic_rate)
    periods = require_periods(periods)
    extra_payment = require_non_negative("extra_payment", extra_payment)

    base_payment = _payment(principal, periodic_rate, periods)
    schedule: List[AmortizationRow] = []
    balance = principal

    for period in range(1, periods + 1):
        if balance <= 0:
            break

        interest = balance * periodic_rate

        if period == periods:
            # Final scheduled payment clears any rounding residue
            principal_pmt = balance
        else:
            principal_pmt = min(base_payment + extra_payment - interest, balance)

        ending_balance = balance - principal_pmt

        period_date = None
        if start_date is not None:
            period_date = start_date + relativedelta(months=period - 1)

        schedule.append(
            AmortizationRow(
                period=period,
                date=period_date,
                beginning_balance=balance,
                payment=principal_pmt + interest,
                interest=interest,
                principal=principal_pmt,
                ending_balance=ending_balance,
            )
        )

        balance = ending_balance

    return schedule


def schedule_total_interest(schedule: List[AmortizationRow]) -> float:
    """Calculate total interest paid over a schedule."""
    return sum(row.interest for row in schedule)
