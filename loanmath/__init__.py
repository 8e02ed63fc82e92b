"""
Loan math engine: amortization payments and implied-rate solving.
"""

from loanmath.calculations.amortization import (
    AmortizationResult,
    AmortizationRow,
    LoanTerms,
    amortization_schedule,
    balloon_payment,
    payment,
    remaining_balance,
    schedule_total_interest,
    totals,
)
from loanmath.calculations.cash_flow import (
    lease_equivalent_rate,
    net_present_value,
    solve_cash_flow_rate,
)
from loanmath.calculations.rate_solver import (
    FeeAprResult,
    RateSolveRequest,
    RateSolveResult,
    is_payment_sufficient,
    solve_apr_with_fees,
    solve_rate,
    solve_rate_for,
)
from loanmath.exceptions import InvalidInputError, InvalidTermError, LoanMathError

__all__ = [
    "AmortizationResult",
    "AmortizationRow",
    "FeeAprResult",
    "InvalidInputError",
    "InvalidTermError",
    "LoanMathError",
    "LoanTerms",
    "RateSolveRequest",
    "RateSolveResult",
    "amortization_schedule",
    "balloon_payment",
    "is_payment_sufficient",
    "lease_equivalent_rate",
    "net_present_value",
    "payment",
    "remaining_balance",
    "schedule_total_interest",
    "solve_apr_with_fees",
    "solve_cash_flow_rate",
    "solve_rate",
    "solve_rate_for",
    "totals",
]
