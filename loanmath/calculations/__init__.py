"""
Financial Calculation Engine

Fixed-rate amortization and the implied-rate solvers built on it.
"""

from loanmath.calculations import amortization, rate_solver, cash_flow, rates

__all__ = ["amortization", "rate_solver", "cash_flow", "rates"]
