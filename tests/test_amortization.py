"""
Tests for the amortization engine.
"""

import math

import numpy as np
import pytest
from datetime import date

from loanmath.calculations.amortization import (
    LoanTerms,
    amortization_schedule,
    balloon_payment,
    payment,
    remaining_balance,
    schedule_total_interest,
    totals,
)
from loanmath.exceptions import InvalidInputError, InvalidTermError


class TestPayment:
    """Test the fixed periodic payment formula."""

    def test_boundary_mortgage(self, mortgage):
        """$100K at 0.5% per month for 360 months is about $599.55."""
        pmt = payment(**mortgage)
        assert abs(pmt - 599.55) < 0.01

    def test_matches_known_mortgage(self):
        """$400K at 7% annual for 30 years is $2,661.21/month."""
        pmt = payment(400000, 0.07 / 12, 360)
        assert abs(pmt - 2661.21) < 0.01

    def test_million_dollar_loan(self):
        """$1M at 5% annual for 30 years is around $5,368/month."""
        pmt = payment(1000000, 0.05 / 12, 360)
        assert 5300 < pmt < 5500

    @pytest.mark.parametrize(
        "principal,periods",
        [(0, 1), (1200, 12), (100000, 360), (333.33, 7), (1e9, 480)],
    )
    def test_zero_rate_is_straight_line(self, principal, periods):
        assert payment(principal, 0, periods) == pytest.approx(principal / periods)

    def test_zero_principal(self):
        assert payment(0, 0.01, 60) == 0.0

    def test_single_period(self):
        """One period: principal plus one period of interest."""
        assert payment(1000, 0.1, 1) == pytest.approx(1100)

    def test_monotonic_in_rate(self):
        """Payment strictly increases with the rate."""
        rates = [0, 1e-9, 0.0001, 0.001, 0.005, 0.01, 0.05, 0.25, 1.0]
        payments = [payment(100000, r, 360) for r in rates]
        for lower, higher in zip(payments, payments[1:]):
            assert lower < higher

    def test_total_paid_covers_principal(self):
        for rate in [0.0001, 0.004, 0.02]:
            assert payment(50000, rate, 120) * 120 > 50000

    def test_huge_growth_stays_finite(self):
        """(1+r)^n beyond float range falls back to pure interest."""
        pmt = payment(1000, 1.0, 2000)
        assert math.isfinite(pmt)
        assert pmt == pytest.approx(1000)

    def test_tiny_rate_does_not_divide_by_zero(self):
        pmt = payment(100000, 1e-18, 360)
        assert pmt == pytest.approx(100000 / 360)

    def test_integral_float_term_accepted(self):
        assert payment(1200, 0, 12.0) == 100


class TestPaymentValidation:
    """Test contract violations raise instead of being corrected."""

    @pytest.mark.parametrize("periods", [0, -12, 12.5, True, "360", None])
    def test_invalid_term(self, periods):
        with pytest.raises(InvalidTermError):
            payment(1000, 0.01, periods)

    def test_negative_principal(self):
        with pytest.raises(InvalidInputError) as exc_info:
            payment(-1000, 0.01, 12)
        assert exc_info.value.field == "principal"

    def test_negative_rate(self):
        with pytest.raises(InvalidInputError) as exc_info:
            payment(1000, -0.01, 12)
        assert exc_info.value.field == "periodic_rate"

    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_non_finite_principal(self, bad):
        with pytest.raises(InvalidInputError):
            payment(bad, 0.01, 12)

    def test_term_error_is_input_error(self):
        """Callers can catch one error type for every violation."""
        with pytest.raises(InvalidInputError):
            payment(1000, 0.01, 0)
        with pytest.raises(ValueError):
            payment(1000, 0.01, 0)


class TestTotals:
    """Test derived totals."""

    @pytest.mark.parametrize(
        "principal,rate,periods",
        [(100000, 0.005, 360), (25000, 0.0, 60), (0, 0.01, 12), (7500, 0.015, 36)],
    )
    def test_totals_consistency(self, principal, rate, periods):
        result = totals(principal, rate, periods)
        assert result.periodic_payment == payment(principal, rate, periods)
        assert result.total_paid == pytest.approx(result.periodic_payment * periods)
        assert result.total_interest == pytest.approx(result.total_paid - principal)

    def test_zero_rate_has_no_interest(self):
        result = totals(1200, 0, 12)
        assert result.total_paid == pytest.approx(1200)
        assert result.total_interest == pytest.approx(0)

    def test_boundary_totals(self, mortgage):
        result = totals(**mortgage)
        assert abs(result.total_paid - 215838.19) < 1
        assert abs(result.total_interest - 115838.19) < 1

    def test_loan_terms_delegates(self, mortgage):
        terms = LoanTerms(**mortgage)
        assert terms.payment() == payment(**mortgage)
        assert terms.totals() == totals(**mortgage)

    def test_loan_terms_immutable(self, mortgage):
        terms = LoanTerms(**mortgage)
        with pytest.raises(AttributeError):
            terms.principal = 1


class TestRemainingBalance:
    """Test outstanding balance calculations."""

    def test_no_payments_made(self, mortgage):
        assert remaining_balance(**mortgage, payments_made=0) == pytest.approx(100000)

    def test_fully_paid(self, mortgage):
        assert remaining_balance(**mortgage, payments_made=360) == 0.0

    def test_zero_rate(self):
        assert remaining_balance(1200, 0, 12, 6) == pytest.approx(600)

    def test_matches_schedule(self):
        schedule = amortization_schedule(100000, 0.005, 360)
        balance = remaining_balance(100000, 0.005, 360, 120)
        assert balance == pytest.approx(schedule[119].ending_balance)

    def test_numpy_integer_payments_made(self, mortgage):
        balance = remaining_balance(**mortgage, payments_made=np.int64(120))
        assert balance == remaining_balance(**mortgage, payments_made=120)

    @pytest.mark.parametrize("payments_made", [-1, 361, 1.5])
    def test_out_of_range(self, mortgage, payments_made):
        with pytest.raises(InvalidInputError):
            remaining_balance(**mortgage, payments_made=payments_made)


class TestBalloonPayment:
    """Test balloon payment calculations."""

    def test_five_year_balloon(self):
        """6% 30-year loan called after 5 years owes about $93K of $100K."""
        balloon = balloon_payment(100000, 0.005, 360, 60)
        assert 93000 < balloon < 93100

    def test_balloon_at_maturity_is_zero(self):
        assert balloon_payment(100000, 0.005, 360, 360) == 0.0

    def test_balloon_after_term_rejected(self):
        with pytest.raises(InvalidInputError):
            balloon_payment(100000, 0.005, 360, 361)

    def test_balloon_period_must_be_positive(self):
        with pytest.raises(InvalidTermError):
            balloon_payment(100000, 0.005, 360, 0)


class TestAmortizationSchedule:
    """Test period-by-period schedules."""

    def test_schedule_length(self):
        schedule = amortization_schedule(100000, 0.005, 60)
        assert len(schedule) == 60

    def test_final_balance_zero(self):
        schedule = amortization_schedule(100000, 0.005, 60)
        assert schedule[-1].ending_balance == 0.0

    def test_first_period_interest(self):
        schedule = amortization_schedule(100000, 0.005, 360)
        first = schedule[0]
        assert first.interest == pytest.approx(500)
        assert first.principal == pytest.approx(first.payment - 500)
        assert first.payment == pytest.approx(payment(100000, 0.005, 360))

    def test_balance_decreases(self):
        schedule = amortization_schedule(100000, 0.005, 360)
        for prev, row in zip(schedule, schedule[1:]):
            assert row.ending_balance < prev.ending_balance
            assert row.beginning_balance == prev.ending_balance

    def test_principal_sums_to_loan(self):
        schedule = amortization_schedule(25000, 0.004, 48)
        assert sum(row.principal for row in schedule) == pytest.approx(25000)

    def test_total_interest_matches_totals(self):
        schedule = amortization_schedule(25000, 0.004, 48)
        expected = totals(25000, 0.004, 48).total_interest
        assert schedule_total_interest(schedule) == pytest.approx(expected, rel=1e-9)

    def test_extra_payment_shortens_schedule(self):
        base = amortization_schedule(100000, 0.005, 360)
        accelerated = amortization_schedule(100000, 0.005, 360, extra_payment=200)
        assert len(accelerated) < len(base)
        assert accelerated[-1].ending_balance == 0.0
        assert schedule_total_interest(accelerated) < schedule_total_interest(base)

    def test_last_extra_payment_capped(self):
        schedule = amortization_schedule(1000, 0.01, 12, extra_payment=500)
        last = schedule[-1]
        assert last.payment == pytest.approx(last.beginning_balance + last.interest)

    def test_dates(self):
        schedule = amortization_schedule(
            1200, 0, 12, start_date=date(2025, 1, 31)
        )
        assert schedule[0].date == date(2025, 1, 31)
        assert schedule[1].date == date(2025, 2, 28)
        assert schedule[11].date == date(2025, 12, 31)

    def test_undated_by_default(self):
        schedule = amortization_schedule(1200, 0, 12)
        assert all(row.date is None for row in schedule)

    def test_zero_principal_empty(self):
        assert amortization_schedule(0, 0.01, 12) == []

    def test_negative_extra_payment(self):
        with pytest.raises(InvalidInputError):
            amortization_schedule(1000, 0.01, 12, extra_payment=-5)
