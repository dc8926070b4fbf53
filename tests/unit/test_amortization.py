import pytest

from finance.amortization import (
    amortization_schedule,
    amortize,
    calculate_financials,
    monthly_payment,
    remaining_balance,
)
from models import InvalidParametersError, InvestmentParameters


def _params(**overrides):
    base = dict(
        purchase_price=250000.0,
        renovation_cost=15000.0,
        closing_costs_percent=10.0,
        interest_rate=3.8,
        loan_term_years=30,
        down_payment_mode="percent",
        down_payment_value=20.0,
        monthly_rent=1200.0,
        monthly_maintenance=250.0,
    )
    base.update(overrides)
    return InvestmentParameters(**base)


def _closed_form(loan, rate_pct, years):
    r = rate_pct / 100 / 12
    n = years * 12
    return loan * r / (1 - (1 + r) ** -n)


@pytest.mark.parametrize("loan,rate,years", [(200000, 3.8, 30), (50000, 7.5, 10), (1_000_000, 1.2, 25)])
def test_payment_matches_closed_form(loan, rate, years):
    assert abs(monthly_payment(loan, rate, years) - _closed_form(loan, rate, years)) < 1e-9


def test_reference_payment_value():
    # 200k at 3.8% over 30 years
    assert monthly_payment(200000, 3.8, 30) == pytest.approx(931.92, abs=0.05)


def test_zero_rate_is_straight_line():
    assert monthly_payment(120000, 0.0, 10) == pytest.approx(1000.0)


def test_negative_rate_falls_back_to_straight_line():
    assert monthly_payment(120000, -0.5, 10) == pytest.approx(1000.0)


def test_no_loan_no_payment():
    assert monthly_payment(0, 3.8, 30) == 0.0
    assert monthly_payment(-10, 3.8, 30) == 0.0
    assert monthly_payment(0, 3.8, 0) == 0.0


def test_zero_term_with_loan_rejected():
    with pytest.raises(InvalidParametersError):
        monthly_payment(100000, 3.8, 0)
    with pytest.raises(ValueError):
        remaining_balance(100000, 3.8, 0, 12)


def test_balance_decays_to_zero_at_term():
    loan, rate, years = 200000, 3.8, 30
    pay = monthly_payment(loan, rate, years)
    assert amortize(loan, rate, pay, years * 12) == pytest.approx(0.0, abs=1e-4)


def test_amortize_tracks_closed_form_balance():
    loan, rate, years = 300000, 4.5, 25
    pay = monthly_payment(loan, rate, years)
    for months in (1, 12, 60, 180, 299):
        assert amortize(loan, rate, pay, months) == pytest.approx(
            remaining_balance(loan, rate, years, months), rel=1e-9, abs=1e-6
        )


def test_amortize_clamps_at_zero():
    assert amortize(1000, 5.0, 5000, 3) == 0.0
    assert amortize(0, 5.0, 100, 12) == 0.0


def test_remaining_balance_zero_rate_is_linear():
    assert remaining_balance(120000, 0.0, 10, 60) == pytest.approx(60000)
    assert remaining_balance(120000, 0.0, 10, 500) == 0.0


def test_schedule_sums_to_loan():
    df = amortization_schedule(200000, 3.8, 30)
    assert len(df) == 30
    assert df["Principal"].sum() == pytest.approx(200000, abs=0.01)
    assert df["Balance"].iloc[-1] == pytest.approx(0.0, abs=0.01)
    assert (df["Interest"].diff().dropna() < 0).all()


def test_reference_scenario():
    res = calculate_financials(_params())
    assert res.total_investment == pytest.approx(90000)
    assert res.loan_amount == pytest.approx(200000)
    assert res.monthly_payment == pytest.approx(_closed_form(200000, 3.8, 30))
    assert res.break_even_rent == pytest.approx(res.monthly_payment + 250)
    assert res.monthly_cashflow == pytest.approx(1200 - res.monthly_payment - 250)
    assert res.annual_cashflow == pytest.approx(res.monthly_cashflow * 12)
    assert res.roi == pytest.approx(res.monthly_cashflow * 12 / 90000 * 100)
    assert res.total_cost == pytest.approx(250000 + 25000 + 15000)
    assert res.amortization_years == pytest.approx(90000 / res.annual_cashflow)


def test_rent_above_break_even_has_finite_payback():
    res = calculate_financials(_params(monthly_rent=1500))
    assert res.amortization_years is not None
    assert 0 < res.amortization_years < float("inf")


def test_rent_at_or_below_break_even_has_no_payback():
    probe = calculate_financials(_params())
    res = calculate_financials(_params(monthly_rent=probe.break_even_rent))
    assert res.amortization_years is None
    res = calculate_financials(_params(monthly_rent=900))
    assert res.amortization_years is None
    assert res.roi < 0


def test_absolute_down_payment_covering_price():
    res = calculate_financials(_params(down_payment_mode="absolute", down_payment_value=300000))
    assert res.loan_amount == 0.0
    assert res.monthly_payment == 0.0
    assert res.break_even_rent == 250.0


def test_roi_zero_without_invested_capital():
    res = calculate_financials(
        _params(down_payment_value=0.0, closing_costs_percent=0.0, renovation_cost=0.0)
    )
    assert res.total_investment == 0.0
    assert res.roi == 0.0
