import pytest

from finance.affordability import max_affordable_price
from finance.amortization import monthly_payment
from models import InvalidParametersError


def test_dti_cap_binds():
    res = max_affordable_price(3500, 1200, 0, 3.8, 30, equity=50000)
    assert res.max_monthly_payment == pytest.approx(1400)
    expected_loan = 1400 / monthly_payment(200000, 3.8, 30) * 200000
    assert res.max_loan == pytest.approx(expected_loan, rel=1e-9)
    assert res.max_loan == pytest.approx(300_455, rel=1e-3)
    assert res.max_price == pytest.approx((res.max_loan + 50000) / 1.1)


def test_surplus_binds():
    res = max_affordable_price(3000, 2000, 300, 3.8, 30, equity=0)
    assert res.max_monthly_payment == pytest.approx(700)


def test_loan_pays_off_with_budget():
    res = max_affordable_price(5000, 1500, 0, 4.2, 25, equity=0)
    assert monthly_payment(res.max_loan, 4.2, 25) == pytest.approx(res.max_monthly_payment)


def test_negative_surplus_floors_at_zero():
    res = max_affordable_price(2000, 2500, 100, 3.8, 30, equity=40000)
    assert res.max_monthly_payment == 0.0
    assert res.max_loan == 0.0
    assert res.max_price == pytest.approx(40000 / 1.1)


def test_zero_rate_grants_no_loan():
    res = max_affordable_price(3500, 1200, 0, 0.0, 30, equity=22000)
    assert res.max_monthly_payment == pytest.approx(1400)
    assert res.max_loan == 0.0
    assert res.max_price == pytest.approx(20000)


def test_custom_cap_and_closing_costs():
    res = max_affordable_price(4000, 1000, 0, 3.0, 20, equity=10000, dti_cap=0.3, closing_cost_rate=0.05)
    assert res.max_monthly_payment == pytest.approx(1200)
    assert res.max_price == pytest.approx((res.max_loan + 10000) / 1.05)


@pytest.mark.parametrize(
    "kwargs",
    [dict(term_years=0), dict(dti_cap=1.5), dict(dti_cap=-0.1), dict(closing_cost_rate=-1.0)],
)
def test_rejects_degenerate_inputs(kwargs):
    args = dict(net_income=3500, living_expenses=1200, existing_loans=0, interest_rate=3.8, term_years=30, equity=0)
    args.update(kwargs)
    with pytest.raises(InvalidParametersError):
        max_affordable_price(**args)
