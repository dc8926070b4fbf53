import dataclasses
import math

import pytest

from models import InvalidParametersError, InvestmentParameters, ScenarioKnobs

BASE = dict(
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


def test_derived_amounts():
    p = InvestmentParameters(**BASE)
    assert p.closing_costs == pytest.approx(25000)
    assert p.down_payment == pytest.approx(50000)
    assert p.loan_amount == pytest.approx(200000)
    assert p.total_investment == pytest.approx(90000)
    assert p.total_cost == pytest.approx(290000)


def test_absolute_down_payment():
    p = InvestmentParameters(**{**BASE, "down_payment_mode": "absolute", "down_payment_value": 60000})
    assert p.down_payment == 60000
    assert p.loan_amount == 190000


def test_parameters_are_immutable():
    p = InvestmentParameters(**BASE)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.monthly_rent = 2000


@pytest.mark.parametrize("term", [0, -5])
def test_rejects_non_positive_term(term):
    with pytest.raises(InvalidParametersError, match="loan_term_years"):
        InvestmentParameters(**{**BASE, "loan_term_years": term})


@pytest.mark.parametrize("field", ["purchase_price", "renovation_cost", "monthly_rent", "monthly_maintenance"])
def test_rejects_negative_amounts(field):
    with pytest.raises(InvalidParametersError, match=field):
        InvestmentParameters(**{**BASE, field: -1.0})


@pytest.mark.parametrize("value", [math.nan, math.inf])
def test_rejects_non_finite(value):
    with pytest.raises(InvalidParametersError):
        InvestmentParameters(**{**BASE, "purchase_price": value})


def test_rejects_unknown_down_payment_mode():
    with pytest.raises(InvalidParametersError):
        InvestmentParameters(**{**BASE, "down_payment_mode": "fraction"})


def test_negative_interest_rate_is_allowed():
    InvestmentParameters(**{**BASE, "interest_rate": -0.5})


def test_validation_error_is_a_value_error():
    assert issubclass(InvalidParametersError, ValueError)


def test_knobs_rent_overlay():
    p = InvestmentParameters(**BASE)
    assert ScenarioKnobs().rent_for(p) == 1200.0
    assert ScenarioKnobs(simulated_rent=1400.0).rent_for(p) == 1400.0
    assert p.monthly_rent == 1200.0


def test_knobs_reject_bad_values():
    with pytest.raises(InvalidParametersError):
        ScenarioKnobs(simulated_rent=-1.0)
    with pytest.raises(InvalidParametersError):
        ScenarioKnobs(indexation_rate=math.nan)
