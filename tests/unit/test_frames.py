from analytics.exit_comparison import compare_exit
from analytics.frames import (
    cost_breakdown,
    exit_comparison_dataframe,
    long_format,
    projection_dataframe,
    wealth_race_dataframe,
)
from analytics.projection import project_scenario
from analytics.wealth import wealth_race
from finance.amortization import calculate_financials
from models import InvestmentParameters, ScenarioKnobs

PARAMS = InvestmentParameters(
    purchase_price=250000.0, renovation_cost=15000.0, closing_costs_percent=10.0,
    interest_rate=3.8, loan_term_years=30, down_payment_mode="percent",
    down_payment_value=20.0, monthly_rent=1200.0, monthly_maintenance=250.0,
)


def test_projection_frame_columns():
    proj = project_scenario(PARAMS, calculate_financials(PARAMS), ScenarioKnobs())
    df = projection_dataframe(proj)
    assert list(df.columns) == ["Year", "Rent", "Expenses", "Cashflow", "Cumulative", "Loan_Active"]
    assert len(df) == 40
    assert df["Loan_Active"].sum() == 30


def test_exit_frame_and_melt():
    points = compare_exit(PARAMS, calculate_financials(PARAMS), ScenarioKnobs())
    df = exit_comparison_dataframe(points)
    assert df["Years"].tolist() == list(range(21))
    melted = long_format(df, "Years", ["Keep_And_Rent", "Sell_And_Invest"], value_name="Wealth")
    assert len(melted) == 42
    assert set(melted["Scenario"]) == {"Keep_And_Rent", "Sell_And_Invest"}


def test_wealth_frame_target_line():
    df = wealth_race_dataframe(wealth_race(50000, 5000, 500))
    assert (df["Target"] == 50000).all()
    assert df["Index_Fund"].iloc[-1] > df["Savings_Account"].iloc[-1]


def test_cost_breakdown_sums_to_total_cost():
    df = cost_breakdown(PARAMS)
    assert df["Amount"].sum() == PARAMS.total_cost
