from typing import Optional

from models import (
    FinancialResult,
    InvestmentParameters,
    ProjectionPoint,
    RentScenario,
    ScenarioKnobs,
    ScenarioProjection,
)

POST_LOAN_YEARS = 10


def static_break_even(result: FinancialResult, monthly_rent: float, monthly_maintenance: float) -> Optional[float]:
    """Payback in years from the first year's cashflow alone (no indexation)."""
    monthly_cashflow = monthly_rent - (result.monthly_payment + monthly_maintenance)
    if monthly_cashflow > 0:
        return result.total_investment / (monthly_cashflow * 12)
    return None


def project_scenario(
    params: InvestmentParameters, result: FinancialResult, knobs: ScenarioKnobs
) -> ScenarioProjection:
    """
    Year-by-year cashflow projection over the loan term plus POST_LOAN_YEARS.

    Cumulative cashflow starts at -total_investment. The dynamic break-even is
    interpolated inside the year where the running total first turns
    non-negative: (year - 1) + |previous total| / annual cashflow.
    """
    rent = knobs.rent_for(params)
    current_rent = rent
    current_maintenance = params.monthly_maintenance
    horizon = params.loan_term_years + POST_LOAN_YEARS

    accumulated = -result.total_investment
    dynamic = 0.0 if accumulated >= 0 else None
    points = []

    for year in range(1, horizon + 1):
        annual_rent = current_rent * 12
        loan_active = year <= params.loan_term_years
        annual_loan_cost = result.monthly_payment * 12 if loan_active else 0.0
        annual_expenses = annual_loan_cost + current_maintenance * 12
        annual_cashflow = annual_rent - annual_expenses

        previous = accumulated
        accumulated += annual_cashflow

        if dynamic is None and accumulated >= 0:
            dynamic = (year - 1) + abs(previous) / annual_cashflow

        points.append(
            ProjectionPoint(
                year=year,
                annual_rent=annual_rent,
                annual_expenses=annual_expenses,
                annual_cashflow=annual_cashflow,
                cumulative_cashflow=accumulated,
                loan_active=loan_active,
            )
        )

        current_rent *= 1 + knobs.indexation_rate / 100.0
        current_maintenance *= 1 + knobs.inflation_rate / 100.0

    return ScenarioProjection(
        points=tuple(points),
        dynamic_break_even=dynamic,
        static_break_even=static_break_even(result, rent, params.monthly_maintenance),
        horizon_years=horizon,
    )


def rent_scenario(result: FinancialResult, params: InvestmentParameters, simulated_rent: float) -> RentScenario:
    monthly_cashflow = simulated_rent - (result.monthly_payment + params.monthly_maintenance)
    roi = (monthly_cashflow * 12 / result.total_investment) * 100 if result.total_investment > 0 else 0.0
    return RentScenario(
        monthly_cashflow=monthly_cashflow,
        roi=roi,
        cashflow_change=monthly_cashflow - result.monthly_cashflow,
    )


def required_rent_for_roi(result: FinancialResult, params: InvestmentParameters, target_roi: float) -> float:
    """Monthly rent that yields `target_roi` percent cash-on-cash, rounded to cents."""
    monthly_cashflow_needed = (target_roi / 100.0) * result.total_investment / 12
    expenses = result.monthly_payment + params.monthly_maintenance
    return round(monthly_cashflow_needed + expenses, 2)
