import math

import numpy as np

from finance.amortization import amortize
from models import ExitComparisonPoint, FinancialResult, InvestmentParameters, ScenarioKnobs

HORIZON_YEARS = 20
SELLING_COSTS_RATE = 0.03  # broker + legal when selling


def round_currency(value: float) -> int:
    """Half-up rounding to whole currency units."""
    return int(math.floor(value + 0.5))


def compare_exit(
    params: InvestmentParameters,
    result: FinancialResult,
    knobs: ScenarioKnobs,
    horizon_years: int = HORIZON_YEARS,
):
    """Wealth paths for keeping the property vs. selling now and investing the equity.

    Keep & rent (year t):  (property value - loan balance) + cumulative net rent.
    Sell & invest (year t): total_investment * (1 + alternative_return)^t.

    The sell path compounds the invested capital only; selling costs and tax
    are reported per year as `sale_proceeds` and do not feed `wealth_sell`.
    """
    start_value = params.purchase_price + params.renovation_cost
    property_value = start_value
    balance = result.loan_amount
    current_rent = knobs.rent_for(params)
    current_maintenance = params.monthly_maintenance
    cumulative_cashflow = 0.0

    years = np.arange(horizon_years + 1)
    sell_path = max(0.0, result.total_investment) * np.power(1 + knobs.alternative_return / 100.0, years)

    points = []
    for year in years:
        wealth_keep = (property_value - balance) + cumulative_cashflow

        taxable_gain = max(0.0, property_value - start_value)
        tax = taxable_gain * (knobs.selling_tax_percent / 100.0)
        sale_proceeds = property_value * (1 - SELLING_COSTS_RATE) - balance - tax

        points.append(
            ExitComparisonPoint(
                year=int(year),
                wealth_keep=round_currency(wealth_keep),
                wealth_sell=round_currency(float(sell_path[year])),
                sale_proceeds=round_currency(sale_proceeds),
            )
        )

        # Roll forward into the next year
        property_value *= 1 + knobs.property_appreciation / 100.0
        balance = amortize(balance, params.interest_rate, result.monthly_payment, 12)

        loan_active = year + 1 <= params.loan_term_years
        annual_cost = (result.monthly_payment * 12 if loan_active else 0.0) + current_maintenance * 12
        cumulative_cashflow += current_rent * 12 - annual_cost

        current_rent *= 1 + knobs.indexation_rate / 100.0
        current_maintenance *= 1 + knobs.inflation_rate / 100.0

    return points
