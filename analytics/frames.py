# DataFrame builders for the Altair charts in app.py
import pandas as pd

from models import InvestmentParameters, ScenarioProjection, WealthRace


def projection_dataframe(projection: ScenarioProjection) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Year": [p.year for p in projection.points],
            "Rent": [p.annual_rent for p in projection.points],
            "Expenses": [p.annual_expenses for p in projection.points],
            "Cashflow": [p.annual_cashflow for p in projection.points],
            "Cumulative": [p.cumulative_cashflow for p in projection.points],
            "Loan_Active": [p.loan_active for p in projection.points],
        }
    )


def exit_comparison_dataframe(points) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Years": [p.year for p in points],
            "Keep_And_Rent": [p.wealth_keep for p in points],
            "Sell_And_Invest": [p.wealth_sell for p in points],
            "Sale_Proceeds": [p.sale_proceeds for p in points],
        }
    )


def wealth_race_dataframe(race: WealthRace) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Year": [p.year for p in race.points],
            "Savings_Account": [p.safe_balance for p in race.points],
            "Index_Fund": [p.growth_balance for p in race.points],
            "Target": [p.target for p in race.points],
        }
    )


def cost_breakdown(params: InvestmentParameters) -> pd.DataFrame:
    """Return DataFrame with categories and amounts for the acquisition cost donut."""
    data = {
        "Category": ["Purchase price", "Closing costs", "Renovation"],
        "Amount": [params.purchase_price, params.closing_costs, params.renovation_cost],
    }
    return pd.DataFrame(data)


def long_format(df: pd.DataFrame, id_col: str, value_cols, var_name: str = "Scenario", value_name: str = "Value") -> pd.DataFrame:
    """Melt wide series into the long shape Altair colour encodings expect."""
    return pd.melt(df, id_vars=[id_col], value_vars=list(value_cols), var_name=var_name, value_name=value_name)
