from analytics.exit_comparison import round_currency
from models import InvalidParametersError, WealthRace, WealthRacePoint

SAFE_RATE = 1.0  # savings account, annual %
GROWTH_RATE = 7.0  # broad index fund, annual %
MAX_YEARS = 30
MIN_YEARS = 5


def wealth_race(
    target: float,
    initial_capital: float,
    monthly_contribution: float,
    safe_rate: float = SAFE_RATE,
    growth_rate: float = GROWTH_RATE,
    max_years: int = MAX_YEARS,
    min_years: int = MIN_YEARS,
) -> WealthRace:
    """Compound two savings tracks yearly until both reach `target`.

    Each year: balance = balance * (1 + rate) + 12 * monthly_contribution.
    The series always runs past `min_years` so a quick win still shows a curve.
    """
    if max_years < 0 or min_years < 0:
        raise InvalidParametersError("max_years and min_years must be >= 0")

    safe = growth = float(initial_capital)
    reached_safe = reached_growth = None
    points = []

    for year in range(max_years + 1):
        if reached_safe is None and safe >= target:
            reached_safe = year
        if reached_growth is None and growth >= target:
            reached_growth = year

        points.append(
            WealthRacePoint(
                year=year,
                safe_balance=round_currency(safe),
                growth_balance=round_currency(growth),
                target=target,
            )
        )

        safe = safe * (1 + safe_rate / 100.0) + monthly_contribution * 12
        growth = growth * (1 + growth_rate / 100.0) + monthly_contribution * 12

        if reached_safe is not None and reached_growth is not None and year > min_years:
            break

    return WealthRace(
        points=tuple(points),
        years_to_target_safe=reached_safe,
        years_to_target_growth=reached_growth,
    )
