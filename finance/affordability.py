from models import AffordabilityResult, InvalidParametersError

DTI_CAP = 0.4
CLOSING_COST_RATE = 0.10


def max_affordable_price(
    net_income: float,
    living_expenses: float,
    existing_loans: float,
    interest_rate: float,
    term_years: int,
    equity: float,
    dti_cap: float = DTI_CAP,
    closing_cost_rate: float = CLOSING_COST_RATE,
) -> AffordabilityResult:
    """
    Largest purchase price a household can carry.

    The monthly budget for debt service is the stricter of
      - household surplus: income - living expenses - existing loan payments
      - DTI cap: dti_cap * net income
    and is floored at zero. The budget is turned into a loan with the inverse
    annuity formula  PV = PMT * (1 - (1 + r)^-n) / r.

    Closing costs are treated as a flat fraction of the price, so
      price * (1 + closing_cost_rate) = loan + equity.

    interest_rate is a nominal annual percentage; with a zero (or negative)
    rate no loan is granted and the price is funded by equity alone.
    """
    if term_years <= 0:
        raise InvalidParametersError("term_years must be > 0")
    if not 0.0 <= dti_cap <= 1.0:
        raise InvalidParametersError("dti_cap must be within [0, 1]")
    if closing_cost_rate <= -1.0:
        raise InvalidParametersError("closing_cost_rate must be > -1")

    surplus = net_income - living_expenses - existing_loans
    dti_limit = net_income * dti_cap
    safe_rate = max(0.0, min(surplus, dti_limit))

    if safe_rate > 0 and interest_rate > 0:
        r = interest_rate / 100.0 / 12.0
        n = term_years * 12
        max_loan = safe_rate * (1 - (1 + r) ** -n) / r
    else:
        max_loan = 0.0

    return AffordabilityResult(
        max_monthly_payment=safe_rate,
        max_loan=max_loan,
        max_price=(max_loan + equity) / (1 + closing_cost_rate),
    )
