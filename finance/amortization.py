import pandas as pd

from models import FinancialResult, InvalidParametersError, InvestmentParameters


def monthly_payment(loan_amount: float, annual_rate_percent: float, term_years: int) -> float:
    if loan_amount <= 0:
        return 0.0
    n = term_years * 12
    if n <= 0:
        raise InvalidParametersError("term_years must be > 0 for a positive loan")
    if annual_rate_percent > 0:
        r = annual_rate_percent / 100.0 / 12.0
        return loan_amount * r / (1 - (1 + r) ** -n)
    return loan_amount / n


def amortize(balance: float, annual_rate_percent: float, payment: float, months: int) -> float:
    """Run `months` scheduled payments against `balance`; never goes below zero."""
    r = annual_rate_percent / 100.0 / 12.0
    for _ in range(months):
        if balance <= 0:
            return 0.0
        interest = balance * r
        principal = payment - interest
        balance = max(0.0, balance - principal)
    return balance


def remaining_balance(
    loan_amount: float, annual_rate_percent: float, term_years: int, months_paid: int
) -> float:
    if loan_amount <= 0:
        return 0.0
    n = term_years * 12
    if n <= 0:
        raise InvalidParametersError("term_years must be > 0 for a positive loan")
    m = max(0, min(months_paid, n))
    r = annual_rate_percent / 100.0 / 12.0

    if annual_rate_percent <= 0:
        return max(0.0, loan_amount * (1 - m / n))

    A = monthly_payment(loan_amount, annual_rate_percent, term_years)
    pow_m = (1 + r) ** m
    bal = loan_amount * pow_m - A * ((pow_m - 1) / r)
    return max(0.0, bal)


def amortization_schedule(
    loan_amount: float, annual_rate_percent: float, term_years: int
) -> pd.DataFrame:
    """Yearly split of the annuity into interest and principal, with the closing balance."""
    A = monthly_payment(loan_amount, annual_rate_percent, term_years)
    r = annual_rate_percent / 100.0 / 12.0
    bal = max(0.0, loan_amount)
    rows = []
    for year in range(1, term_years + 1):
        interest_y = 0.0
        principal_y = 0.0
        for _ in range(12):
            interest = bal * r
            principal = min(A - interest, bal)
            bal = max(0.0, bal - principal)
            interest_y += interest
            principal_y += principal
        rows.append((year, interest_y, principal_y, bal))
    return pd.DataFrame(rows, columns=["Year", "Interest", "Principal", "Balance"])


def calculate_financials(params: InvestmentParameters) -> FinancialResult:
    total_investment = params.total_investment
    loan = params.loan_amount
    A = monthly_payment(loan, params.interest_rate, params.loan_term_years)

    break_even_rent = A + params.monthly_maintenance
    monthly_cashflow = params.monthly_rent - break_even_rent
    annual_cashflow = monthly_cashflow * 12

    roi = (annual_cashflow / total_investment) * 100 if total_investment > 0 else 0.0
    amortization_years = total_investment / annual_cashflow if annual_cashflow > 0 else None

    return FinancialResult(
        total_investment=total_investment,
        loan_amount=loan,
        monthly_payment=A,
        monthly_cashflow=monthly_cashflow,
        annual_cashflow=annual_cashflow,
        roi=roi,
        break_even_rent=break_even_rent,
        total_cost=params.total_cost,
        amortization_years=amortization_years,
    )
