from models import FinancialResult, InvestmentParameters


def location_prompt(location: str, price: float, size_sqm: float, renovation: float) -> str:
    size_text = f"{size_sqm:g} m²" if size_sqm > 0 else "not specified"
    return f"""
Analyse the following real-estate investment in Austria/Germany (focus on Austria unless stated otherwise).

Location: {location}
Purchase price: {price:,.0f} €
Size (estimated/optional): {size_text}
Renovation costs: {renovation:,.0f} €

Give me a short, crisp assessment (max 150 words):
1. How good are the macro and micro location (if known)?
2. Is the purchase price typical, cheap or expensive for this area?
3. What rental yield is realistic in this location?
""".strip()


def deep_dive_prompt(params: InvestmentParameters, result: FinancialResult) -> str:
    return f"""
Act as a strict real-estate investment analyst for the DACH region (focus Austria).
Analyse these financials in detail:

Location: {params.location}
Purchase price: {params.purchase_price:,.0f} €
Monthly rent: {params.monthly_rent:,.0f} €
Loan payment: {result.monthly_payment:.2f} €
Equity: {result.total_investment:,.0f} €
Calculated ROI (cash-on-cash): {result.roi:.2f} %

Write a "deep dive" report (Markdown) covering:

1. **Rent sustainability**: Is a rent of {params.monthly_rent:,.0f} € sustainable for this location, or is there a vacancy risk?
2. **Risk check (rent vs. loan)**: Assess the ratio of rental income to loan payment (DSCR). Is there enough buffer for maintenance?
3. **Rough tax view**: Briefly explain how depreciation could play out here (Austria: flat 1.5% vs. Germany). *Note: not tax advice.*
4. **Verdict**: Do the deal or walk away?
""".strip()


def portfolio_strategy_prompt(
    goal_cashflow: float,
    years: int,
    current_capital: float,
    risk_profile: str,
    target_property_count: int,
) -> str:
    return f"""
Create a real-estate investment strategy for the DACH region.

Goals:
1. {goal_cashflow:,.0f} € monthly net cashflow within {years} years.
2. Portfolio size: roughly {target_property_count} properties (units).

Starting capital: {current_capital:,.0f} €.
Risk profile: {risk_profile}.

Produce a detailed step-by-step plan (Markdown).

IMPORTANT: Do not only consider "buy & hold"; also analyse whether and when SELLING properties makes sense:
- Should properties be sold to free up equity for larger deals (asset rotation)?
- Is fix & flip an option for this risk profile?
- When is the break-even between holding and selling reached?

Structure the answer in phases (e.g. build-up, consolidation, exit/optimisation).
Calculate conservatively.
""".strip()


def link_analysis_prompt(url: str) -> str:
    return f"""
Visit (via Google Search) the property listing page or search for details about this URL: {url}

Extract the following fields as JSON:
- purchase_price (number)
- location (string)
- size_sqm (number, m²)
- estimated_rent (number, estimated monthly rent)
- assessment (string, short analysis of whether this is a good deal)

If you cannot read the URL directly, search for its title or content.
Answer with the JSON object only, without any other text.
""".strip()


def market_search_prompt(query: str) -> str:
    return (
        f'Search for current property listings: "{query}".\n'
        "List 5 relevant listings with title, price, location and link."
    )


def refinement_prompt(strategy: str, question: str) -> str:
    return f"""
You are a real-estate expert.
Here is the current strategy you created:
"{strategy}"

The user has the following question or remark about it:
"{question}"

Answer this question specifically and adapt aspects of the strategy in your explanation where needed.
Address the user informally.
""".strip()
