import os

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv())

DEFAULT_VALUES = {
    "calculator": {
        "purchase_price": 250000.0,
        "renovation_cost": 15000.0,
        "closing_costs_percent": 10.0,  # transfer tax, land registry, broker, notary
        "interest_rate": 3.8,  # percentage
        "loan_term_years": 30,
        "down_payment_mode": "percent",
        "down_payment_value": 20.0,  # percentage or absolute amount, per mode
        "monthly_rent": 1200.0,
        "monthly_maintenance": 250.0,
        "location": "Wien, 1100",
    },
    "scenario": {
        "indexation_rate": 2.0,  # percentage
        "inflation_rate": 2.0,  # percentage
        "property_appreciation": 2.0,  # percentage
        "alternative_return": 6.0,  # percentage, index fund
        "selling_tax_percent": 30.0,  # percentage, capital gains on sale
    },
    "portfolio": {
        "goal_cashflow": 2000.0,
        "years": 10,
        "current_capital": 50000.0,
        "target_property_count": 3,
        "risk_profile": "Balanced",
    },
    "affordability": {
        "net_income": 3500.0,
        "living_expenses": 1200.0,
        "existing_loans": 0.0,
        "interest_rate": 3.8,  # percentage
        "term_years": 30,
        "equity": 50000.0,
    },
    "wealth": {
        "target": 50000.0,
        "monthly_contribution": 500.0,
        "initial_capital": 5000.0,
    },
}

RISK_PROFILES = [
    "Conservative (safety first)",
    "Balanced",
    "Aggressive (maximum growth)",
]

AI_SETTINGS = {
    "api_key": os.getenv("GOOGLE_API_KEY", ""),
    "model": os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
