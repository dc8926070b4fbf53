import math
from dataclasses import dataclass, fields
from typing import Optional, Tuple

DOWN_PAYMENT_MODES = ("percent", "absolute")


class InvalidParametersError(ValueError):
    """Raised when a parameter set cannot produce a meaningful calculation."""


def _require_finite(record) -> None:
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if not math.isfinite(value):
            raise InvalidParametersError(f"{f.name} must be a finite number, got {value!r}")


def _require_non_negative(record, *names: str) -> None:
    for name in names:
        if getattr(record, name) < 0:
            raise InvalidParametersError(f"{name} must be >= 0")


@dataclass(frozen=True)
class InvestmentParameters:
    purchase_price: float
    renovation_cost: float
    closing_costs_percent: float
    interest_rate: float  # nominal annual percentage
    loan_term_years: int
    down_payment_mode: str  # 'percent' or 'absolute'
    down_payment_value: float
    monthly_rent: float
    monthly_maintenance: float  # non-recoverable running costs
    location: str = ""

    def __post_init__(self):
        _require_finite(self)
        _require_non_negative(
            self,
            "purchase_price",
            "renovation_cost",
            "closing_costs_percent",
            "down_payment_value",
            "monthly_rent",
            "monthly_maintenance",
        )
        if self.loan_term_years <= 0:
            raise InvalidParametersError("loan_term_years must be > 0")
        if self.down_payment_mode not in DOWN_PAYMENT_MODES:
            raise InvalidParametersError(
                f"down_payment_mode must be one of {DOWN_PAYMENT_MODES}, got {self.down_payment_mode!r}"
            )

    @property
    def closing_costs(self) -> float:
        return self.purchase_price * (self.closing_costs_percent / 100.0)

    @property
    def down_payment(self) -> float:
        if self.down_payment_mode == "percent":
            return self.purchase_price * (self.down_payment_value / 100.0)
        return self.down_payment_value

    @property
    def loan_amount(self) -> float:
        return max(0.0, self.purchase_price - self.down_payment)

    @property
    def total_investment(self) -> float:
        """Cash the buyer brings in: down payment + closing costs + renovation."""
        return self.down_payment + self.closing_costs + self.renovation_cost

    @property
    def total_cost(self) -> float:
        """Purchase price + closing costs + renovation."""
        return self.purchase_price + self.closing_costs + self.renovation_cost


@dataclass(frozen=True)
class FinancialResult:
    total_investment: float
    loan_amount: float
    monthly_payment: float
    monthly_cashflow: float
    annual_cashflow: float
    roi: float  # cash-on-cash, percentage
    break_even_rent: float
    total_cost: float
    amortization_years: Optional[float] = None  # None while cashflow does not pay back


@dataclass(frozen=True)
class ScenarioKnobs:
    """What-if overlays on top of InvestmentParameters. All rates in percent."""

    simulated_rent: Optional[float] = None
    indexation_rate: float = 2.0
    inflation_rate: float = 2.0
    property_appreciation: float = 2.0
    alternative_return: float = 6.0
    selling_tax_percent: float = 30.0

    def __post_init__(self):
        _require_finite(self)
        if self.simulated_rent is not None and self.simulated_rent < 0:
            raise InvalidParametersError("simulated_rent must be >= 0")

    def rent_for(self, params: InvestmentParameters) -> float:
        return params.monthly_rent if self.simulated_rent is None else self.simulated_rent


@dataclass(frozen=True)
class RentScenario:
    monthly_cashflow: float
    roi: float
    cashflow_change: float


@dataclass(frozen=True)
class ProjectionPoint:
    year: int
    annual_rent: float
    annual_expenses: float
    annual_cashflow: float
    cumulative_cashflow: float
    loan_active: bool


@dataclass(frozen=True)
class ScenarioProjection:
    points: Tuple[ProjectionPoint, ...]
    dynamic_break_even: Optional[float]
    static_break_even: Optional[float]
    horizon_years: int


@dataclass(frozen=True)
class ExitComparisonPoint:
    year: int
    wealth_keep: int
    wealth_sell: int
    sale_proceeds: int  # net proceeds if sold in this year, after costs, debt and tax


@dataclass(frozen=True)
class AffordabilityResult:
    max_monthly_payment: float
    max_loan: float
    max_price: float


@dataclass(frozen=True)
class WealthRacePoint:
    year: int
    safe_balance: int
    growth_balance: int
    target: float


@dataclass(frozen=True)
class WealthRace:
    points: Tuple[WealthRacePoint, ...]
    years_to_target_safe: Optional[int]
    years_to_target_growth: Optional[int]

    @property
    def target(self) -> float:
        return self.points[0].target if self.points else 0.0
