"""Projection output records and the running state carried between years."""

import dataclasses
from dataclasses import dataclass


@dataclass(frozen=True)
class YearlyRecord:
    """One simulated age. Never mutated after it is appended."""

    age: int
    year: int
    policy_year: int

    # Income
    work_income: float
    social_security_income: float
    other_retirement_income: float
    total_income: float

    # Expenses
    basic_expenses: float
    ltc_expenses: float
    premium_expenses: float
    total_expenses: float

    ltc_benefits: float
    net_cash_flow: float
    withdrawal: float
    tax_on_withdrawal: float
    unfunded_shortfall: float

    # Asset state
    assets: float
    policy_value: float
    death_benefit: float
    total_assets: float
    cumulative_ltc_benefits: float
    ltc_benefit_ceiling: float | None

    # Policy loan
    policy_loan_taken: float
    policy_loan_balance: float
    policy_loan_interest: float

    # Flags
    is_retired: bool
    has_ltc_event: bool
    is_alive: bool
    is_bankrupt: bool

    # Audit: illustration values for the same policy year
    applied_growth_rate: float
    original_policy_value: float
    original_death_benefit: float

    def as_dict(self) -> dict:
        return dataclasses.asdict(self)


# Shared time axis of a household row (not prefixed per person)
AXIS_FIELDS = ("age", "year")

# Summed into combined_* household fields
NUMERIC_FIELDS: tuple[str, ...] = (
    "work_income",
    "social_security_income",
    "other_retirement_income",
    "total_income",
    "basic_expenses",
    "ltc_expenses",
    "premium_expenses",
    "total_expenses",
    "ltc_benefits",
    "net_cash_flow",
    "withdrawal",
    "tax_on_withdrawal",
    "unfunded_shortfall",
    "assets",
    "policy_value",
    "death_benefit",
    "total_assets",
    "cumulative_ltc_benefits",
    "policy_loan_taken",
    "policy_loan_balance",
    "policy_loan_interest",
    "original_policy_value",
    "original_death_benefit",
)

# OR-ed into combined_* household flags
FLAG_FIELDS: tuple[str, ...] = (
    "is_retired",
    "has_ltc_event",
    "is_alive",
    "is_bankrupt",
)


@dataclass(frozen=True)
class SimulationState:
    """Running state threaded through the yearly fold (replaced, never mutated)."""

    current_assets: float
    cumulative_ltc_benefits: float = 0.0
    # Lowest lifetime benefit ceiling seen so far (None until a capped year)
    ltc_benefit_ceiling: float | None = None
    policy_loan_balance: float = 0.0
    has_deviated_from_illustration: bool = False
    previous_policy_value: float = 0.0
    previous_death_benefit: float = 0.0
    smoothed_policy_loan_amount: float = 0.0
    is_bankrupt: bool = False

    def evolve(self, **changes) -> "SimulationState":
        return dataclasses.replace(self, **changes)
