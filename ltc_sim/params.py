"""Person parameters and shared financial calculation helpers."""

from dataclasses import dataclass

# Work capacity kept during a pre-retirement LTC event (20% of normal pay)
LTC_WORK_CAPACITY = 0.2

# Policy loan smoothing (exponential, applied after the LTC window)
LOAN_SMOOTHING_FACTOR = 0.5
DEFAULT_MAX_LOAN_TO_VALUE = 0.95

# No-schedule fallback for policy cash value: premium * min(years, 15) * 0.8
FALLBACK_CASH_VALUE_YEARS_CAP = 15
FALLBACK_CASH_VALUE_RATIO = 0.8

MAX_AGE = 120
SEXES = ("male", "female")


@dataclass(frozen=True)
class PersonConfig:

    # Identity
    name: str = "Person 1"
    sex: str = "male"
    enabled: bool = True

    # Ages
    current_age: int = 55
    retirement_age: int = 67
    death_age: int = 90

    # Income parameters
    annual_income: float = 100000
    annual_pay_increase_rate: float = 0.03
    income_replacement_ratio: float = 0.65

    # Savings
    starting_assets: float = 500000
    annual_savings_contribution: float = 12000

    # Toggles
    ltc_event_enabled: bool = False
    policy_enabled: bool = False
    policy_loan_enabled: bool = True
    initial_premium_from_assets: bool = False
    premiums_from_assets_pre_retirement: bool = True

    # Retirement income (today's dollars, inflated from the start age)
    social_security_income: float = 24000
    other_retirement_income: float = 0

    # LTC event
    ltc_event_age: int = 75
    ltc_cost_per_year: float = 100000
    ltc_duration_years: int = 4

    # Policy fallback parameters (used only without a real policy schedule)
    policy_benefit_per_year: float = 80000
    policy_benefit_duration_years: int = 3
    policy_annual_premium: float = 3000
    policy_loan_rate: float = 0.01
    policy_max_loan_to_value_ratio: float = DEFAULT_MAX_LOAN_TO_VALUE

    # Assumptions
    pre_retirement_asset_return_rate: float = 0.07
    retirement_asset_return_rate: float = 0.05
    ltc_inflation_rate: float = 0.05
    general_inflation_rate: float = 0.025
    retirement_assets_tax_rate: float = 0.30

    @property
    def projection_years(self) -> int:
        return self.death_age - self.current_age + 1

    @property
    def ltc_window_end(self) -> int:
        """First age after the LTC event window."""
        return self.ltc_event_age + self.ltc_duration_years

    def is_retired(self, age: int) -> bool:
        return age >= self.retirement_age

    def has_ltc_event(self, age: int) -> bool:
        return self.ltc_event_enabled and self.ltc_event_age <= age < self.ltc_window_end

    def pay_factor(self, years: int) -> float:
        return (1 + self.annual_pay_increase_rate) ** years

    def inflation_factor(self, years: int) -> float:
        return (1 + self.general_inflation_rate) ** years

    def ltc_inflation_factor(self, years: int) -> float:
        return (1 + self.ltc_inflation_rate) ** years

    def asset_return_rate(self, is_retired: bool) -> float:
        if is_retired:
            return self.retirement_asset_return_rate
        return self.pre_retirement_asset_return_rate


def gross_up(net_amount: float, tax_rate: float) -> float:
    """Gross withdrawal whose after-tax value equals net_amount. 0 if untaxable."""
    if net_amount <= 0 or tax_rate >= 1:
        return 0.0
    return net_amount / (1 - tax_rate)


def growth_rate(current: float, previous: float) -> float:
    """Year-over-year growth rate (current / previous - 1), 0 when previous <= 0."""
    if previous <= 0:
        return 0.0
    return current / previous - 1
