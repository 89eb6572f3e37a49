"""Per-year cash flow steps shared by every projection strategy.

Each helper is a pure function of the person's configuration and the
quantities of the current year, so a strategy only decides how policy
values evolve and whether policy loans are available.
"""

from ltc_sim.params import (
    FALLBACK_CASH_VALUE_RATIO,
    FALLBACK_CASH_VALUE_YEARS_CAP,
    LTC_WORK_CAPACITY,
    PersonConfig,
    gross_up,
)
from ltc_sim.policy import PolicySchedule, PolicyYearRecord


def policy_start_age(config: PersonConfig, schedule: PolicySchedule | None) -> int:
    """Insured age at issue; the person's current age without a schedule."""
    if schedule is not None:
        start = schedule.start_age
        if start is not None:
            return start
    return config.current_age


def policy_year_for(config: PersonConfig, schedule: PolicySchedule | None, age: int) -> int:
    return age - policy_start_age(config, schedule) + 1


# --- Income ---

def work_income(config: PersonConfig, years: int, is_retired: bool, has_ltc: bool) -> float:
    """Salary grown by pay increases; cut to LTC_WORK_CAPACITY during a pre-retirement LTC event."""
    if is_retired:
        return 0.0
    capacity = LTC_WORK_CAPACITY if has_ltc else 1.0
    return config.annual_income * config.pay_factor(years) * capacity


def retirement_income(config: PersonConfig, years: int, is_retired: bool) -> tuple[float, float]:
    """(social security, other retirement income), inflated from the start age."""
    if not is_retired:
        return 0.0, 0.0
    factor = config.inflation_factor(years)
    return config.social_security_income * factor, config.other_retirement_income * factor


# --- Expenses ---

def basic_expenses(config: PersonConfig, years: int, is_retired: bool, has_ltc: bool) -> float:
    """Baseline living cost: replacement-ratio share of income, inflated, net of tax.

    Applies once retired, or earlier while an LTC event keeps the person from working.
    """
    if not (is_retired or has_ltc):
        return 0.0
    return (
        config.annual_income
        * config.income_replacement_ratio
        * config.inflation_factor(years)
        * (1 - config.retirement_assets_tax_rate)
    )


def ltc_expenses(config: PersonConfig, years: int, has_ltc: bool) -> float:
    if not has_ltc:
        return 0.0
    return config.ltc_cost_per_year * config.ltc_inflation_factor(years)


def skips_first_year_premium(config: PersonConfig) -> bool:
    """First-year premium is funded outside the year's cash flow."""
    return config.initial_premium_from_assets or config.premiums_from_assets_pre_retirement


def premium_expense(
    config: PersonConfig,
    schedule: PolicySchedule | None,
    row: PolicyYearRecord | None,
    age: int,
    years: int,
) -> float:
    """Annual premium due this year.

    Without a schedule the configured premium is charged every year before
    death age. A schedule with no row at or before the policy year charges nothing.
    """
    if not config.policy_enabled:
        return 0.0
    if years == 0 and skips_first_year_premium(config):
        return 0.0
    if schedule is None:
        return config.policy_annual_premium if age < config.death_age else 0.0
    if row is None:
        return 0.0
    return row.annual_premium


def initial_premium(config: PersonConfig, schedule: PolicySchedule | None) -> float:
    """Premium paid as a lump sum from assets before the first year (0 if not configured)."""
    if not (config.policy_enabled and config.initial_premium_from_assets):
        return 0.0
    if schedule is not None:
        return schedule.initial_premium
    return config.policy_annual_premium


# --- LTC benefits ---

def traditional_benefit_ceiling(row: PolicyYearRecord) -> float:
    """Accelerated share of the illustrated death benefit (100% when not stated)."""
    pct = row.acceleration_percentage if row.acceleration_percentage > 0 else 100.0
    return row.death_benefit * pct / 100


def benefit_ceiling(
    schedule: PolicySchedule | None,
    row: PolicyYearRecord | None,
    previous: float | None = None,
) -> float | None:
    """Lifetime LTC benefit ceiling for this policy year (None if uncapped).

    A traditional ceiling never rises: it is the lowest accelerated death
    benefit seen so far, so a falling illustration lowers it for good.
    """
    if schedule is None or row is None:
        return None
    if schedule.is_hybrid:
        return row.total_ltc_benefit
    ceiling = traditional_benefit_ceiling(row)
    if previous is not None:
        ceiling = min(ceiling, previous)
    return ceiling


def ltc_benefit(
    config: PersonConfig,
    schedule: PolicySchedule | None,
    row: PolicyYearRecord | None,
    age: int,
    ltc_cost: float,
    cumulative: float,
    previous_ceiling: float | None = None,
) -> tuple[float, float | None]:
    """LTC benefit paid this year and the lifetime ceiling in effect (None if uncapped).

    The benefit is clipped so cumulative benefits never exceed the ceiling.
    Without a schedule row the flat configured benefit applies for
    policy_benefit_duration_years from the LTC event age.
    """
    if schedule is None or row is None:
        if age < config.ltc_event_age + config.policy_benefit_duration_years:
            return min(config.policy_benefit_per_year, ltc_cost), None
        return 0.0, None

    ceiling = benefit_ceiling(schedule, row, previous_ceiling)
    if schedule.is_hybrid:
        if not row.annual_ltc_benefit:
            return 0.0, ceiling
        benefit = min(row.annual_ltc_benefit, ltc_cost)
    else:
        benefit = min(row.monthly_benefit_limit * 12, ltc_cost)

    if ceiling is not None:
        benefit = min(benefit, max(0.0, ceiling - cumulative))
    return max(0.0, benefit), ceiling


# --- Policy values ---

def fallback_policy_values(config: PersonConfig, years: int) -> tuple[float, float]:
    """(policy value, death benefit) approximated from the configured premium and benefit."""
    value = (
        config.policy_annual_premium
        * min(years, FALLBACK_CASH_VALUE_YEARS_CAP)
        * FALLBACK_CASH_VALUE_RATIO
    )
    death_benefit = config.policy_benefit_per_year * config.policy_benefit_duration_years
    return value, death_benefit


# --- Assets ---

def withdraw(available: float, net_needed: float, tax_rate: float) -> tuple[float, float, float]:
    """Grossed-up withdrawal covering net_needed after tax, bounded by available assets.

    Returns (gross withdrawal, tax on withdrawal, net amount covered).
    """
    if net_needed <= 0 or available <= 0 or tax_rate >= 1:
        return 0.0, 0.0, 0.0
    gross = gross_up(net_needed, tax_rate)
    if gross <= available:
        return gross, gross - net_needed, net_needed
    covered = available * (1 - tax_rate)
    return available, available - covered, covered


def grow_assets(
    config: PersonConfig,
    assets: float,
    withdrawal: float,
    years: int,
    is_retired: bool,
    has_ltc: bool,
) -> float:
    """Withdraw, add savings while working without an LTC event, then grow.

    The first year is already valued as of today and gets no growth.
    """
    assets = max(0.0, assets - withdrawal)
    if not is_retired and not has_ltc:
        assets += config.annual_savings_contribution
    if years > 0:
        assets *= 1 + config.asset_return_rate(is_retired)
    return max(0.0, assets)
