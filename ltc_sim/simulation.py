"""Core simulation entry points."""

import datetime
from concurrent.futures import ThreadPoolExecutor

from ltc_sim.household import HouseholdYearlyRecord, combine_projections
from ltc_sim.params import MAX_AGE, SEXES, PersonConfig
from ltc_sim.policy import PolicySchedule
from ltc_sim.records import YearlyRecord
from ltc_sim.strategies import ProjectionStrategy, get_strategy

DEFAULT_STRATEGY = "illustration"

# Currency amounts that must not be negative
_NON_NEGATIVE_AMOUNTS = (
    "annual_income",
    "starting_assets",
    "annual_savings_contribution",
    "social_security_income",
    "other_retirement_income",
    "ltc_cost_per_year",
    "policy_benefit_per_year",
    "policy_annual_premium",
)

# Growth rates bounded below by -100%
_GROWTH_RATES = (
    "annual_pay_increase_rate",
    "pre_retirement_asset_return_rate",
    "retirement_asset_return_rate",
    "ltc_inflation_rate",
    "general_inflation_rate",
)


def validate_person(config: PersonConfig) -> list[str]:
    """Validate a person's configuration. Returns list of error messages."""
    errors = []

    # Ages
    for name in ("current_age", "retirement_age", "death_age"):
        value = getattr(config, name)
        if value < 0:
            errors.append(f"{name} must not be negative (got {value})")
    if config.death_age > MAX_AGE:
        errors.append(f"death_age {config.death_age} exceeds {MAX_AGE}")
    if not config.current_age <= config.retirement_age <= config.death_age:
        errors.append(
            f"Ages must satisfy current_age <= retirement_age <= death_age "
            f"(got {config.current_age}, {config.retirement_age}, {config.death_age})"
        )

    # LTC event and fallback benefit durations
    for name in ("ltc_event_age", "ltc_duration_years", "policy_benefit_duration_years"):
        value = getattr(config, name)
        if value < 0:
            errors.append(f"{name} must not be negative (got {value})")

    # Rates
    if not 0 <= config.retirement_assets_tax_rate < 1:
        errors.append(
            f"retirement_assets_tax_rate must be in [0, 1) (got {config.retirement_assets_tax_rate})"
        )
    for name in _GROWTH_RATES:
        value = getattr(config, name)
        if value <= -1:
            errors.append(f"{name} must be greater than -1 (got {value})")
    if config.income_replacement_ratio < 0:
        errors.append(
            f"income_replacement_ratio must not be negative (got {config.income_replacement_ratio})"
        )
    if config.policy_loan_rate < 0:
        errors.append(f"policy_loan_rate must not be negative (got {config.policy_loan_rate})")
    if not 0 < config.policy_max_loan_to_value_ratio <= 1:
        errors.append(
            f"policy_max_loan_to_value_ratio must be in (0, 1] "
            f"(got {config.policy_max_loan_to_value_ratio})"
        )

    # Amounts
    for name in _NON_NEGATIVE_AMOUNTS:
        value = getattr(config, name)
        if value < 0:
            errors.append(f"{name} must not be negative (got {value})")

    if config.sex not in SEXES:
        errors.append(f"sex must be one of {', '.join(SEXES)} (got {config.sex!r})")

    return errors


def _raise_if_invalid(config: PersonConfig) -> None:
    errors = validate_person(config)
    if errors:
        raise ValueError(
            f"Invalid configuration for {config.name}:\n"
            + "\n".join(f"  ✗ {e}" for e in errors)
        )


def _resolve_strategy(strategy: str | ProjectionStrategy) -> ProjectionStrategy:
    if isinstance(strategy, ProjectionStrategy):
        return strategy
    return get_strategy(strategy)


def simulate_person(
    config: PersonConfig,
    schedule: PolicySchedule | None = None,
    strategy: str | ProjectionStrategy = DEFAULT_STRATEGY,
    start_year: int | None = None,
) -> list[YearlyRecord]:
    """Project one person year by year from current_age to death_age.

    Raises ValueError before producing any record if the configuration is invalid.
    """
    _raise_if_invalid(config)
    return _resolve_strategy(strategy).project(config, schedule, start_year)


def simulate_household(
    person1: PersonConfig | None,
    person2: PersonConfig | None = None,
    schedule1: PolicySchedule | None = None,
    schedule2: PolicySchedule | None = None,
    strategy: str | ProjectionStrategy = DEFAULT_STRATEGY,
    start_year: int | None = None,
) -> list[HouseholdYearlyRecord]:
    """Project both household members concurrently and combine them by projection year.

    A member that is None or disabled contributes no records.
    """
    projection_strategy = _resolve_strategy(strategy)
    if start_year is None:
        start_year = datetime.date.today().year
    members = [(person1, schedule1), (person2, schedule2)]
    # Validate both before starting either projection
    for config, _ in members:
        if config is not None and config.enabled:
            _raise_if_invalid(config)

    with ThreadPoolExecutor(max_workers=2) as executor:
        futures = [
            executor.submit(
                simulate_person, config, schedule, projection_strategy, start_year,
            ) if config is not None and config.enabled else None
            for config, schedule in members
        ]
        p1, p2 = (f.result() if f is not None else None for f in futures)

    return combine_projections(p1, p2)
