"""Summary aggregates of a finished projection (per person and household)."""

from dataclasses import dataclass

from ltc_sim.household import HouseholdYearlyRecord
from ltc_sim.params import PersonConfig
from ltc_sim.records import YearlyRecord


@dataclass(frozen=True)
class RetirementSummary:
    retirement_age: int
    years_until_retirement: int
    social_security_at_retirement: float
    assets_at_retirement: float
    total_assets_at_retirement: float
    final_assets: float
    final_total_assets: float
    bankrupt: bool
    bankrupt_age: int | None


@dataclass(frozen=True)
class LtcSummary:
    ltc_event_age: int
    ltc_duration_years: int
    event_year_cost: float
    event_year_benefit: float
    event_year_coverage_ratio: float
    total_ltc_cost: float
    total_ltc_benefits: float
    total_out_of_pocket: float
    total_coverage_ratio: float


@dataclass(frozen=True)
class AssetSummary:
    starting_assets: float
    annual_savings_contribution: float
    assets_at_retirement: float
    final_assets: float
    total_premiums_paid: float
    total_loans_taken: float
    final_policy_value: float
    final_death_benefit: float
    final_loan_balance: float
    amount_to_heirs: float


@dataclass(frozen=True)
class KeyAges:
    start_age: int
    end_age: int
    retirement_age: int | None
    ltc_event_age: int | None
    bankrupt_age: int | None


@dataclass(frozen=True)
class PersonSummary:
    name: str
    retirement: RetirementSummary
    ltc: LtcSummary | None
    assets: AssetSummary
    key_ages: KeyAges


def _ratio(part: float, whole: float) -> float:
    return part / whole if whole > 0 else 0.0


def _at_age(records: list[YearlyRecord], age: int) -> YearlyRecord | None:
    return next((r for r in records if r.age == age), None)


def _first_bankrupt_age(records: list[YearlyRecord]) -> int | None:
    return next((r.age for r in records if r.is_bankrupt), None)


def ltc_totals(records: list) -> tuple[float, float]:
    """(total LTC cost, total LTC benefits) over a projection."""
    cost = sum(r.ltc_expenses for r in records)
    benefits = sum(r.ltc_benefits for r in records)
    return cost, benefits


def summarize_person(config: PersonConfig, records: list[YearlyRecord]) -> PersonSummary:
    """Retirement, LTC and asset summaries plus key ages of one projection."""
    if not records:
        raise ValueError(f"No projection records for {config.name}")
    final = records[-1]
    at_retirement = _at_age(records, config.retirement_age)
    bankrupt_age = _first_bankrupt_age(records)

    retirement = RetirementSummary(
        retirement_age=config.retirement_age,
        years_until_retirement=config.retirement_age - config.current_age,
        social_security_at_retirement=at_retirement.social_security_income if at_retirement else 0.0,
        assets_at_retirement=at_retirement.assets if at_retirement else 0.0,
        total_assets_at_retirement=at_retirement.total_assets if at_retirement else 0.0,
        final_assets=final.assets,
        final_total_assets=final.total_assets,
        bankrupt=bankrupt_age is not None,
        bankrupt_age=bankrupt_age,
    )

    ltc = None
    if config.ltc_event_enabled:
        event_year = _at_age(records, config.ltc_event_age)
        event_cost = event_year.ltc_expenses if event_year else 0.0
        event_benefit = event_year.ltc_benefits if event_year else 0.0
        total_cost, total_benefits = ltc_totals(records)
        ltc = LtcSummary(
            ltc_event_age=config.ltc_event_age,
            ltc_duration_years=config.ltc_duration_years,
            event_year_cost=event_cost,
            event_year_benefit=event_benefit,
            event_year_coverage_ratio=_ratio(event_benefit, event_cost),
            total_ltc_cost=total_cost,
            total_ltc_benefits=total_benefits,
            total_out_of_pocket=total_cost - total_benefits,
            total_coverage_ratio=_ratio(total_benefits, total_cost),
        )

    assets = AssetSummary(
        starting_assets=config.starting_assets,
        annual_savings_contribution=config.annual_savings_contribution,
        assets_at_retirement=retirement.assets_at_retirement,
        final_assets=final.assets,
        total_premiums_paid=sum(r.premium_expenses for r in records),
        total_loans_taken=sum(r.policy_loan_taken for r in records),
        final_policy_value=final.policy_value,
        final_death_benefit=final.death_benefit,
        final_loan_balance=final.policy_loan_balance,
        amount_to_heirs=final.death_benefit + final.assets,
    )

    key_ages = KeyAges(
        start_age=records[0].age,
        end_age=final.age,
        retirement_age=config.retirement_age,
        ltc_event_age=config.ltc_event_age if config.ltc_event_enabled else None,
        bankrupt_age=bankrupt_age,
    )
    return PersonSummary(config.name, retirement, ltc, assets, key_ages)


@dataclass(frozen=True)
class HouseholdSummary:
    earliest_retirement_age: int | None
    assets_at_retirement: float
    final_assets: float
    final_total_assets: float
    total_ltc_cost: float
    total_ltc_benefits: float
    total_out_of_pocket: float
    total_coverage_ratio: float
    total_premiums_paid: float
    final_policy_value: float
    final_death_benefit: float
    amount_to_heirs: float
    key_ages: KeyAges


def summarize_household(
    rows: list[HouseholdYearlyRecord],
    configs: list[PersonConfig | None],
) -> HouseholdSummary:
    """Combined counterparts of the per-person summaries.

    Retirement figures are read at the household row of the earliest
    retirement age among enabled members.
    """
    if not rows:
        raise ValueError("No household projection rows")
    members = [c for c in configs if c is not None and c.enabled]
    earliest = min((c.retirement_age for c in members), default=None)
    at_retirement = next((r for r in rows if r.age == earliest), None)
    final = rows[-1]

    total_cost = sum(r.combined["ltc_expenses"] for r in rows)
    total_benefits = sum(r.combined["ltc_benefits"] for r in rows)
    bankrupt_age = next((r.combined_bankrupt_age for r in rows if r.combined_bankrupt), None)

    return HouseholdSummary(
        earliest_retirement_age=earliest,
        assets_at_retirement=at_retirement.combined_assets if at_retirement else 0.0,
        final_assets=final.combined_assets,
        final_total_assets=final.combined_total_assets,
        total_ltc_cost=total_cost,
        total_ltc_benefits=total_benefits,
        total_out_of_pocket=total_cost - total_benefits,
        total_coverage_ratio=_ratio(total_benefits, total_cost),
        total_premiums_paid=sum(r.combined["premium_expenses"] for r in rows),
        final_policy_value=final.combined_policy_value,
        final_death_benefit=final.combined["death_benefit"],
        amount_to_heirs=final.combined["death_benefit"] + final.combined_assets,
        key_ages=KeyAges(
            start_age=rows[0].age,
            end_age=final.age,
            retirement_age=earliest,
            ltc_event_age=min(
                (c.ltc_event_age for c in members if c.ltc_event_enabled), default=None,
            ),
            bankrupt_age=bankrupt_age,
        ),
    )
