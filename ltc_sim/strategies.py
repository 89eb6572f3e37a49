"""Projection strategy classes."""

import datetime
from dataclasses import dataclass
from typing import ClassVar

from ltc_sim import cashflow
from ltc_sim.params import LOAN_SMOOTHING_FACTOR, PersonConfig
from ltc_sim.policy import PolicySchedule, PolicyYearRecord, lookup_policy_year
from ltc_sim.records import SimulationState, YearlyRecord


def initial_state(config: PersonConfig, schedule: PolicySchedule | None) -> SimulationState:
    """Starting assets net of the grossed-up initial premium lump sum, if any."""
    premium = cashflow.initial_premium(config, schedule)
    lump_sum = cashflow.withdraw(config.starting_assets, premium, config.retirement_assets_tax_rate)[0]
    return SimulationState(current_assets=max(0.0, config.starting_assets - lump_sum))


@dataclass
class ProjectionStrategy:
    """Base class for per-person projection strategies.

    Subclasses decide how the policy value and death benefit evolve from the
    schedule. Income, expenses, benefits and asset handling are shared.
    """

    NAME: ClassVar[str] = ""
    # Traditional LTC benefits reduce policy value and death benefit 1:1
    DEDUCTS_BENEFITS: ClassVar[bool] = False
    # Policy loans cover a shortfall once assets are exhausted
    ALLOWS_LOANS: ClassVar[bool] = False

    def policy_values(
        self,
        schedule: PolicySchedule,
        row: PolicyYearRecord,
        policy_year: int,
        state: SimulationState,
    ) -> tuple[float, float, float]:
        """(policy value, death benefit, applied growth rate) before this year's deductions."""
        raise NotImplementedError

    def policy_loan(
        self,
        config: PersonConfig,
        age: int,
        shortfall: float,
        policy_value: float,
        balance: float,
        smoothed: float,
    ) -> tuple[float, float]:
        """(loan taken, new smoothing accumulator)."""
        raise NotImplementedError

    def project(
        self,
        config: PersonConfig,
        schedule: PolicySchedule | None = None,
        start_year: int | None = None,
    ) -> list[YearlyRecord]:
        """Yearly records from current_age through death_age inclusive."""
        if start_year is None:
            start_year = datetime.date.today().year
        state = initial_state(config, schedule)
        records = []
        for age in range(config.current_age, config.death_age + 1):
            record, state = self.step(config, schedule, state, age, start_year)
            records.append(record)
        return records

    def step(
        self,
        config: PersonConfig,
        schedule: PolicySchedule | None,
        state: SimulationState,
        age: int,
        start_year: int,
    ) -> tuple[YearlyRecord, SimulationState]:
        """Simulate one age. Returns the record and the state for the next age."""
        years = age - config.current_age
        tax_rate = config.retirement_assets_tax_rate
        is_retired = config.is_retired(age)
        has_ltc = config.has_ltc_event(age)
        policy_year = cashflow.policy_year_for(config, schedule, age)
        row = lookup_policy_year(schedule, policy_year) if config.policy_enabled else None

        # Income and expenses
        work = cashflow.work_income(config, years, is_retired, has_ltc)
        social_security, other_income = cashflow.retirement_income(config, years, is_retired)
        total_income = work + social_security + other_income

        basic = cashflow.basic_expenses(config, years, is_retired, has_ltc)
        ltc_cost = cashflow.ltc_expenses(config, years, has_ltc)
        premium = cashflow.premium_expense(config, schedule, row, age, years)
        total_expenses = basic + ltc_cost + premium

        # LTC benefit against the lifetime ceiling
        ceiling = None
        if config.policy_enabled:
            ceiling = cashflow.benefit_ceiling(schedule, row, state.ltc_benefit_ceiling)
        cumulative = state.cumulative_ltc_benefits
        if ceiling is not None:
            # A lowered ceiling counts as already used up
            cumulative = min(cumulative, ceiling)
        benefit = 0.0
        if config.policy_enabled and has_ltc:
            benefit, _ = cashflow.ltc_benefit(
                config, schedule, row, age, ltc_cost, cumulative, state.ltc_benefit_ceiling,
            )
        cumulative += benefit

        # Policy value before loans
        policy_value = death_benefit = applied_growth = 0.0
        original_value = original_death_benefit = 0.0
        deviated = state.has_deviated_from_illustration
        if config.policy_enabled:
            if schedule is None:
                policy_value, death_benefit = cashflow.fallback_policy_values(config, years)
            elif row is not None:
                original_value, original_death_benefit = row.surrender_value, row.death_benefit
                policy_value, death_benefit, applied_growth = self.policy_values(
                    schedule, row, policy_year, state,
                )
                if self.DEDUCTS_BENEFITS and benefit > 0 and not schedule.is_hybrid:
                    policy_value = max(0.0, policy_value - benefit)
                    death_benefit = max(0.0, death_benefit - benefit)
                    deviated = True

        net_cash_flow = total_income + benefit - total_expenses
        withdrawal = tax_on_withdrawal = 0.0

        # Pre-retirement premium paid from assets instead of income
        if (
            not is_retired
            and premium > 0
            and config.premiums_from_assets_pre_retirement
        ):
            withdrawal, tax_on_withdrawal, paid = cashflow.withdraw(
                state.current_assets, premium, tax_rate,
            )
            net_cash_flow += paid

        # Interest accrues on the existing balance before any new loan
        loan_interest = state.policy_loan_balance * config.policy_loan_rate
        loan_balance = state.policy_loan_balance + loan_interest
        loan_taken = 0.0
        smoothed = state.smoothed_policy_loan_amount
        unfunded = 0.0
        is_bankrupt = state.is_bankrupt

        # Shortfall: assets first, then a policy loan
        if net_cash_flow < 0:
            gross, tax, covered = cashflow.withdraw(
                state.current_assets - withdrawal, -net_cash_flow, tax_rate,
            )
            withdrawal += gross
            tax_on_withdrawal += tax
            remaining = -net_cash_flow - covered
            if remaining > 0:
                is_bankrupt = True
                if (
                    self.ALLOWS_LOANS
                    and is_retired
                    and config.policy_enabled
                    and config.policy_loan_enabled
                    and policy_value > 0
                ):
                    loan_taken, smoothed = self.policy_loan(
                        config, age, remaining, policy_value, loan_balance, smoothed,
                    )
                    loan_balance += loan_taken
                unfunded = max(0.0, remaining - loan_taken)

        if loan_taken > 0:
            deviated = True
        if loan_taken > 0 or loan_interest > 0:
            policy_value = max(0.0, policy_value - loan_taken - loan_interest)
            death_benefit = max(0.0, death_benefit - loan_taken - loan_interest)

        assets = cashflow.grow_assets(
            config, state.current_assets, withdrawal, years, is_retired, has_ltc,
        )

        record = YearlyRecord(
            age=age,
            year=start_year + years,
            policy_year=policy_year,
            work_income=work,
            social_security_income=social_security,
            other_retirement_income=other_income,
            total_income=total_income,
            basic_expenses=basic,
            ltc_expenses=ltc_cost,
            premium_expenses=premium,
            total_expenses=total_expenses,
            ltc_benefits=benefit,
            net_cash_flow=net_cash_flow,
            withdrawal=withdrawal,
            tax_on_withdrawal=tax_on_withdrawal,
            unfunded_shortfall=unfunded,
            assets=assets,
            policy_value=policy_value,
            death_benefit=death_benefit,
            total_assets=assets + policy_value,
            cumulative_ltc_benefits=cumulative,
            ltc_benefit_ceiling=ceiling,
            policy_loan_taken=loan_taken,
            policy_loan_balance=loan_balance,
            policy_loan_interest=loan_interest,
            is_retired=is_retired,
            has_ltc_event=has_ltc,
            is_alive=age <= config.death_age,
            is_bankrupt=is_bankrupt,
            applied_growth_rate=applied_growth,
            original_policy_value=original_value,
            original_death_benefit=original_death_benefit,
        )
        next_state = state.evolve(
            current_assets=assets,
            cumulative_ltc_benefits=cumulative,
            ltc_benefit_ceiling=ceiling if ceiling is not None else state.ltc_benefit_ceiling,
            policy_loan_balance=loan_balance,
            has_deviated_from_illustration=deviated,
            previous_policy_value=policy_value,
            previous_death_benefit=death_benefit,
            smoothed_policy_loan_amount=smoothed,
            is_bankrupt=is_bankrupt,
        )
        return record, next_state


@dataclass
class IllustrationProjection(ProjectionStrategy):
    """Follows the illustration until benefits or loans deplete the policy.

    After the first deviation each year's values grow from last year's
    adjusted values at the illustration's own year-over-year rates.
    """

    smoothing_factor: float = LOAN_SMOOTHING_FACTOR

    NAME: ClassVar[str] = "illustration"
    DEDUCTS_BENEFITS: ClassVar[bool] = True
    ALLOWS_LOANS: ClassVar[bool] = True

    def policy_values(self, schedule, row, policy_year, state):
        if state.has_deviated_from_illustration and policy_year > 1:
            cv_rate = schedule.cash_value_growth_rate(policy_year)
            db_rate = schedule.death_benefit_growth_rate(policy_year)
            return (
                state.previous_policy_value * (1 + cv_rate),
                state.previous_death_benefit * (1 + db_rate),
                db_rate,
            )
        return row.surrender_value, row.death_benefit, 0.0

    def policy_loan(self, config, age, shortfall, policy_value, balance, smoothed):
        capacity = max(0.0, policy_value * config.policy_max_loan_to_value_ratio - balance)
        raw = min(shortfall, capacity)
        if age < config.ltc_window_end:
            return raw, smoothed
        # Exponentially smoothed once the LTC window has ended, seeded by the first loan
        if age == config.ltc_window_end or smoothed <= 0:
            smoothed = raw
        else:
            smoothed = smoothed * self.smoothing_factor + raw * (1 - self.smoothing_factor)
        taken = min(smoothed, capacity)
        return taken, taken


@dataclass
class ScheduleProjection(ProjectionStrategy):
    """Treats the policy table as authoritative every year. No policy loans."""

    NAME: ClassVar[str] = "schedule"

    def policy_values(self, schedule, row, policy_year, state):
        value = row.surrender_value or row.accumulation_value
        return value, row.death_benefit, 0.0


STRATEGIES: dict[str, type[ProjectionStrategy]] = {
    cls.NAME: cls for cls in (IllustrationProjection, ScheduleProjection)
}


def get_strategy(name: str) -> ProjectionStrategy:
    """Instantiate a projection strategy by name."""
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown projection strategy {name!r} (expected one of {', '.join(STRATEGIES)})"
        ) from None
