"""Tests for the per-year cash flow steps."""

import pytest
from ltc_sim import HYBRID, TRADITIONAL, PersonConfig, PolicySchedule, PolicyYearRecord
from ltc_sim.cashflow import (
    basic_expenses,
    benefit_ceiling,
    fallback_policy_values,
    grow_assets,
    initial_premium,
    ltc_benefit,
    ltc_expenses,
    policy_year_for,
    premium_expense,
    retirement_income,
    traditional_benefit_ceiling,
    withdraw,
    work_income,
)


def _schedule(policy_type, **row):
    return PolicySchedule(
        policy_type=policy_type,
        initial_premium=8000,
        initial_death_benefit=200000,
        records=(PolicyYearRecord(policy_year=1, insured_age=60, **row),),
    )


class TestIncome:
    def setup_method(self):
        self.config = PersonConfig(
            annual_income=100000, annual_pay_increase_rate=0.03,
            social_security_income=24000, other_retirement_income=6000,
            general_inflation_rate=0.02,
        )

    def test_work_income_grows(self):
        assert work_income(self.config, 2, False, False) == pytest.approx(106090)

    def test_work_income_reduced_during_ltc(self):
        assert work_income(self.config, 0, False, True) == pytest.approx(20000)

    def test_no_work_income_when_retired(self):
        assert work_income(self.config, 5, True, False) == 0.0

    def test_retirement_income_inflated_from_start(self):
        ss, other = retirement_income(self.config, 1, True)
        assert ss == pytest.approx(24480)
        assert other == pytest.approx(6120)

    def test_no_retirement_income_while_working(self):
        assert retirement_income(self.config, 1, False) == (0.0, 0.0)


class TestExpenses:
    def setup_method(self):
        self.config = PersonConfig(
            annual_income=100000, income_replacement_ratio=0.6,
            general_inflation_rate=0.0, retirement_assets_tax_rate=0.25,
            ltc_cost_per_year=90000, ltc_inflation_rate=0.05,
        )

    def test_basic_expenses_when_retired(self):
        assert basic_expenses(self.config, 3, True, False) == pytest.approx(45000)

    def test_basic_expenses_during_pre_retirement_ltc(self):
        assert basic_expenses(self.config, 3, False, True) == pytest.approx(45000)

    def test_no_basic_expenses_while_working(self):
        assert basic_expenses(self.config, 3, False, False) == 0.0

    def test_ltc_expenses_inflated(self):
        assert ltc_expenses(self.config, 2, True) == pytest.approx(99225)
        assert ltc_expenses(self.config, 2, False) == 0.0


class TestPremium:
    def test_policy_disabled(self):
        config = PersonConfig(policy_enabled=False)
        assert premium_expense(config, None, None, 60, 3) == 0.0

    def test_fallback_premium_until_death_age(self):
        config = PersonConfig(policy_enabled=True, policy_annual_premium=3000, death_age=90)
        assert premium_expense(config, None, None, 89, 5) == 3000
        assert premium_expense(config, None, None, 90, 6) == 0.0

    def test_first_year_skipped_when_paid_from_assets(self):
        config = PersonConfig(
            policy_enabled=True, initial_premium_from_assets=True,
            premiums_from_assets_pre_retirement=False,
        )
        assert premium_expense(config, None, None, 55, 0) == 0.0

    def test_first_year_charged_otherwise(self):
        config = PersonConfig(
            policy_enabled=True, policy_annual_premium=3000,
            initial_premium_from_assets=False, premiums_from_assets_pre_retirement=False,
        )
        assert premium_expense(config, None, None, 55, 0) == 3000

    def test_schedule_premium(self):
        schedule = _schedule(TRADITIONAL, annual_premium=8000)
        config = PersonConfig(policy_enabled=True)
        assert premium_expense(config, schedule, schedule.lookup(1), 61, 1) == 8000

    def test_schedule_without_row(self):
        schedule = _schedule(TRADITIONAL, annual_premium=8000)
        config = PersonConfig(policy_enabled=True)
        assert premium_expense(config, schedule, None, 61, 1) == 0.0

    def test_initial_premium_source(self):
        config = PersonConfig(policy_enabled=True, initial_premium_from_assets=True, policy_annual_premium=3000)
        assert initial_premium(config, None) == 3000
        assert initial_premium(config, _schedule(TRADITIONAL)) == 8000
        assert initial_premium(PersonConfig(policy_enabled=True), None) == 0.0


class TestLtcBenefit:
    def setup_method(self):
        self.config = PersonConfig(
            policy_enabled=True, ltc_event_age=75,
            policy_benefit_per_year=80000, policy_benefit_duration_years=3,
        )

    def test_traditional_capped_by_monthly_limit(self):
        schedule = _schedule(TRADITIONAL, monthly_benefit_limit=2000, death_benefit=500000,
                             acceleration_percentage=100)
        benefit, ceiling = ltc_benefit(self.config, schedule, schedule.lookup(1), 75, 100000, 0)
        assert benefit == 24000
        assert ceiling == 500000

    def test_traditional_clipped_to_remaining_ceiling(self):
        schedule = _schedule(TRADITIONAL, monthly_benefit_limit=2000, death_benefit=50000,
                             acceleration_percentage=50)
        benefit, ceiling = ltc_benefit(self.config, schedule, schedule.lookup(1), 76, 100000, 24000)
        assert ceiling == 25000
        assert benefit == 1000

    def test_traditional_missing_acceleration_means_full(self):
        row = PolicyYearRecord(policy_year=1, insured_age=60, death_benefit=80000)
        assert traditional_benefit_ceiling(row) == 80000

    def test_traditional_ceiling_never_rises(self):
        schedule = _schedule(TRADITIONAL, death_benefit=60000, acceleration_percentage=100)
        assert benefit_ceiling(schedule, schedule.lookup(1)) == 60000
        assert benefit_ceiling(schedule, schedule.lookup(1), previous=20000) == 20000
        assert benefit_ceiling(schedule, schedule.lookup(1), previous=90000) == 60000

    def test_ceiling_without_row(self):
        assert benefit_ceiling(None, None, previous=20000) is None

    def test_hybrid_ceiling_from_row(self):
        schedule = _schedule(HYBRID, annual_ltc_benefit=60000, total_ltc_benefit=150000)
        assert benefit_ceiling(schedule, schedule.lookup(1), previous=20000) == 150000

    def test_traditional_benefit_against_lowered_ceiling(self):
        schedule = _schedule(TRADITIONAL, monthly_benefit_limit=2000, death_benefit=50000,
                             acceleration_percentage=100)
        benefit, ceiling = ltc_benefit(self.config, schedule, schedule.lookup(1), 76, 100000, 15000,
                                       previous_ceiling=20000)
        assert ceiling == 20000
        assert benefit == 5000

    def test_hybrid_clip(self):
        schedule = _schedule(HYBRID, annual_ltc_benefit=60000, total_ltc_benefit=150000)
        benefit, ceiling = ltc_benefit(self.config, schedule, schedule.lookup(1), 77, 100000, 120000)
        assert benefit == 30000
        assert ceiling == 150000

    def test_hybrid_ceiling_exhausted(self):
        schedule = _schedule(HYBRID, annual_ltc_benefit=60000, total_ltc_benefit=150000)
        benefit, _ = ltc_benefit(self.config, schedule, schedule.lookup(1), 78, 100000, 150000)
        assert benefit == 0.0

    def test_hybrid_uncapped_without_total(self):
        schedule = _schedule(HYBRID, annual_ltc_benefit=60000)
        benefit, ceiling = ltc_benefit(self.config, schedule, schedule.lookup(1), 78, 100000, 900000)
        assert benefit == 60000
        assert ceiling is None

    def test_hybrid_limited_by_cost(self):
        schedule = _schedule(HYBRID, annual_ltc_benefit=60000, total_ltc_benefit=150000)
        benefit, _ = ltc_benefit(self.config, schedule, schedule.lookup(1), 75, 40000, 0)
        assert benefit == 40000

    @pytest.mark.parametrize("age,expected", [(75, 80000), (77, 80000), (78, 0.0)])
    def test_fallback_benefit_window(self, age, expected):
        benefit, ceiling = ltc_benefit(self.config, None, None, age, 100000, 0)
        assert benefit == expected
        assert ceiling is None

    def test_fallback_when_schedule_has_no_row(self):
        schedule = _schedule(TRADITIONAL, monthly_benefit_limit=2000)
        benefit, _ = ltc_benefit(self.config, schedule, None, 75, 50000, 0)
        assert benefit == 50000


class TestPolicyValues:
    def test_fallback_values(self):
        config = PersonConfig(policy_annual_premium=3000, policy_benefit_per_year=80000,
                              policy_benefit_duration_years=3)
        assert fallback_policy_values(config, 0) == (0.0, 240000)
        assert fallback_policy_values(config, 10)[0] == pytest.approx(24000)
        assert fallback_policy_values(config, 40)[0] == pytest.approx(36000)

    def test_policy_year_from_issue_age(self):
        schedule = PolicySchedule(
            policy_type=TRADITIONAL, initial_premium=0, initial_death_benefit=0,
            records=(PolicyYearRecord(policy_year=1, insured_age=50),),
        )
        config = PersonConfig(current_age=55)
        assert policy_year_for(config, schedule, 55) == 6
        assert policy_year_for(config, None, 55) == 1


class TestWithdraw:
    def test_fully_covered(self):
        gross, tax, covered = withdraw(100000, 7000, 0.30)
        assert gross == pytest.approx(10000)
        assert tax == pytest.approx(3000)
        assert covered == 7000

    def test_bounded_by_assets(self):
        gross, tax, covered = withdraw(5000, 7000, 0.30)
        assert gross == 5000
        assert tax == pytest.approx(1500)
        assert covered == pytest.approx(3500)

    @pytest.mark.parametrize("available,needed", [(0, 1000), (1000, 0), (-5, 10)])
    def test_nothing_to_withdraw(self, available, needed):
        assert withdraw(available, needed, 0.3) == (0.0, 0.0, 0.0)


class TestGrowAssets:
    def setup_method(self):
        self.config = PersonConfig(
            annual_savings_contribution=10000,
            pre_retirement_asset_return_rate=0.10,
            retirement_asset_return_rate=0.05,
        )

    def test_first_year_no_growth(self):
        assert grow_assets(self.config, 100000, 0, 0, False, False) == 110000

    def test_withdraw_then_save_then_grow(self):
        assert grow_assets(self.config, 100000, 20000, 1, False, False) == pytest.approx(99000)

    def test_no_savings_during_ltc(self):
        assert grow_assets(self.config, 100000, 0, 1, False, True) == pytest.approx(110000)

    def test_retired_growth(self):
        assert grow_assets(self.config, 100000, 0, 1, True, False) == pytest.approx(105000)

    def test_clamped_at_zero(self):
        assert grow_assets(self.config, 1000, 5000, 1, True, False) == 0.0
