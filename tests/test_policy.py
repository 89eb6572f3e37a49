"""Tests for policy schedules and policy-year lookup."""

import json

import pytest
from ltc_sim import (
    HYBRID,
    TRADITIONAL,
    PolicySchedule,
    PolicyYearRecord,
    load_policy_schedule,
    lookup_policy_year,
    policy_schedule_from_dict,
)


def _schedule(years, policy_type=TRADITIONAL, issue_age=None, **row):
    records = tuple(
        PolicyYearRecord(policy_year=y, insured_age=60 + y - 1, **row) for y in years
    )
    return PolicySchedule(
        policy_type=policy_type,
        initial_premium=5000,
        initial_death_benefit=250000,
        records=records,
        issue_age=issue_age,
    )


class TestLookup:
    def setup_method(self):
        self.schedule = _schedule([1, 2, 5, 10])

    @pytest.mark.parametrize("target,expected", [
        (1, 1),
        (2, 2),
        (3, 2),
        (4, 2),
        (5, 5),
        (9, 5),
        (10, 10),
        (40, 10),
    ])
    def test_exact_or_closest_prior(self, target, expected):
        assert self.schedule.lookup(target).policy_year == expected

    def test_before_first_year(self):
        assert self.schedule.lookup(0) is None
        assert self.schedule.lookup(-3) is None

    def test_without_schedule(self):
        assert lookup_policy_year(None, 3) is None

    def test_module_lookup_delegates(self):
        assert lookup_policy_year(self.schedule, 7).policy_year == 5

    def test_schedule_starting_after_year_one(self):
        schedule = _schedule([3, 4])
        assert schedule.lookup(2) is None
        assert schedule.lookup(3).policy_year == 3


class TestScheduleValidation:
    def test_non_increasing_years_rejected(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            _schedule([1, 3, 3])

    def test_decreasing_years_rejected(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            _schedule([2, 1])

    def test_unknown_policy_type(self):
        with pytest.raises(ValueError, match="Unknown policy type"):
            _schedule([1], policy_type="universal")

    def test_empty_schedule_allowed(self):
        schedule = _schedule([])
        assert schedule.lookup(1) is None
        assert schedule.start_age is None


class TestGrowthRates:
    def setup_method(self):
        self.schedule = PolicySchedule(
            policy_type=TRADITIONAL,
            initial_premium=0,
            initial_death_benefit=100000,
            records=(
                PolicyYearRecord(1, 60, surrender_value=0, death_benefit=100000),
                PolicyYearRecord(2, 61, surrender_value=1000, death_benefit=100000),
                PolicyYearRecord(3, 62, surrender_value=1100, death_benefit=105000),
            ),
        )

    def test_year_over_year(self):
        assert self.schedule.cash_value_growth_rate(3) == pytest.approx(0.10)
        assert self.schedule.death_benefit_growth_rate(3) == pytest.approx(0.05)

    def test_zero_previous_value_guarded(self):
        assert self.schedule.cash_value_growth_rate(2) == 0.0

    def test_first_and_missing_years_default_to_zero(self):
        assert self.schedule.cash_value_growth_rate(1) == 0.0
        assert self.schedule.death_benefit_growth_rate(50) == 0.0


class TestStartAge:
    def test_explicit_issue_age(self):
        assert _schedule([1, 2], issue_age=58).start_age == 58

    def test_derived_from_first_record(self):
        schedule = PolicySchedule(
            policy_type=HYBRID,
            initial_premium=0,
            initial_death_benefit=0,
            records=(PolicyYearRecord(policy_year=3, insured_age=62),),
        )
        assert schedule.start_age == 60


POLICY_DOCUMENT = {
    "policy_level_information": {
        "product_name": "Care Plus IUL",
        "policy_type": "Traditional",
        "insured_person_age": 55,
        "initial_premium": 12000,
        "initial_death_benefit": 400000,
        "riders_and_features": [
            {"rider_feature_name": "Waiver of Premium"},
            {"rider_feature_name": "Chronic Illness Accelerated Benefit", "acceleration_percentage_elected": 50},
        ],
    },
    "annual_policy_data": [
        {"policy_year": 1, "insured_age": 55, "annual_premium": 12000, "surrender_value": 4000,
         "death_benefit": 400000, "monthly_benefit_limit": 4000, "acceleration_percentage": 25},
        {"policy_year": 2, "insured_age": 56, "annual_premium": 12000, "surrender_value": 9000,
         "death_benefit": 400000, "monthly_benefit_limit": 4000},
    ],
}


class TestPolicyDocument:
    def setup_method(self):
        self.schedule = policy_schedule_from_dict(POLICY_DOCUMENT)

    def test_level_information(self):
        assert self.schedule.policy_type == TRADITIONAL
        assert self.schedule.product_name == "Care Plus IUL"
        assert self.schedule.start_age == 55
        assert self.schedule.initial_premium == 12000

    def test_out_of_order_rows_rejected(self):
        document = dict(POLICY_DOCUMENT)
        document["annual_policy_data"] = list(reversed(POLICY_DOCUMENT["annual_policy_data"]))
        with pytest.raises(ValueError, match="strictly increasing"):
            policy_schedule_from_dict(document)

    def test_rows_kept_in_document_order(self):
        assert [r.policy_year for r in self.schedule.records] == [1, 2]

    def test_row_acceleration_wins_over_rider(self):
        assert self.schedule.lookup(1).acceleration_percentage == 25

    def test_rider_acceleration_fills_missing(self):
        assert self.schedule.lookup(2).acceleration_percentage == 50

    def test_hybrid_fields_optional(self):
        row = self.schedule.lookup(1)
        assert row.annual_ltc_benefit is None
        assert row.total_ltc_benefit is None

    def test_load_from_json_list(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text(json.dumps([POLICY_DOCUMENT]), encoding="utf-8")
        schedule = load_policy_schedule(path)
        assert schedule.lookup(2).surrender_value == 9000

    def test_load_empty_list(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError, match="No policy"):
            load_policy_schedule(path)
