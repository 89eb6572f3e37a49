"""Policy illustration schedule and policy-year lookup."""

import json
from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path

from ltc_sim.params import growth_rate

TRADITIONAL = "traditional"
HYBRID = "hybrid"
POLICY_TYPES = (TRADITIONAL, HYBRID)


@dataclass(frozen=True)
class PolicyYearRecord:
    """One row of the insurer's annual illustration."""

    policy_year: int
    insured_age: int
    annual_premium: float = 0.0
    accumulation_value: float = 0.0
    surrender_value: float = 0.0
    death_benefit: float = 0.0
    acceleration_percentage: float = 0.0
    monthly_payout_percentage: float = 0.0
    monthly_benefit_limit: float = 0.0
    # Hybrid policies only
    annual_ltc_benefit: float | None = None
    total_ltc_benefit: float | None = None


@dataclass
class PolicySchedule:
    """Immutable illustration table keyed by policy year (1-based, strictly increasing)."""

    policy_type: str
    initial_premium: float
    initial_death_benefit: float
    records: tuple[PolicyYearRecord, ...]
    issue_age: int | None = None
    product_name: str = ""

    # Derived indexes (built once in __post_init__)
    _by_year: dict[int, PolicyYearRecord] = field(default_factory=dict, init=False, repr=False)
    _years: list[int] = field(default_factory=list, init=False, repr=False)
    _cash_value_growth: dict[int, float] = field(default_factory=dict, init=False, repr=False)
    _death_benefit_growth: dict[int, float] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        if self.policy_type not in POLICY_TYPES:
            raise ValueError(
                f"Unknown policy type {self.policy_type!r} (expected one of {', '.join(POLICY_TYPES)})"
            )
        self.records = tuple(self.records)
        prev_year = 0
        for rec in self.records:
            if rec.policy_year <= prev_year:
                raise ValueError(
                    f"Policy years must be strictly increasing from 1: "
                    f"year {rec.policy_year} follows year {prev_year}"
                )
            prev_year = rec.policy_year
        self._by_year = {rec.policy_year: rec for rec in self.records}
        self._years = [rec.policy_year for rec in self.records]

        # Illustration growth rates, keyed by the later policy year of each pair
        for prev, rec in zip(self.records, self.records[1:]):
            self._cash_value_growth[rec.policy_year] = growth_rate(
                rec.surrender_value, prev.surrender_value,
            )
            self._death_benefit_growth[rec.policy_year] = growth_rate(
                rec.death_benefit, prev.death_benefit,
            )

    @property
    def is_hybrid(self) -> bool:
        return self.policy_type == HYBRID

    @property
    def start_age(self) -> int | None:
        """Insured age at issue (policy year 1)."""
        if self.issue_age is not None:
            return self.issue_age
        if not self.records:
            return None
        first = self.records[0]
        return first.insured_age - first.policy_year + 1

    def lookup(self, policy_year: int) -> PolicyYearRecord | None:
        """Exact policy year, else the closest prior year, else None."""
        rec = self._by_year.get(policy_year)
        if rec is not None:
            return rec
        idx = bisect_right(self._years, policy_year)
        if idx == 0:
            return None
        return self.records[idx - 1]

    def cash_value_growth_rate(self, policy_year: int) -> float:
        return self._cash_value_growth.get(policy_year, 0.0)

    def death_benefit_growth_rate(self, policy_year: int) -> float:
        return self._death_benefit_growth.get(policy_year, 0.0)


def lookup_policy_year(
    schedule: PolicySchedule | None, policy_year: int,
) -> PolicyYearRecord | None:
    """Return the schedule row for policy_year (or closest prior). None without a schedule."""
    if schedule is None:
        return None
    return schedule.lookup(policy_year)


def _rider_acceleration(riders: list[dict]) -> float:
    """Elected acceleration percentage of the chronic/LTC rider, 0 if none."""
    for rider in riders:
        name = str(rider.get("rider_feature_name", "")).lower()
        if "chronic" in name or "long-term care" in name or "ltc" in name:
            return float(rider.get("acceleration_percentage_elected") or 0)
    return 0.0


def _optional_float(v) -> float | None:
    return None if v is None else float(v)


def policy_schedule_from_dict(data: dict) -> PolicySchedule:
    """Build a PolicySchedule from the policy document shape (snake_case JSON).

    Expects ``policy_level_information`` and ``annual_policy_data`` keys.
    Rows without an acceleration percentage inherit the rider's elected value.
    """
    info = data.get("policy_level_information", {})
    rows = data.get("annual_policy_data", [])
    rider_accel = _rider_acceleration(info.get("riders_and_features", []))

    records = []
    for row in rows:
        accel = float(row.get("acceleration_percentage") or 0) or rider_accel
        records.append(PolicyYearRecord(
            policy_year=int(row["policy_year"]),
            insured_age=int(row["insured_age"]),
            annual_premium=float(row.get("annual_premium") or 0),
            accumulation_value=float(row.get("accumulation_value") or 0),
            surrender_value=float(row.get("surrender_value") or 0),
            death_benefit=float(row.get("death_benefit") or 0),
            acceleration_percentage=accel,
            monthly_payout_percentage=float(row.get("monthly_payout_percentage") or 0),
            monthly_benefit_limit=float(row.get("monthly_benefit_limit") or 0),
            annual_ltc_benefit=_optional_float(row.get("annual_ltc_benefit")),
            total_ltc_benefit=_optional_float(row.get("total_ltc_benefit")),
        ))

    issue_age = info.get("insured_person_age")
    return PolicySchedule(
        policy_type=str(info.get("policy_type", TRADITIONAL)).lower(),
        initial_premium=float(info.get("initial_premium") or 0),
        initial_death_benefit=float(info.get("initial_death_benefit") or 0),
        records=tuple(records),
        issue_age=int(issue_age) if issue_age is not None else None,
        product_name=str(info.get("product_name", "")),
    )


def load_policy_schedule(path: Path) -> PolicySchedule:
    """Load a policy schedule JSON file. Accepts a single policy or a one-element list."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        if not data:
            raise ValueError(f"No policy found in {path}")
        data = data[0]
    return policy_schedule_from_dict(data)
