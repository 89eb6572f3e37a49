"""Household combiner: merge two per-person projections by projection year."""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ltc_sim.records import AXIS_FIELDS, FLAG_FIELDS, NUMERIC_FIELDS, YearlyRecord

PREFIXES = ("p1", "p2")

# Per-person fields copied into household rows under p1_/p2_ prefixes
PERSON_FIELDS: tuple[str, ...] = tuple(
    f.name for f in dataclasses.fields(YearlyRecord) if f.name not in AXIS_FIELDS
)


@dataclass(frozen=True)
class HouseholdYearlyRecord:
    """One household projection year (k = 1 is each person's first simulated year)."""

    projection_year: int
    year: int
    age: int  # person 1's age when present, otherwise person 2's
    p1: YearlyRecord | None
    p2: YearlyRecord | None
    # Read-only sums of numeric fields and ORs of flags, keyed by person field name
    combined: Mapping[str, float | bool]
    combined_bankrupt: bool = False
    combined_bankrupt_age: int | None = None

    @property
    def combined_assets(self) -> float:
        return self.combined["assets"]

    @property
    def combined_policy_value(self) -> float:
        return self.combined["policy_value"]

    @property
    def combined_total_assets(self) -> float:
        return self.combined["total_assets"]

    def person(self, index: int) -> YearlyRecord | None:
        """Record of person 1 or 2 for this projection year."""
        return (self.p1, self.p2)[index - 1]

    def as_row(self) -> dict:
        """Flat mapping with p1_*, p2_* and combined_* keys for tabular export."""
        row = {
            "projection_year": self.projection_year,
            "year": self.year,
            "age": self.age,
        }
        for prefix, record in zip(PREFIXES, (self.p1, self.p2)):
            for name in PERSON_FIELDS:
                row[f"{prefix}_{name}"] = _person_value(record, name)
        for name, value in self.combined.items():
            row[f"combined_{name}"] = value
        row["combined_bankrupt"] = self.combined_bankrupt
        row["combined_bankrupt_age"] = self.combined_bankrupt_age
        return row


def _person_value(record: YearlyRecord | None, name: str):
    """Field value, or the empty value for a person without a record this year."""
    if record is not None:
        return getattr(record, name)
    if name in FLAG_FIELDS:
        return False
    if name == "ltc_benefit_ceiling":
        return None
    return 0


def _combine_fields(p1: YearlyRecord | None, p2: YearlyRecord | None) -> dict:
    present = [r for r in (p1, p2) if r is not None]
    combined: dict = {}
    for name in NUMERIC_FIELDS:
        combined[name] = sum(getattr(r, name) for r in present)
    for name in FLAG_FIELDS:
        combined[name] = any(getattr(r, name) for r in present)
    return combined


def combine_projections(
    p1: list[YearlyRecord] | None,
    p2: list[YearlyRecord] | None,
) -> list[HouseholdYearlyRecord]:
    """Align two projections by relative year and propagate household bankruptcy.

    Either side may be None (member absent or disabled). From the first year
    either person is bankrupt the household stays bankrupt; in every later
    year its investable assets are zero and only policy values remain.
    """
    p1 = p1 or []
    p2 = p2 or []
    rows: list[HouseholdYearlyRecord] = []
    bankrupt_age: int | None = None

    for k in range(1, max(len(p1), len(p2)) + 1):
        r1 = p1[k - 1] if k <= len(p1) else None
        r2 = p2[k - 1] if k <= len(p2) else None
        ref = r1 if r1 is not None else r2
        combined = _combine_fields(r1, r2)

        if bankrupt_age is not None:
            combined["assets"] = 0.0
            combined["total_assets"] = combined["policy_value"]
        elif combined["is_bankrupt"]:
            bankrupt_age = ref.age

        rows.append(HouseholdYearlyRecord(
            projection_year=k,
            year=ref.year,
            age=ref.age,
            p1=r1,
            p2=r2,
            combined=MappingProxyType(combined),
            combined_bankrupt=bankrupt_age is not None,
            combined_bankrupt_age=bankrupt_age,
        ))
    return rows
