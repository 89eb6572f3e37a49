"""Long-Term Care Insurance Projection Package."""

from ltc_sim.params import PersonConfig, gross_up, growth_rate
from ltc_sim.policy import (
    HYBRID,
    TRADITIONAL,
    PolicySchedule,
    PolicyYearRecord,
    load_policy_schedule,
    lookup_policy_year,
    policy_schedule_from_dict,
)
from ltc_sim.records import SimulationState, YearlyRecord
from ltc_sim.strategies import (
    IllustrationProjection,
    ProjectionStrategy,
    ScheduleProjection,
    STRATEGIES,
    get_strategy,
)
from ltc_sim.household import HouseholdYearlyRecord, combine_projections
from ltc_sim.simulation import simulate_household, simulate_person, validate_person
from ltc_sim.summary import summarize_household, summarize_person
from ltc_sim.scenarios import SCENARIOS, compare_policy, run_scenarios

__all__ = [
    "PersonConfig",
    "gross_up",
    "growth_rate",
    "HYBRID",
    "TRADITIONAL",
    "PolicySchedule",
    "PolicyYearRecord",
    "load_policy_schedule",
    "lookup_policy_year",
    "policy_schedule_from_dict",
    "SimulationState",
    "YearlyRecord",
    "IllustrationProjection",
    "ProjectionStrategy",
    "ScheduleProjection",
    "STRATEGIES",
    "get_strategy",
    "HouseholdYearlyRecord",
    "combine_projections",
    "simulate_household",
    "simulate_person",
    "validate_person",
    "summarize_household",
    "summarize_person",
    "SCENARIOS",
    "compare_policy",
    "run_scenarios",
]
