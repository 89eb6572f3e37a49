"""CLI entry point for a person or household projection."""

import sys

from ltc_sim.config import parse_args
from ltc_sim.household import HouseholdYearlyRecord
from ltc_sim.params import PersonConfig
from ltc_sim.policy import PolicySchedule
from ltc_sim.records import YearlyRecord
from ltc_sim.scenarios import compare_policy, run_scenarios
from ltc_sim.simulation import simulate_household
from ltc_sim.summary import HouseholdSummary, PersonSummary, summarize_household, summarize_person


def _add_cli_args(parser):
    parser.add_argument(
        "--every", type=int, default=5,
        help="Print every N-th year of the yearly table (default: 5)",
    )
    parser.add_argument(
        "--compare", action="store_true",
        help="Compare person 1 with and without the policy",
    )
    parser.add_argument(
        "--scenarios", action="store_true",
        help="Run person 1 under every assumption scenario",
    )


def _fmt(v: float) -> str:
    return f"{v:>12,.0f}"


def _print_header(config: PersonConfig, schedule: PolicySchedule | None, strategy: str):
    years = config.projection_years
    print(f"  {config.name}: age {config.current_age}-{config.death_age} ({years} years), "
          f"retires at {config.retirement_age}, starting assets {config.starting_assets:,.0f}")
    if config.ltc_event_enabled:
        print(f"    LTC event: age {config.ltc_event_age} for {config.ltc_duration_years} years, "
              f"{config.ltc_cost_per_year:,.0f}/yr (+{config.ltc_inflation_rate:.1%}/yr)")
    if not config.policy_enabled:
        print("    Policy: none")
    elif schedule is None:
        print(f"    Policy: simplified ({config.policy_benefit_per_year:,.0f}/yr for "
              f"{config.policy_benefit_duration_years} years, premium {config.policy_annual_premium:,.0f})")
    else:
        name = schedule.product_name or "unnamed product"
        print(f"    Policy: {name} ({schedule.policy_type}, issued at {schedule.start_age}, "
              f"{strategy} projection)")


def _print_yearly_table(name: str, records: list[YearlyRecord], every: int):
    print(f"\n[Yearly projection - {name}]")
    print("-" * 118)
    print(
        f"{'Age':<5}{'Year':<6}{'Income':>12}{'Expenses':>12}{'LTC benefit':>12}"
        f"{'Withdrawal':>12}{'Assets':>12}{'Policy val':>12}{'Death ben':>12}{'Loan bal':>12}  Flags"
    )
    print("-" * 118)
    for i, r in enumerate(records):
        if i % every != 0 and i != len(records) - 1 and not r.has_ltc_event:
            continue
        flags = "".join([
            "R" if r.is_retired else "",
            "L" if r.has_ltc_event else "",
            "B" if r.is_bankrupt else "",
        ])
        print(
            f"{r.age:<5}{r.year:<6}{_fmt(r.total_income)}{_fmt(r.total_expenses)}"
            f"{_fmt(r.ltc_benefits)}{_fmt(r.withdrawal)}{_fmt(r.assets)}"
            f"{_fmt(r.policy_value)}{_fmt(r.death_benefit)}{_fmt(r.policy_loan_balance)}  {flags}"
        )
    print("-" * 118)
    print("Flags: R=retired, L=LTC event, B=assets exhausted")


def _print_person_summary(s: PersonSummary):
    print(f"\n[Summary - {s.name}]")
    ret = s.retirement
    print(f"  Assets at retirement ({ret.retirement_age}): {ret.assets_at_retirement:>14,.0f}")
    print(f"  Final assets:                 {ret.final_assets:>14,.0f}")
    print(f"  Final total assets:           {ret.final_total_assets:>14,.0f}")
    if s.ltc is not None:
        ltc = s.ltc
        print(f"  LTC cost (lifetime):          {ltc.total_ltc_cost:>14,.0f}")
        print(f"  LTC benefits (lifetime):      {ltc.total_ltc_benefits:>14,.0f} "
              f"({ltc.total_coverage_ratio:.0%} covered)")
        print(f"  LTC out of pocket:            {ltc.total_out_of_pocket:>14,.0f}")
    a = s.assets
    print(f"  Premiums paid:                {a.total_premiums_paid:>14,.0f}")
    if a.total_loans_taken > 0:
        print(f"  Policy loans taken:           {a.total_loans_taken:>14,.0f} "
              f"(balance {a.final_loan_balance:,.0f})")
    print(f"  Amount to heirs:              {a.amount_to_heirs:>14,.0f}")
    if ret.bankrupt:
        print(f"    ⚠ Investable assets exhausted at age {ret.bankrupt_age}")


def _print_household(rows: list[HouseholdYearlyRecord], s: HouseholdSummary, every: int):
    print("\n[Household projection]")
    print("-" * 80)
    print(f"{'Year':<6}{'Age':<5}{'Assets':>14}{'Policy val':>14}{'Total':>14}{'LTC benefit':>14}  Bankrupt")
    print("-" * 80)
    for i, r in enumerate(rows):
        if i % every != 0 and i != len(rows) - 1:
            continue
        print(
            f"{r.year:<6}{r.age:<5}{r.combined_assets:>14,.0f}{r.combined_policy_value:>14,.0f}"
            f"{r.combined_total_assets:>14,.0f}{r.combined['ltc_benefits']:>14,.0f}"
            f"  {'yes' if r.combined_bankrupt else ''}"
        )
    print("-" * 80)
    print(f"  Final household assets:       {s.final_assets:>14,.0f}")
    print(f"  Household LTC out of pocket:  {s.total_out_of_pocket:>14,.0f}")
    print(f"  Household amount to heirs:    {s.amount_to_heirs:>14,.0f}")
    if s.key_ages.bankrupt_age is not None:
        print(f"    ⚠ Household bankrupt at age {s.key_ages.bankrupt_age}")


def _print_comparison(config: PersonConfig, schedule: PolicySchedule | None, strategy: str, start_year):
    comparison = compare_policy(config, schedule, strategy, start_year)
    print(f"\n[With vs without policy - {config.name}]")
    print(f"  Final total assets difference: {comparison.final_total_assets_difference:>+14,.0f}")
    print(f"  Amount to heirs difference:    {comparison.amount_to_heirs_difference:>+14,.0f}")
    print(f"  LTC out of pocket saved:       {comparison.ltc_out_of_pocket_saved:>14,.0f}")


def _print_scenarios(config: PersonConfig, schedule: PolicySchedule | None, strategy: str, start_year):
    print(f"\n[Assumption scenarios - {config.name}]")
    print(f"{'Scenario':<18}{'Final assets':>14}{'Final total':>14}{'Heirs':>14}")
    for name, records in run_scenarios(config, schedule, strategy, start_year).items():
        final = records[-1]
        print(f"{name:<18}{final.assets:>14,.0f}{final.total_assets:>14,.0f}"
              f"{final.death_benefit + final.assets:>14,.0f}")


def main():
    """Execute a household projection and print tables and summaries"""
    r, members, args = parse_args("Long-term care insurance projection", _add_cli_args)
    strategy = r["strategy"]
    start_year = r["start_year"]
    (p1_config, p1_schedule), second = members[0], members[1]
    p2_config, p2_schedule = second if second is not None else (None, None)

    print("=" * 80)
    print(f"LTC insurance projection ({strategy} strategy)")
    for config, schedule in (m for m in members if m is not None):
        if config.enabled:
            _print_header(config, schedule, strategy)
    print("=" * 80)

    try:
        rows = simulate_household(
            p1_config, p2_config, p1_schedule, p2_schedule, strategy, start_year,
        )
    except ValueError as e:
        print(f"\n{e}\n", file=sys.stderr)
        raise SystemExit(1)

    if not rows:
        print("\nNo enabled household members.")
        return

    for index, (config, _) in enumerate((m for m in members if m is not None), start=1):
        records = [row.person(index) for row in rows if row.person(index) is not None]
        if not records:
            continue
        _print_yearly_table(config.name, records, args.every)
        _print_person_summary(summarize_person(config, records))

    enabled = [c for c in (p1_config, p2_config) if c is not None and c.enabled]
    if len(enabled) > 1:
        _print_household(rows, summarize_household(rows, [p1_config, p2_config]), args.every)

    try:
        if args.compare:
            _print_comparison(p1_config, p1_schedule, strategy, start_year)
        if args.scenarios:
            _print_scenarios(p1_config, p1_schedule, strategy, start_year)
    except ValueError as e:
        print(f"\n{e}\n", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
