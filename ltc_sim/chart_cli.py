"""CLI entry point for chart generation."""

import sys
from pathlib import Path

from ltc_sim.charts import plot_cashflow_stack, plot_household, plot_trajectory
from ltc_sim.config import parse_args
from ltc_sim.simulation import simulate_household


def _add_chart_args(parser):
    parser.add_argument(
        "--output", type=Path, default=Path("reports/charts"),
        help="Output directory (default: reports/charts)",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="Output filename suffix (e.g. smith → trajectory-smith-p1.png)",
    )


def main():
    r, members, args = parse_args("LTC insurance projection charts", _add_chart_args)
    (p1_config, p1_schedule), second = members[0], members[1]
    p2_config, p2_schedule = second if second is not None else (None, None)
    output_dir = args.output

    print(f"Projecting household ({r['strategy']} strategy)...", file=sys.stderr)
    try:
        rows = simulate_household(
            p1_config, p2_config, p1_schedule, p2_schedule, r["strategy"], r["start_year"],
        )
    except ValueError as e:
        print(f"{e}", file=sys.stderr)
        raise SystemExit(1)

    if not rows:
        print("  No enabled household members (skipped)", file=sys.stderr)
        return

    for index, config in enumerate((p1_config, p2_config), start=1):
        records = [row.person(index) for row in rows if row.person(index) is not None]
        if not records:
            continue
        suffix = "-".join(p for p in (args.name, f"p{index}") if p)
        path = plot_trajectory(records, output_dir, name=suffix, title=f"{config.name}: assets and policy values")
        print(f"  → {path}", file=sys.stderr)
        path = plot_cashflow_stack(records, output_dir, name=suffix, title=f"{config.name}: annual cash flow")
        print(f"  → {path}", file=sys.stderr)

    if p2_config is not None and p2_config.enabled:
        path = plot_household(rows, output_dir, name=args.name)
        print(f"  → {path}", file=sys.stderr)

    print("Done", file=sys.stderr)


if __name__ == "__main__":
    main()
