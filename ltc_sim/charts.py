"""Chart generation for projection results."""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from ltc_sim.household import HouseholdYearlyRecord
from ltc_sim.records import YearlyRecord

SERIES_COLORS = {
    "assets": "#1f77b4",        # blue
    "policy_value": "#2ca02c",  # green
    "death_benefit": "#9467bd", # purple
    "loan_balance": "#d62728",  # red
}

EXPENSE_COLORS = {
    "basic": "#66c2a5",
    "ltc": "#fc8d62",
    "premium": "#8da0cb",
}


def _format_currency_axis(ax: plt.Axes):
    """Thousands separators on the Y axis, millions on a secondary axis."""
    ax.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x:,.0f}")
    )
    ax_right = ax.secondary_yaxis("right")
    ax_right.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x / 1e6:.1f}M" if x != 0 else "0")
    )
    ax_right.set_ylabel("")


def _shade_ltc_window(ax: plt.Axes, records: list[YearlyRecord]):
    ltc_ages = [r.age for r in records if r.has_ltc_event]
    if ltc_ages:
        ax.axvspan(min(ltc_ages), max(ltc_ages) + 1, color="#fdd0a2", alpha=0.3, label="LTC event")


def _mark_bankruptcy(ax: plt.Axes, age: int | None):
    if age is None:
        return
    ax.axvline(age, color="#d62728", linewidth=2, linestyle=":")
    ax.annotate(
        f"Assets exhausted at {age}",
        xy=(age, ax.get_ylim()[1] * 0.85),
        fontsize=11, fontweight="bold", color="#d62728",
        ha="right",
        bbox=dict(boxstyle="round,pad=0.3", fc="white", ec="#d62728", alpha=0.9),
    )


def _save(fig, output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"{stem}{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def plot_trajectory(
    records: list[YearlyRecord], output_path: Path, name: str = "", title: str = "",
) -> Path:
    """Generate a line chart of assets, policy value, death benefit and loan balance.

    Args:
        records: simulate_person() output.
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "p1" → "trajectory-p1.png").

    Returns:
        Path to the generated PNG file.
    """
    if not records:
        raise ValueError("No records for trajectory chart")

    fig, ax = plt.subplots(figsize=(14, 8))
    ages = [r.age for r in records]
    ax.plot(ages, [r.assets for r in records], label="Investable assets",
            color=SERIES_COLORS["assets"], linewidth=2)
    ax.plot(ages, [r.policy_value for r in records], label="Policy value",
            color=SERIES_COLORS["policy_value"], linewidth=2)
    ax.plot(ages, [r.death_benefit for r in records], label="Death benefit",
            color=SERIES_COLORS["death_benefit"], linewidth=1.5, linestyle="--")
    if any(r.policy_loan_balance > 0 for r in records):
        ax.plot(ages, [r.policy_loan_balance for r in records], label="Policy loan balance",
                color=SERIES_COLORS["loan_balance"], linewidth=1.5, linestyle="-.")
    _shade_ltc_window(ax, records)

    ax.set_xlabel("Age")
    ax.set_ylabel("Value ($)")
    ax.set_title(title or "Asset and policy value trajectory")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_currency_axis(ax)
    _mark_bankruptcy(ax, next((r.age for r in records if r.is_bankrupt), None))
    return _save(fig, output_path, "trajectory", name)


def plot_cashflow_stack(
    records: list[YearlyRecord], output_path: Path, name: str = "", title: str = "",
) -> Path:
    """Generate a stacked expense chart against income plus LTC benefits."""
    if not records:
        raise ValueError("No records for cashflow chart")

    fig, ax = plt.subplots(figsize=(14, 7))
    ages = [r.age for r in records]
    ax.stackplot(
        ages,
        [r.basic_expenses for r in records],
        [r.ltc_expenses for r in records],
        [r.premium_expenses for r in records],
        labels=["Basic living", "LTC care", "Premiums"],
        colors=[EXPENSE_COLORS["basic"], EXPENSE_COLORS["ltc"], EXPENSE_COLORS["premium"]],
        alpha=0.75,
    )
    ax.plot(ages, [r.total_income for r in records], color="#1f77b4", linewidth=2, label="Income")
    ax.plot(
        ages,
        [r.total_income + r.ltc_benefits for r in records],
        color="#2ca02c",
        linewidth=1.8,
        linestyle="--",
        label="Income + LTC benefits",
    )

    ax.set_xlabel("Age")
    ax.set_ylabel("Annual amount ($)")
    ax.set_title(title or "Annual cash flow")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_currency_axis(ax)
    return _save(fig, output_path, "cashflow", name)


def plot_household(
    rows: list[HouseholdYearlyRecord], output_path: Path, name: str = "",
) -> Path:
    """Stacked per-person investable assets with combined policy value, by projection year."""
    if not rows:
        raise ValueError("No rows for household chart")

    fig, ax = plt.subplots(figsize=(14, 8))
    years = [r.year for r in rows]
    p1_assets = [r.p1.assets if r.p1 is not None else 0.0 for r in rows]
    p2_assets = [r.p2.assets if r.p2 is not None else 0.0 for r in rows]
    # Bankruptcy forces household investable assets to zero after the bankruptcy year
    scale = [0.0 if r.combined_bankrupt and r.combined_assets == 0 else 1.0 for r in rows]
    ax.stackplot(
        years,
        [a * s for a, s in zip(p1_assets, scale)],
        [b * s for b, s in zip(p2_assets, scale)],
        labels=["Person 1 assets", "Person 2 assets"],
        colors=["#1f77b4", "#ff7f0e"],
        alpha=0.6,
    )
    ax.plot(years, [r.combined_policy_value for r in rows], color=SERIES_COLORS["policy_value"],
            linewidth=2, label="Combined policy value")
    ax.plot(years, [r.combined_total_assets for r in rows], color="#333333",
            linewidth=1.5, linestyle="--", label="Combined total assets")

    bankrupt = next((r for r in rows if r.combined_bankrupt), None)
    if bankrupt is not None:
        ax.axvline(bankrupt.year, color="#d62728", linewidth=2, linestyle=":")
        ax.annotate(
            f"Household bankrupt (age {bankrupt.combined_bankrupt_age})",
            xy=(bankrupt.year, ax.get_ylim()[1] * 0.85),
            fontsize=11, fontweight="bold", color="#d62728",
            ha="right",
            bbox=dict(boxstyle="round,pad=0.3", fc="white", ec="#d62728", alpha=0.9),
        )

    ax.set_xlabel("Year")
    ax.set_ylabel("Value ($)")
    ax.set_title("Household assets")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_currency_axis(ax)
    return _save(fig, output_path, "household", name)
