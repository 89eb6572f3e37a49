"""TOML config loader with CLI > config > default resolution."""

import argparse
import dataclasses
import sys
import tomllib
from collections.abc import Callable
from pathlib import Path

from ltc_sim.params import PersonConfig
from ltc_sim.policy import PolicySchedule, load_policy_schedule
from ltc_sim.strategies import STRATEGIES

DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULTS = {
    "strategy": "illustration",
    "start_year": None,  # None = current calendar year
}

PERSON_SECTIONS = ("person1", "person2")
PERSON_KEYS = frozenset(f.name for f in dataclasses.fields(PersonConfig))
POLICY_FILE_KEY = "policy_file"

# Person 1 fields overridable from the command line: flag dest → type
PERSON_FLAGS = {
    "current_age": int,
    "retirement_age": int,
    "death_age": int,
    "starting_assets": float,
    "annual_income": float,
    "ltc_event_age": int,
    "ltc_duration_years": int,
    "ltc_cost_per_year": float,
}
PERSON_TOGGLES = ("ltc_event_enabled", "policy_enabled", "policy_loan_enabled")


def load_config(path: Path | None = None) -> dict:
    """Load TOML config file. Returns empty dict if file doesn't exist."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"Failed to read config file: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    # Policy files are resolved relative to the config file
    for section in PERSON_SECTIONS:
        table = raw.get(section)
        if isinstance(table, dict) and POLICY_FILE_KEY in table:
            table[POLICY_FILE_KEY] = str(path.parent / table[POLICY_FILE_KEY])
    return raw


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared projection flags (person flags apply to person 1)."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="Config file path (default: config.toml)")
    parser.add_argument(
        "--strategy", choices=sorted(STRATEGIES), default=None,
        help=f"Projection strategy (default: {DEFAULTS['strategy']})",
    )
    parser.add_argument("--start-year", type=int, default=None, help="Calendar year of the first projected age (default: this year)")
    parser.add_argument("--policy-file", type=Path, default=None, help="Person 1 policy schedule JSON")
    for name, kind in PERSON_FLAGS.items():
        default = getattr(PersonConfig, name)
        parser.add_argument(
            f"--{name.replace('_', '-')}", type=kind, default=None,
            help=f"Person 1 {name.replace('_', ' ')} (default: {default:g})",
        )
    for name in PERSON_TOGGLES:
        flag = name.removesuffix("_enabled").replace("_", "-")
        parser.add_argument(
            f"--{flag}", dest=name, action=argparse.BooleanOptionalAction, default=None,
            help=f"Person 1 {name.replace('_', ' ')}",
        )
    return parser


def _person_table(config: dict, section: str) -> dict | None:
    table = config.get(section)
    if table is None:
        return None
    if not isinstance(table, dict):
        raise ValueError(f"[{section}] must be a table")
    unknown = sorted(set(table) - PERSON_KEYS - {POLICY_FILE_KEY})
    if unknown:
        raise ValueError(f"Unknown key(s) in [{section}]: {', '.join(unknown)}")
    return dict(table)


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > config.toml > hardcoded default.

    Person tables are returned under "person1"/"person2"; person1 always
    exists, person2 only when configured.
    """
    resolved = {}
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, default)

    person1 = _person_table(config, "person1") or {}
    for name in (*PERSON_FLAGS, *PERSON_TOGGLES):
        cli_val = getattr(args, name, None)
        if cli_val is not None:
            person1[name] = cli_val
    policy_file = getattr(args, POLICY_FILE_KEY, None)
    if policy_file is not None:
        person1[POLICY_FILE_KEY] = str(policy_file)
    resolved["person1"] = person1
    resolved["person2"] = _person_table(config, "person2")
    return resolved


def build_person(table: dict, default_name: str) -> tuple[PersonConfig, PolicySchedule | None]:
    """Build a PersonConfig and its optional policy schedule from a resolved person table."""
    values = {k: v for k, v in table.items() if k in PERSON_KEYS}
    values.setdefault("name", default_name)
    schedule = None
    if table.get(POLICY_FILE_KEY):
        schedule = load_policy_schedule(Path(table[POLICY_FILE_KEY]))
        values.setdefault("policy_enabled", True)
    return PersonConfig(**values), schedule


def build_household(r: dict) -> list[tuple[PersonConfig, PolicySchedule | None] | None]:
    """[(config, schedule) for person 1, same or None for person 2]."""
    members = [build_person(r["person1"], "Person 1")]
    members.append(build_person(r["person2"], "Person 2") if r["person2"] is not None else None)
    return members


def parse_args(
    description: str,
    add_args_fn: Callable[[argparse.ArgumentParser], None] | None = None,
) -> tuple[dict, list[tuple[PersonConfig, PolicySchedule | None] | None], argparse.Namespace]:
    """Parse CLI args, load config, resolve values and build the household.

    Returns (resolved_dict, members, namespace). Configuration errors are
    printed to stderr and exit with status 1.
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args()
    config = load_config(args.config)
    try:
        r = resolve(args, config)
        members = build_household(r)
    except (ValueError, KeyError, OSError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        raise SystemExit(1)
    return r, members, args
