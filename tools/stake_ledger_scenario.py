#!/usr/bin/env python3
"""
Replay a YAML stake-ledger scenario and print the resulting pool.

A scenario is an opening pool plus an ordered list of operations:

    schema: stake-ledger/scenario/v1
    decimals: 18            # optional; amounts below are decimal token strings
    pool:
      active_stake: "1000"
      inactive_stake: "500"
      buckets: ["100"]
    steps:
      - apply_loss: "150"
      - release_unstakes: "50"
      - request_unstake: "100"
      - apply_yield: "5"    # percent, at most 2 decimal places
      - apply_loss: "134.5"

Fail-closed: a malformed scenario or a rejected step stops the replay with
exit code 1. `STAKE_LEDGER_DECIMALS` sets the default decimals when neither the
file nor `--decimals` does.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.core.stake_ledger import (
    WAD,
    Action,
    Effect,
    PoolState,
    StakeLedger,
    StakeLedgerError,
    pool_burn_ratio,
    state_to_dict,
)

SCHEMA = "stake-ledger/scenario/v1"
DEFAULT_DECIMALS = 18
MAX_DECIMALS = 36
YIELD_DECIMALS = 2  # percent with two decimals == basis points

_STEP_ACTIONS: dict[str, Action] = {a.value: a for a in Action}


@dataclass(frozen=True)
class ScenarioError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ScenarioStep:
    action: Action
    value: int  # base units, or basis points for apply_yield


@dataclass(frozen=True)
class Scenario:
    decimals: int
    active_stake: int
    inactive_stake: int
    inactive_burned: int
    buckets: tuple[int, ...]
    steps: tuple[ScenarioStep, ...]


@dataclass
class ScenarioRun:
    ledger: StakeLedger
    opening: PoolState
    effects: list[Effect] = field(default_factory=list)
    states: list[PoolState] = field(default_factory=list)  # post-state of each step


# -- config ------------------------------------------------------------------

def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


# -- decimal <-> base units --------------------------------------------------

def parse_units(raw: Any, decimals: int, *, name: str) -> int:
    """Convert a decimal amount (str/int/float literal) into integer base units."""
    if isinstance(raw, bool):
        raise ScenarioError(f"{name} must be a decimal number")
    if isinstance(raw, int):
        text = str(raw)
    elif isinstance(raw, float):
        text = repr(raw)
    elif isinstance(raw, str):
        text = raw.strip()
    else:
        raise ScenarioError(f"{name} must be a decimal number")

    if not text or text == "-":
        raise ScenarioError(f"{name} must be a decimal number")
    negative = text.startswith("-")
    digits = text[1:] if negative else text
    whole, _, frac = digits.partition(".")
    if not whole:
        whole = "0"
    if not whole.isdigit() or (frac and not frac.isdigit()):
        raise ScenarioError(f"{name} is not a plain decimal: {text!r}")
    if len(frac) > decimals:
        raise ScenarioError(f"{name} has more than {decimals} decimal places: {text!r}")

    value = int(whole) * 10**decimals + int((frac or "0").ljust(decimals, "0")[:decimals] or "0")
    return -value if negative else value


def format_units(value: int, decimals: int) -> str:
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10**decimals)
    if decimals == 0 or frac == 0:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{str(frac).rjust(decimals, '0').rstrip('0')}"


def format_ratio(ratio: int) -> str:
    return format_units(ratio, len(str(WAD)) - 1)


# -- loading -----------------------------------------------------------------

def _require_mapping(obj: Any, *, name: str) -> dict[str, Any]:
    if not isinstance(obj, dict):
        raise ScenarioError(f"{name} must be an object")
    return obj


def _require_list(obj: Any, *, name: str) -> list[Any]:
    if not isinstance(obj, list):
        raise ScenarioError(f"{name} must be a list")
    return obj


def _parse_step(raw: Any, decimals: int, *, name: str) -> ScenarioStep:
    entry = _require_mapping(raw, name=name)
    if len(entry) != 1:
        raise ScenarioError(f"{name} must have exactly one operation key")
    (op, value), = entry.items()
    action = _STEP_ACTIONS.get(op)
    if action is None:
        raise ScenarioError(f"{name}: unknown operation {op!r}")
    if action is Action.APPLY_YIELD:
        return ScenarioStep(action=action, value=parse_units(value, YIELD_DECIMALS, name=f"{name}.{op}"))
    return ScenarioStep(action=action, value=parse_units(value, decimals, name=f"{name}.{op}"))


def parse_scenario(text: str, *, decimals: int | None = None) -> Scenario:
    """Parse scenario YAML. ``decimals`` overrides the file and the environment."""
    root = _require_mapping(yaml.safe_load(text), name="scenario")

    schema = root.get("schema", SCHEMA)
    if schema != SCHEMA:
        raise ScenarioError(f"unsupported scenario schema: {schema}")

    if decimals is None:
        file_decimals = root.get("decimals")
        if file_decimals is None:
            decimals = _env_int("STAKE_LEDGER_DECIMALS", DEFAULT_DECIMALS, lo=0, hi=MAX_DECIMALS)
        elif isinstance(file_decimals, bool) or not isinstance(file_decimals, int):
            raise ScenarioError("decimals must be an integer")
        else:
            decimals = file_decimals
    if not 0 <= decimals <= MAX_DECIMALS:
        raise ScenarioError(f"decimals must be within 0..{MAX_DECIMALS}")

    pool = _require_mapping(root.get("pool", {}), name="pool")
    buckets = _require_list(pool.get("buckets", []), name="pool.buckets")
    steps = _require_list(root.get("steps", []), name="steps")

    return Scenario(
        decimals=decimals,
        active_stake=parse_units(pool.get("active_stake", 0), decimals, name="pool.active_stake"),
        inactive_stake=parse_units(pool.get("inactive_stake", 0), decimals, name="pool.inactive_stake"),
        inactive_burned=parse_units(pool.get("inactive_burned", 0), decimals, name="pool.inactive_burned"),
        buckets=tuple(
            parse_units(b, decimals, name=f"pool.buckets[{i}]") for i, b in enumerate(buckets)
        ),
        steps=tuple(_parse_step(s, decimals, name=f"steps[{i}]") for i, s in enumerate(steps)),
    )


def load_scenario(path: Path, *, decimals: int | None = None) -> Scenario:
    return parse_scenario(path.read_text(encoding="utf-8"), decimals=decimals)


# -- replay ------------------------------------------------------------------

_DISPATCH = {
    Action.APPLY_LOSS: StakeLedger.apply_loss,
    Action.RELEASE_UNSTAKES: StakeLedger.release_unstakes,
    Action.REQUEST_UNSTAKE: StakeLedger.request_unstake,
    Action.APPLY_YIELD: StakeLedger.apply_yield,
}


def run_scenario(scenario: Scenario) -> ScenarioRun:
    """Replay every step. Raises ``StakeLedgerError`` on the first rejected step."""
    try:
        ledger = StakeLedger.open(
            scenario.active_stake,
            scenario.inactive_stake,
            scenario.inactive_burned,
            scenario.buckets,
        )
    except StakeLedgerError as exc:
        raise ScenarioError(f"invalid opening pool: {exc}") from exc
    run = ScenarioRun(ledger=ledger, opening=ledger.state)
    for s in scenario.steps:
        run.effects.append(_DISPATCH[s.action](ledger, s.value))
        run.states.append(ledger.state)
    return run


def _describe(state: PoolState, decimals: int) -> str:
    return (
        f"active={format_units(state.active_stake, decimals)} "
        f"inactive={format_units(state.inactive_stake, decimals)} "
        f"inactive_burned={format_units(state.inactive_burned, decimals)} "
        f"burn_ratio={format_ratio(pool_burn_ratio(state))}"
    )


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Replay a stake-ledger scenario file.")
    ap.add_argument("scenario", type=Path)
    ap.add_argument("--decimals", type=int, default=None)
    ap.add_argument("--json", action="store_true", help="print the final state as JSON")
    args = ap.parse_args(argv)

    if not args.scenario.exists():
        print(f"missing scenario file: {args.scenario}", file=sys.stderr)
        return 2
    try:
        scenario = load_scenario(args.scenario, decimals=args.decimals)
    except (ScenarioError, yaml.YAMLError) as exc:
        print(f"scenario invalid: {exc}", file=sys.stderr)
        return 1

    try:
        run = run_scenario(scenario)
    except (ScenarioError, StakeLedgerError) as exc:
        print(f"[stake-ledger] FAIL: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    if args.json:
        out = {
            "state": state_to_dict(run.ledger.state),
            "burn_ratio": run.ledger.burn_ratio,
            "steps": [
                {"action": p.action.value, "amount": p.amount, "yield_bps": p.yield_bps, "event": e.event.value}
                for p, e in run.ledger.history
            ],
        }
        print(json.dumps(out, indent=2, sort_keys=True))
        return 0

    dec = scenario.decimals
    print(f"[stake-ledger] open: {_describe(run.opening, dec)}")
    for i, (s, effect, post) in enumerate(zip(scenario.steps, run.effects, run.states), start=1):
        print(f"[stake-ledger] step {i} {s.action.value}: {_describe(post, dec)}")
        for d in effect.bucket_deltas:
            print(
                f"[stake-ledger]   bucket {d.index}: take={format_units(d.take, dec)} "
                f"released={format_units(d.released, dec)} burned={format_units(d.burned, dec)}"
            )
    for i, b in enumerate(run.ledger.buckets):
        print(
            f"[stake-ledger] bucket {i}: requested={format_units(b.requested, dec)} "
            f"virtual_requested={format_units(b.virtual_requested, dec)} "
            f"released={format_units(b.released, dec)} burned={format_units(b.burned, dec)}"
        )
    print(f"[stake-ledger] total_burnable={format_units(run.ledger.total_burnable, dec)}")
    print("[stake-ledger] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
