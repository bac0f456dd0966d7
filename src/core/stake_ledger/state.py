"""State construction, read accessors and serialization for `stake_ledger`.

`initial_state()` builds a pool from opening balances and fails closed if the
result violates any invariant.

Round-trip property (tested): `state_from_dict(state_to_dict(s)) == s` for all valid states.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .errors import LedgerInvariantError
from .invariants import check_all
from .math import burn_ratio
from .types import PoolState, UnstakeBucket

POOL_VAR_NAMES: tuple[str, ...] = tuple(
    name for name in PoolState.__dataclass_fields__ if name != "buckets"
)
BUCKET_VAR_NAMES: tuple[str, ...] = tuple(UnstakeBucket.__dataclass_fields__)


def initial_state(
    active_stake: int = 0,
    inactive_stake: int = 0,
    inactive_burned: int = 0,
    buckets: Iterable[UnstakeBucket | int] = (),
) -> PoolState:
    """Return an opening PoolState.

    ``buckets`` accepts ready-made ``UnstakeBucket`` values or plain requested
    amounts. ``total_burnable`` is always derived here.
    """
    queue = tuple(b if isinstance(b, UnstakeBucket) else UnstakeBucket(requested=int(b)) for b in buckets)
    state = PoolState(
        active_stake=active_stake,
        inactive_stake=inactive_stake,
        inactive_burned=inactive_burned,
        total_burnable=active_stake + inactive_stake,
        buckets=queue,
    )
    violations = check_all(state)
    if violations:
        raise LedgerInvariantError(violations)
    return state


# -- Read accessors ----------------------------------------------------------

def pool_burn_ratio(state: PoolState) -> int:
    """WAD-scaled fraction of the inactive pool that would be lost if withdrawn now."""
    return burn_ratio(state.inactive_stake, state.inactive_burned)


def total_stake(state: PoolState) -> int:
    """Live active + inactive sum (the authoritative counterpart of `total_burnable`)."""
    return state.active_stake + state.inactive_stake


def pending_unstake(state: PoolState) -> int:
    """Sum of the unresolved remainder of every bucket."""
    return sum(b.remaining for b in state.buckets)


def open_bucket_indices(state: PoolState) -> list[int]:
    return [i for i, b in enumerate(state.buckets) if not b.resolved]


# -- Serialization -----------------------------------------------------------

def _as_int(name: str, val: Any) -> int:
    if isinstance(val, bool) or not isinstance(val, int):
        raise TypeError(f"state var {name!r} must be int, got {type(val).__name__}")
    return int(val)  # normalize int subclasses (e.g. numpy)


def state_to_dict(state: PoolState) -> dict[str, Any]:
    """Serialize a PoolState to a plain dict (buckets as a list of dicts)."""
    out: dict[str, Any] = {name: getattr(state, name) for name in POOL_VAR_NAMES}
    out["buckets"] = [
        {name: getattr(b, name) for name in BUCKET_VAR_NAMES}
        for b in state.buckets
    ]
    return out


def state_from_dict(d: Mapping[str, Any]) -> PoolState:
    """Deserialize a dict to a PoolState. Raises KeyError on missing fields."""
    kwargs: dict[str, Any] = {name: _as_int(name, d[name]) for name in POOL_VAR_NAMES}
    buckets: list[UnstakeBucket] = []
    for i, raw in enumerate(d["buckets"]):
        buckets.append(
            UnstakeBucket(**{name: _as_int(f"buckets[{i}].{name}", raw[name]) for name in BUCKET_VAR_NAMES})
        )
    return PoolState(buckets=tuple(buckets), **kwargs)
