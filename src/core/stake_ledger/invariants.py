"""Invariant checkers for `stake_ledger`.

Each function returns True when the invariant holds. `check_all()` returns the
list of violated state invariant IDs (empty = all pass).

`check_transition()` covers the two-state rules of the unstake queue: buckets
are append-only, their accumulators never decrease, and a resolved bucket never
changes again.
"""

from __future__ import annotations

from typing import Callable

from .math import RESOLUTION_TOLERANCE
from .types import PoolState, UnstakeBucket


def inv_active_nonneg(s: PoolState) -> bool:
    return s.active_stake >= 0


def inv_inactive_nonneg(s: PoolState) -> bool:
    return s.inactive_stake >= 0


def inv_inactive_burned_nonneg(s: PoolState) -> bool:
    return s.inactive_burned >= 0


def inv_inactive_burned_bounded(s: PoolState) -> bool:
    return s.inactive_burned <= s.inactive_stake


def inv_total_burnable_cached(s: PoolState) -> bool:
    return s.total_burnable == s.active_stake + s.inactive_stake


def inv_bucket_fields_nonneg(s: PoolState) -> bool:
    return all(
        b.requested >= 0 and b.virtual_requested >= 0 and b.released >= 0 and b.burned >= 0
        for b in s.buckets
    )


def inv_bucket_within_requested(s: PoolState) -> bool:
    return all(b.released + b.burned <= b.requested + RESOLUTION_TOLERANCE for b in s.buckets)


def inv_bucket_fifo(s: PoolState) -> bool:
    """Only the first unresolved bucket may be partially released."""
    seen_open = False
    for b in s.buckets:
        if seen_open and b.touched:
            return False
        if not b.resolved:
            seen_open = True
    return True


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[PoolState], bool]] = {
    "inv_active_nonneg": inv_active_nonneg,
    "inv_inactive_nonneg": inv_inactive_nonneg,
    "inv_inactive_burned_nonneg": inv_inactive_burned_nonneg,
    "inv_inactive_burned_bounded": inv_inactive_burned_bounded,
    "inv_total_burnable_cached": inv_total_burnable_cached,
    "inv_bucket_fields_nonneg": inv_bucket_fields_nonneg,
    "inv_bucket_within_requested": inv_bucket_within_requested,
    "inv_bucket_fifo": inv_bucket_fifo,
}


def check_all(state: PoolState) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state)
    ]


# ---------------------------------------------------------------------------
# Transition rules
# ---------------------------------------------------------------------------

def _bucket_step_ok(old: UnstakeBucket, new: UnstakeBucket) -> bool:
    if old.resolved:
        return new == old
    return (
        new.requested == old.requested
        and new.virtual_requested == old.virtual_requested
        and new.released >= old.released
        and new.burned >= old.burned
    )


def tr_buckets_append_only(pre: PoolState, post: PoolState) -> bool:
    return len(post.buckets) >= len(pre.buckets)


def tr_buckets_monotone(pre: PoolState, post: PoolState) -> bool:
    return all(_bucket_step_ok(old, new) for old, new in zip(pre.buckets, post.buckets))


TRANSITION_REGISTRY: dict[str, Callable[[PoolState, PoolState], bool]] = {
    "tr_buckets_append_only": tr_buckets_append_only,
    "tr_buckets_monotone": tr_buckets_monotone,
}


def check_transition(pre: PoolState, post: PoolState) -> list[str]:
    """Return list of violated transition rule IDs (empty = all pass)."""
    return [
        tr_id
        for tr_id, check_fn in TRANSITION_REGISTRY.items()
        if not check_fn(pre, post)
    ]
