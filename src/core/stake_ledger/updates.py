"""State transition functions for `stake_ledger`.

One pure function per action. Each returns a new `PoolState` with the action's
updates applied.

Semantics:
- updates evaluate against the PRE-state,
- zero-amount calls return the input state unchanged,
- we implement updates via `dataclasses.replace()` on frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import replace

from .math import (
    compound_inactive_burned,
    gross_up_burned,
    loss_ratio,
    release_split,
    split_loss,
    yield_delta,
)
from .types import ActionParams, BucketDelta, PoolState, UnstakeBucket


def _with_totals(state: PoolState, **changes: object) -> PoolState:
    """`replace()` that keeps the cached `total_burnable` in sync."""
    new_state = replace(state, **changes)
    return replace(new_state, total_burnable=new_state.active_stake + new_state.inactive_stake)


def plan_release(state: PoolState, quota: int) -> tuple[list[BucketDelta], int]:
    """Walk the queue in FIFO order and decide what a release of ``quota`` takes.

    Returns the per-bucket deltas and the unused part of the quota. Every bucket
    draw is priced at the pool's burn ratio at the start of the call. Iteration
    stops as soon as the quota is exhausted; buckets past that point are not
    visited.
    """
    deltas: list[BucketDelta] = []
    for index, bucket in enumerate(state.buckets):
        if quota == 0:
            break
        if bucket.resolved:
            continue
        take = min(quota, bucket.remaining)
        released, burned = release_split(take, state.inactive_stake, state.inactive_burned)
        deltas.append(BucketDelta(index=index, take=take, released=released, burned=burned))
        quota -= take
    return deltas, quota


def apply_loss(state: PoolState, params: ActionParams) -> PoolState:
    if params.amount == 0:
        return state
    lr = loss_ratio(params.amount, state.active_stake + state.inactive_stake)
    active_loss, inactive_loss = split_loss(params.amount, state.active_stake, state.inactive_stake)
    inactive_after = state.inactive_stake - inactive_loss
    return _with_totals(
        state,
        active_stake=state.active_stake - active_loss,
        inactive_stake=inactive_after,
        inactive_burned=compound_inactive_burned(
            state.inactive_stake, state.inactive_burned, inactive_after, lr,
        ),
    )


def apply_release_unstakes(state: PoolState, params: ActionParams) -> PoolState:
    deltas, _unused = plan_release(state, params.amount)
    if not deltas:
        return state

    buckets = list(state.buckets)
    for d in deltas:
        b = buckets[d.index]
        buckets[d.index] = replace(b, released=b.released + d.released, burned=b.burned + d.burned)

    return _with_totals(
        state,
        inactive_stake=state.inactive_stake - sum(d.take for d in deltas),
        inactive_burned=state.inactive_burned - sum(d.burned for d in deltas),
        buckets=tuple(buckets),
    )


def apply_request_unstake(state: PoolState, params: ActionParams) -> PoolState:
    if params.amount == 0:
        return state
    inactive_after = state.inactive_stake + params.amount
    bucket = UnstakeBucket(
        requested=params.amount,
        virtual_requested=gross_up_burned(state.inactive_stake, state.inactive_burned, params.amount),
    )
    return _with_totals(
        state,
        active_stake=state.active_stake - params.amount,
        inactive_stake=inactive_after,
        inactive_burned=gross_up_burned(state.inactive_stake, state.inactive_burned, inactive_after),
        buckets=state.buckets + (bucket,),
    )


def apply_yield(state: PoolState, params: ActionParams) -> PoolState:
    if params.yield_bps == 0:
        return state
    return _with_totals(
        state,
        active_stake=state.active_stake + yield_delta(state.active_stake, params.yield_bps),
    )
